"""Resolvers for ``skypack:`` references."""

from .base import Resolver
from .semver import SemverResolver
from .tag import TagResolver

__all__ = [
    "Resolver",
    "SemverResolver",
    "TagResolver",
]
