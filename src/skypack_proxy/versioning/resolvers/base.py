"""Base resolver interface shared by the tag and semver resolvers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ...reporting import Report
from ..models import Descriptor, Locator, PackageDescription


class Resolver(ABC):
    """A handler for one class of ``skypack:`` references.

    Handlers are tried in a fixed order; each answers whether it supports a
    descriptor or locator before being asked to do any work.
    """

    @abstractmethod
    def supports_descriptor(self, descriptor: Descriptor) -> bool:
        """Return True when this resolver can produce candidates for descriptor."""

    @abstractmethod
    def supports_locator(self, locator: Locator) -> bool:
        """Return True when this resolver can finalize locator."""

    @abstractmethod
    def should_persist_resolution(self, locator: Locator) -> bool:
        """Return True when the host may store the resolution in its lockfile."""

    @abstractmethod
    def get_candidates(self, descriptor: Descriptor, report: Optional[Report] = None) -> List[Locator]:
        """Return candidate locators, preferred first."""

    @abstractmethod
    def get_satisfying(self, descriptor: Descriptor, references: List[str]) -> List[Locator]:
        """Filter already-known references against descriptor, preferred first."""

    @abstractmethod
    def resolve(self, locator: Locator) -> PackageDescription:
        """Turn a locator into an installable package description."""
