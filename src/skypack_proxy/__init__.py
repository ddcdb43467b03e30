"""skypack-proxy: thin packages backed by the Skypack CDN.

Resolves ``skypack:`` references (npm ranges or dist-tags) against the
Skypack package API and generates skeleton packages whose single module
re-exports the real implementation from the CDN.
"""

from .fetcher import SkeletonFetcher
from .versioning.models import Descriptor, Identity, Locator, PackageDescription
from .versioning.service import VersionResolutionService

__version__ = "0.1.0"

__all__ = [
    "Descriptor",
    "Identity",
    "Locator",
    "PackageDescription",
    "SkeletonFetcher",
    "VersionResolutionService",
]
