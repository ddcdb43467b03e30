"""Artifact cache bridge and archive packaging."""

from .archive import make_archive_from_directory
from .store import ArtifactCache, DirectoryArtifactCache, cache_key, compute_checksum

__all__ = [
    "ArtifactCache",
    "DirectoryArtifactCache",
    "cache_key",
    "compute_checksum",
    "make_archive_from_directory",
]
