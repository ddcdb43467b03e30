"""Skeleton package generation."""

from .exports import ExportEntry, resolve_export_map
from .skeleton import FetchResult, SkeletonFetcher, build_manifest, skeleton_source

__all__ = [
    "ExportEntry",
    "FetchResult",
    "SkeletonFetcher",
    "build_manifest",
    "resolve_export_map",
    "skeleton_source",
]
