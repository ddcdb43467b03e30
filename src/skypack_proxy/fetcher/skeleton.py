"""Skeleton fetcher: builds thin packages re-exporting Skypack CDN modules."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..cache.archive import make_archive_from_directory
from ..cache.store import ArtifactCache, cache_key
from ..common.http_client import get_headers
from ..common.logging_utils import Timer, extra_context, safe_url
from ..constants import Constants, MessageName
from ..errors import NotSemver, RegistryDataInvalid, TransportError, UpstreamFetchFailed
from ..registry.skypack import fetch_registry_metadata
from ..reporting import Report
from ..versioning.models import Locator, RegistryMetadata
from ..versioning.parser import clean_version, ident_url, strip_protocol, stringify_ident, vendor_path
from .exports import ExportEntry, module_file_for, resolve_export_map

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Packaged artifact for one locator."""

    archive: bytes
    checksum: str
    prefix_path: str
    cache_key: str


def skeleton_source(url: str) -> str:
    """Return the two-line module re-exporting everything from url."""
    return f'export * from "{url}";\nexport {{default}} from "{url}";\n'


def build_manifest(
    locator: Locator,
    version: str,
    data: RegistryMetadata,
    main_file: str = Constants.MAIN_FILE,
    extra_files: Optional[List[str]] = None,
    exports: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Return the package.json object for a skeleton package."""
    manifest: Dict[str, Any] = {
        "name": locator.identity.full_name,
        "version": version,
        "type": "module",
        "description": data.description or "",
        "license": data.license or "",
        "keywords": list(data.keywords or []),
        "main": main_file,
        "module": main_file,
        "browser": main_file,
        "files": [main_file] + [f for f in (extra_files or []) if f != main_file],
    }
    if exports:
        manifest["exports"] = exports
    return manifest


def lookup_url(locator: Locator, version: str) -> str:
    """Return the deterministic CDN lookup URL for locator at version."""
    return f"{Constants.CDN_URL.rstrip('/')}{ident_url(locator.identity)}@{version}"


def _unique_file(filename: str, taken) -> str:
    stem = filename[: -len(".mjs")]
    while filename in taken:
        stem += "_"
        filename = f"{stem}.mjs"
    return filename


def _package_path(cwd: str, filename: str) -> str:
    root = os.path.realpath(cwd)
    path = os.path.realpath(os.path.join(root, filename))
    if not path.startswith(root + os.sep):
        raise RegistryDataInvalid(f"Skypack API returned invalid data: {filename!r} is outside the package")
    return path


class SkeletonFetcher:
    """Generate and cache skeleton packages for ``skypack:`` locators."""

    def __init__(
        self,
        compression_level: Optional[int] = None,
        expand_export_maps: Optional[bool] = None,
    ):
        """Initialize the fetcher.

        Args:
            compression_level: Archive compression level; defaults to
                ``Constants.COMPRESSION_LEVEL``.
            expand_export_maps: Emit one module per ``exports`` entry when the
                registry provides an export map.
        """
        self.compression_level = (
            Constants.COMPRESSION_LEVEL if compression_level is None else compression_level
        )
        self.expand_export_maps = (
            Constants.EXPAND_EXPORT_MAPS if expand_export_maps is None else expand_export_maps
        )

    def supports(self, locator: Locator) -> bool:
        return strip_protocol(locator.reference) is not None

    def fetch(
        self,
        locator: Locator,
        cache: ArtifactCache,
        report: Optional[Report] = None,
        expected_checksum: Optional[str] = None,
    ) -> FetchResult:
        """Return the artifact for locator, generating it through the cache on a miss."""
        report = report if report is not None else Report()
        key = cache_key(locator)
        data, checksum = cache.get_or_generate(
            key,
            expected_checksum,
            lambda: self.generate(locator, report),
            on_hit=lambda: report.report_cache_hit(key),
            on_miss=lambda: report.report_cache_miss(
                key,
                f"{stringify_ident(locator.identity)}@{locator.reference} can't be found in the cache "
                "and will be generated with Skypack",
            ),
        )
        return FetchResult(
            archive=data,
            checksum=checksum,
            prefix_path=vendor_path(locator.identity),
            cache_key=key,
        )

    def resolve_import_url(self, locator: Locator, version: str, report: Report) -> str:
        """Probe the CDN and return the pinned URL, or the lookup URL as fallback.

        Raises:
            UpstreamFetchFailed: Transport failure or a non-200 status.
        """
        url = lookup_url(locator, version)
        with Timer() as timer:
            try:
                status, headers = get_headers(url, context="cdn")
            except TransportError as exc:
                raise UpstreamFetchFailed(url, reason=exc.reason) from exc
        logger.debug(
            "CDN lookup",
            extra=extra_context(
                event="http_response",
                component="fetcher",
                status_code=status,
                duration_ms=timer.duration_ms(),
                target=safe_url(url),
            ),
        )
        if status != 200:
            raise UpstreamFetchFailed(url, status=status)

        pinned = headers.get(Constants.PINNED_URL_HEADER)
        if not pinned:
            report.report_warning(
                MessageName.REMOTE_NOT_FOUND,
                f"{stringify_ident(locator.identity)}@{locator.reference} has no pinned URL available; "
                "falling back to lookup URL",
            )
            return url
        return f"{Constants.CDN_URL.rstrip('/')}{pinned}"

    def _export_entries(self, data: RegistryMetadata, version: str) -> List[ExportEntry]:
        if not self.expand_export_maps:
            return []
        exports = None
        version_meta = (data.versions or {}).get(version)
        if isinstance(version_meta, dict):
            exports = version_meta.get("exports")
        if exports is None:
            exports = data.raw.get("exports")
        if exports is None:
            return []
        return resolve_export_map(exports)

    def generate(self, locator: Locator, report: Optional[Report] = None) -> bytes:
        """Build the skeleton archive for locator.

        Raises:
            NotSemver: The locator does not pin an exact version.
            MetadataFetchFailed: Registry metadata was unavailable.
            UpstreamFetchFailed: The CDN lookup failed.
            NoMatchingCondition: An export map entry had no usable condition.
            RegistryDataInvalid: An export map subpath was unsafe.
        """
        report = report if report is not None else Report()
        payload = strip_protocol(locator.reference)
        parsed = clean_version(payload) if payload is not None else None
        if parsed is None:
            raise NotSemver(locator.reference)
        version = str(parsed)

        data = fetch_registry_metadata(locator.identity)
        full_url = self.resolve_import_url(locator, version, report)

        main_file = Constants.MAIN_FILE
        sources = {main_file: skeleton_source(full_url)}
        exports_field: Dict[str, str] = {}
        for entry in self._export_entries(data, version):
            if entry.subpath == ".":
                continue
            # main_file belongs to "." and keeps the pinned URL
            filename = _unique_file(module_file_for(entry.subpath, main_file), sources)
            sources[filename] = skeleton_source(f"{lookup_url(locator, version)}/{entry.subpath[2:]}")
            exports_field[entry.subpath] = f"./{filename}"
        if exports_field:
            exports_field = {".": f"./{main_file}", **exports_field}

        manifest = build_manifest(
            locator,
            version,
            data,
            main_file=main_file,
            extra_files=sorted(sources),
            exports=exports_field or None,
        )

        with tempfile.TemporaryDirectory(prefix="skypack-") as cwd:
            for filename, source in sources.items():
                path = _package_path(cwd, filename)
                os.makedirs(os.path.dirname(path), exist_ok=True)
                with open(path, "w", encoding="utf-8", newline="\n") as fh:
                    fh.write(source)
            with open(os.path.join(cwd, Constants.MANIFEST_FILE), "w", encoding="utf-8", newline="\n") as fh:
                fh.write(json.dumps(manifest, indent=2) + "\n")

            return make_archive_from_directory(
                cwd,
                prefix_path=vendor_path(locator.identity),
                compression_level=self.compression_level,
            )
