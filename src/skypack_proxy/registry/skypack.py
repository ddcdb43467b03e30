"""Skypack package API client: registry metadata for an identity."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..common.http_client import get_json
from ..common.logging_utils import Timer, extra_context, safe_url
from ..constants import Constants
from ..errors import MetadataFetchFailed, RegistryDataInvalid, TransportError
from ..versioning.models import Identity, RegistryMetadata
from ..versioning.parser import ident_url

logger = logging.getLogger(__name__)


def package_url(identity: Identity, api_base: Optional[str] = None) -> str:
    """Return the package document URL for identity."""
    base = (api_base or Constants.API_URL).rstrip("/")
    return f"{base}/v1/package{ident_url(identity)}"


def _object_or_none(value: Any):
    return value if isinstance(value, dict) else None


def _keywords(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(k) for k in value if isinstance(k, (str, int, float))]
    return []


def parse_registry_metadata(data: Any) -> RegistryMetadata:
    """Normalize a decoded package document.

    Raises:
        RegistryDataInvalid: When the document is not a JSON object.
    """
    if not isinstance(data, dict):
        raise RegistryDataInvalid("Skypack API returned invalid data: expected a JSON object")
    return RegistryMetadata(
        versions=_object_or_none(data.get("versions")),
        dist_tags=_object_or_none(data.get("distTags")),
        is_deprecated=bool(data.get("isDeprecated", False)),
        description=data.get("description") or "",
        license=data.get("license") or "",
        keywords=_keywords(data.get("keywords")),
        raw=data,
    )


def fetch_registry_metadata(identity: Identity) -> RegistryMetadata:
    """Fetch and normalize registry metadata for identity.

    Raises:
        MetadataFetchFailed: On transport failure or a non-200 status.
        RegistryDataInvalid: When the body is not a JSON object.
    """
    url = package_url(identity)
    with Timer() as timer:
        try:
            status_code, _, data = get_json(url, context="registry")
        except TransportError as exc:
            raise MetadataFetchFailed(url, reason=exc.reason) from exc

    logger.debug(
        "Registry metadata fetched",
        extra=extra_context(
            event="http_response",
            component="registry",
            action="fetch_registry_metadata",
            status_code=status_code,
            duration_ms=timer.duration_ms(),
            target=safe_url(url),
        ),
    )

    if status_code != 200:
        raise MetadataFetchFailed(url, status=status_code)
    if data is None:
        raise RegistryDataInvalid(f"Skypack API returned invalid data: {url} is not JSON")
    return parse_registry_metadata(data)
