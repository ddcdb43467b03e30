"""Builders for registry documents and pipeline inputs used across tests."""

from typing import Any, Dict, Iterable, Optional

from skypack_proxy.versioning.models import Descriptor, Identity, Locator


def registry_doc(
    versions: Optional[Iterable[str]] = None,
    dist_tags: Optional[Dict[str, Any]] = None,
    is_deprecated: bool = False,
    **extra: Any,
) -> Dict[str, Any]:
    """Build a Skypack package document."""
    doc: Dict[str, Any] = {
        "name": extra.pop("name", "preact"),
        "versions": {v: "2020-01-01T00:00:00.000Z" for v in (versions or [])},
        "distTags": dist_tags if dist_tags is not None else {},
        "isDeprecated": is_deprecated,
    }
    doc.update(extra)
    return doc


def registry_response(doc: Any, status: int = 200):
    """Return the (status, headers, data) tuple produced by get_json."""
    return status, {"content-type": "application/json"}, doc


def make_descriptor(name: str, reference: str, scope: Optional[str] = None) -> Descriptor:
    return Descriptor(Identity(name=name, scope=scope), reference)


def make_locator(name: str, reference: str, scope: Optional[str] = None) -> Locator:
    return Locator(Identity(name=name, scope=scope), reference)
