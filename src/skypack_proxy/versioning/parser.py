"""Reference and identifier parsing utilities for package resolution."""

import logging
import re
from typing import Optional

import semantic_version

from ..constants import Constants
from .models import ClassifiedReference, Identity, ReferenceKind

logger = logging.getLogger(__name__)

# Same shape npm accepts for dist-tag names; anything starting with "v" is
# left to the range grammar.
TAG_RE = re.compile(r"^(?!v)[a-z0-9._-]+$", re.IGNORECASE)
_IDENT_RE = re.compile(r"^(?:@([^/@\s]+)/)?([^/@\s]+)$")


def parse_ident(text: str) -> Identity:
    """Parse ``@scope/name`` or ``name`` into an Identity."""
    m = _IDENT_RE.match(text.strip())
    if not m:
        raise ValueError(f"Invalid package identifier: {text!r}")
    return Identity(name=m.group(2), scope=m.group(1))


def stringify_ident(identity: Identity) -> str:
    """Return the display form of an identity."""
    return identity.full_name


def ident_url(identity: Identity) -> str:
    """Return the registry/CDN path segment for an identity."""
    scope_part = f"@{identity.scope}/" if identity.scope else ""
    return f"/{scope_part}{identity.name}"


def vendor_path(identity: Identity) -> str:
    """Return the archive root for an identity."""
    return f"{Constants.VENDOR_DIR}/{identity.full_name}"


def strip_protocol(reference: str) -> Optional[str]:
    """Return the payload after the resolution scheme, or None."""
    if not reference.startswith(Constants.PROTOCOL):
        return None
    return reference[len(Constants.PROTOCOL):]


def with_protocol(payload: str) -> str:
    return f"{Constants.PROTOCOL}{payload}"


def parse_range(payload: str) -> Optional[semantic_version.NpmSpec]:
    """Parse an npm range expression; None when it is not one."""
    try:
        return semantic_version.NpmSpec(payload.strip())
    except ValueError:
        return None


def parse_version(text: str) -> Optional[semantic_version.Version]:
    """Strictly parse a version string; None on garbage."""
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None


def clean_version(selector: str) -> Optional[semantic_version.Version]:
    """Trim whitespace and a leading ``=``/``v``, then require an exact version."""
    s = selector.strip()
    s = re.sub(r"^[=v]+", "", s)
    return parse_version(s.strip())


def is_tag(payload: str) -> bool:
    """True when payload matches the tag grammar and is not also a range."""
    return bool(TAG_RE.match(payload)) and parse_range(payload) is None


def classify_reference(reference: str) -> ClassifiedReference:
    """Classify a descriptor range into TAG, RANGE or UNSUPPORTED.

    The tag grammar is checked first. A payload such as ``1.2.3`` or ``x``
    matches it too but parses as a range, so it is classified as RANGE.
    """
    payload = strip_protocol(reference)
    if payload is None:
        return ClassifiedReference(ReferenceKind.UNSUPPORTED, None)
    if is_tag(payload):
        return ClassifiedReference(ReferenceKind.TAG, payload)
    if parse_range(payload) is not None:
        return ClassifiedReference(ReferenceKind.RANGE, payload)
    logger.debug("Unsupported reference: %s", reference)
    return ClassifiedReference(ReferenceKind.UNSUPPORTED, payload)
