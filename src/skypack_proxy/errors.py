"""Error taxonomy for resolution and skeleton generation."""

from __future__ import annotations

from typing import Optional

from .constants import MessageName


class SkypackError(Exception):
    """Base class for recoverable pipeline failures."""

    message_name = MessageName.RESOLVER_NOT_FOUND

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(SkypackError):
    """Raised by the HTTP helpers when a request never produced a response."""

    message_name = MessageName.FETCH_FAILED

    def __init__(self, url: str, reason: str):
        super().__init__(f"Request to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class InvalidRange(SkypackError):
    """The descriptor's payload is not a semver range."""

    message_name = MessageName.INVALID_RANGE


class TagNotFound(SkypackError):
    """The registry's dist-tags lack the requested tag."""

    message_name = MessageName.REMOTE_NOT_FOUND

    def __init__(self, tag: str):
        super().__init__(f'Skypack failed to resolve tag "{tag}"')
        self.tag = tag


class RegistryDataInvalid(SkypackError):
    """The registry answered, but with data we cannot use."""

    message_name = MessageName.REMOTE_INVALID


class NotSemver(SkypackError):
    """A locator reference does not reduce to an exact version."""

    message_name = MessageName.RESOLVER_NOT_FOUND

    def __init__(self, reference: str):
        super().__init__(
            f"The Skypack semver resolver got selected, but the version isn't semver ({reference})"
        )
        self.reference = reference


class _FetchFailed(SkypackError):
    message_name = MessageName.FETCH_FAILED

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class MetadataFetchFailed(_FetchFailed):
    """Registry metadata could not be retrieved."""

    def __init__(self, url: str, status: Optional[int] = None, reason: Optional[str] = None):
        detail = f" (status {status})" if status is not None else ""
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(f"Couldn't lookup package data from {url}{detail}", url, status)


class UpstreamFetchFailed(_FetchFailed):
    """The CDN lookup URL did not answer with a success status."""

    def __init__(self, url: str, status: Optional[int] = None, reason: Optional[str] = None):
        if status is not None:
            message = f"{url} responded with code {status}"
        else:
            message = f"{url} could not be reached: {reason}"
        super().__init__(message, url, status)


class NoMatchingCondition(SkypackError):
    """A conditional export entry has no supported branch."""

    message_name = MessageName.REMOTE_INVALID

    def __init__(self, path: str, conditions):
        super().__init__(
            f"No supported export condition for {path!r} (available: {', '.join(conditions) or 'none'})"
        )
        self.path = path
        self.conditions = list(conditions)


class ChecksumMismatch(SkypackError):
    """The cached or generated artifact does not match the expected checksum."""

    message_name = MessageName.CACHE_CHECKSUM_MISMATCH

    def __init__(self, key: str, expected: str, actual: str):
        super().__init__(f"Checksum mismatch for {key}: expected {expected}, got {actual}")
        self.key = key
        self.expected = expected
        self.actual = actual


class Unreachable(AssertionError):
    """A pipeline wiring bug; never handled at runtime."""

    def __init__(self, detail: str = "Unreachable"):
        super().__init__(detail)
