"""Shared HTTP helpers used by the registry client and the skeleton fetcher.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. Every call performs exactly one request;
retry policy belongs to whoever drives the pipeline.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from ..constants import Constants
from ..errors import TransportError
from .logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "registry", "cdn").
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object, whatever its status.

    Raises:
        TransportError: On timeouts and connection failures.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise TransportError(safe_target, "timeout") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise TransportError(safe_target, str(exc)) from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def _lower_headers(headers: Any) -> Dict[str, str]:
    return {str(k).lower(): str(v) for k, v in dict(headers or {}).items()}


def get_json(
    url: str,
    *,
    context: str = "registry",
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response with DEBUG traces.

    Args:
        url: Target URL
        context: Log tag
        headers: Optional request headers

    Returns:
        Tuple of (status_code, lowercased_headers, parsed_json_or_none)
    """
    res = safe_get(url, context=context, headers=headers)
    response_headers = _lower_headers(res.headers)

    if res.status_code == 200 and res.text:
        try:
            parsed = json.loads(res.text)
        except json.JSONDecodeError:
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=res.status_code,
                    target=safe_url(url)
                )
            )
            return res.status_code, response_headers, None
        return res.status_code, response_headers, parsed

    return res.status_code, response_headers, None


def get_headers(url: str, *, context: str = "cdn") -> Tuple[int, Dict[str, str]]:
    """Issue a GET and return only (status_code, lowercased_headers).

    The body is streamed and dropped unread.
    """
    res = safe_get(url, context=context, stream=True)
    try:
        return res.status_code, _lower_headers(res.headers)
    finally:
        res.close()
