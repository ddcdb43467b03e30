"""Tests for shared HTTP helpers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from skypack_proxy.common import http_client
from skypack_proxy.common.logging_utils import safe_url
from skypack_proxy.constants import Constants
from skypack_proxy.errors import TransportError


def _response(status=200, text="", headers=None):
    res = MagicMock()
    res.status_code = status
    res.text = text
    res.headers = headers or {}
    return res


class TestGetJson:
    """get_json parsing and status passthrough."""

    @patch("skypack_proxy.common.http_client.requests.get")
    def test_parses_json(self, mock_get):
        mock_get.return_value = _response(text='{"versions": {}}', headers={"Content-Type": "application/json"})

        status, headers, data = http_client.get_json("https://api.example/v1/package/x")

        assert status == 200
        assert headers["content-type"] == "application/json"
        assert data == {"versions": {}}
        assert mock_get.call_args.kwargs["timeout"] == Constants.REQUEST_TIMEOUT

    @patch("skypack_proxy.common.http_client.requests.get")
    def test_bad_json_is_none(self, mock_get):
        mock_get.return_value = _response(text="<html>")
        assert http_client.get_json("https://api.example/x")[2] is None

    @patch("skypack_proxy.common.http_client.requests.get")
    def test_non_200_is_none(self, mock_get):
        mock_get.return_value = _response(status=404, text='{"error": "nope"}')
        status, _, data = http_client.get_json("https://api.example/x")
        assert status == 404
        assert data is None

    @patch("skypack_proxy.common.http_client.requests.get")
    def test_timeout_raises_transport_error(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        with pytest.raises(TransportError) as excinfo:
            http_client.get_json("https://api.example/x")
        assert excinfo.value.reason == "timeout"
        assert mock_get.call_count == 1

    @patch("skypack_proxy.common.http_client.requests.get")
    def test_connection_error_raises_transport_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(TransportError):
            http_client.get_json("https://api.example/x")


class TestGetHeaders:
    """get_headers streams and closes the response."""

    @patch("skypack_proxy.common.http_client.requests.get")
    def test_lowercases_and_closes(self, mock_get):
        res = _response(headers={"X-Pinned-URL": "/pin/x"})
        mock_get.return_value = res

        status, headers = http_client.get_headers("https://cdn.example/x@1.0.0")

        assert status == 200
        assert headers == {"x-pinned-url": "/pin/x"}
        assert mock_get.call_args.kwargs["stream"] is True
        res.close.assert_called_once()


class TestSafeUrl:
    """Credential redaction for log output."""

    def test_redacts_userinfo_and_tokens(self):
        url = safe_url("https://user:pw@api.example/x?token=abc&page=2")
        assert "pw" not in url
        assert "abc" not in url
        assert "page=2" in url
