"""Tests for the Skypack package API client."""

from unittest.mock import patch

import pytest

from helpers import registry_doc, registry_response
from skypack_proxy.constants import Constants
from skypack_proxy.errors import MetadataFetchFailed, RegistryDataInvalid, TransportError
from skypack_proxy.registry.skypack import fetch_registry_metadata, package_url, parse_registry_metadata
from skypack_proxy.versioning.models import Identity


class TestPackageUrl:
    """Registry lookup URL construction."""

    def test_default_base(self):
        assert package_url(Identity("preact")) == "https://api.skypack.dev/v1/package/preact"

    def test_configured_base(self):
        Constants.API_URL = "http://localhost:9000/"
        assert package_url(Identity("x", "s")) == "http://localhost:9000/v1/package/@s/x"


class TestParseRegistryMetadata:
    """Normalization of the package document."""

    def test_full_document(self):
        data = parse_registry_metadata(
            registry_doc(
                ["1.0.0"],
                dist_tags={"latest": "1.0.0"},
                is_deprecated=True,
                description="desc",
                license="MIT",
                keywords=["a", "b"],
            )
        )
        assert list(data.versions) == ["1.0.0"]
        assert data.dist_tags == {"latest": "1.0.0"}
        assert data.is_deprecated is True
        assert (data.description, data.license, data.keywords) == ("desc", "MIT", ["a", "b"])

    def test_missing_optional_fields(self):
        data = parse_registry_metadata({"versions": "nope"})
        assert data.versions is None
        assert data.dist_tags is None
        assert data.is_deprecated is False
        assert (data.description, data.license, data.keywords) == ("", "", [])

    def test_non_object_document(self):
        with pytest.raises(RegistryDataInvalid):
            parse_registry_metadata(["1.0.0"])


class TestFetchRegistryMetadata:
    """Status and transport handling."""

    @patch("skypack_proxy.registry.skypack.get_json")
    def test_success(self, mock_get_json):
        mock_get_json.return_value = registry_response(registry_doc(["1.0.0"]))
        assert list(fetch_registry_metadata(Identity("preact")).versions) == ["1.0.0"]

    @patch("skypack_proxy.registry.skypack.get_json")
    def test_not_found(self, mock_get_json):
        mock_get_json.return_value = (404, {}, None)
        with pytest.raises(MetadataFetchFailed) as excinfo:
            fetch_registry_metadata(Identity("nope"))
        assert excinfo.value.status == 404
        assert excinfo.value.url == "https://api.skypack.dev/v1/package/nope"

    @patch("skypack_proxy.registry.skypack.get_json")
    def test_non_json_body(self, mock_get_json):
        mock_get_json.return_value = (200, {}, None)
        with pytest.raises(RegistryDataInvalid):
            fetch_registry_metadata(Identity("preact"))

    @patch("skypack_proxy.registry.skypack.get_json")
    def test_transport_error(self, mock_get_json):
        mock_get_json.side_effect = TransportError("https://api.skypack.dev/v1/package/preact", "timeout")
        with pytest.raises(MetadataFetchFailed) as excinfo:
            fetch_registry_metadata(Identity("preact"))
        assert excinfo.value.status is None
        assert isinstance(excinfo.value.__cause__, TransportError)
