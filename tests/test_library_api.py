"""Tests for tubeten public library API."""

from unittest.mock import patch

import pytest

import tubeten
from fakes import catalog_with
from tubeten import ImportSummary, ServiceOptions, import_pool
from tubeten.core.errors import InvalidReferenceError, MissingCredentialError


class TestExports:
    def test_version_exported(self):
        assert isinstance(tubeten.__version__, str)

    def test_all(self):
        for name in ("import_pool", "ServiceOptions", "ImportSummary", "Pool", "PoolEntry"):
            assert name in tubeten.__all__


class TestImportPool:
    def test_invalid_reference(self):
        with pytest.raises(InvalidReferenceError):
            import_pool("https://example.com/?v=1", ServiceOptions(yt_api_key="k"))

    def test_missing_credential(self):
        with pytest.raises(MissingCredentialError):
            import_pool("PLlib0000001", ServiceOptions())

    @patch("tubeten.services.catalog.YouTubeCatalogClient.from_options")
    def test_summary(self, mock_client):
        mock_client.return_value = catalog_with(["a", "b", "c"])
        summary = import_pool(
            "https://www.youtube.com/playlist?list=PLlib0000001",
            ServiceOptions(yt_api_key="k"),
        )
        assert isinstance(summary, ImportSummary)
        assert summary.identifier == "PLlib0000001"
        assert summary.count == 3
        assert summary.served_from_cache is False

    @patch("tubeten.services.catalog.YouTubeCatalogClient.from_options")
    def test_file_cache_shared_between_calls(self, mock_client, tmp_path):
        catalog = catalog_with(["a"])
        mock_client.return_value = catalog
        opts = ServiceOptions(yt_api_key="k", cache_backend="file", cache_dir=tmp_path)

        first = import_pool("PLlib0000001", opts)
        second = import_pool("PLlib0000001", opts)

        assert first.served_from_cache is False
        assert second.served_from_cache is True
        assert mock_client.call_count == 1

    @patch("tubeten.services.catalog.YouTubeCatalogClient.from_options")
    def test_memory_cache_shared_between_calls(self, mock_client):
        mock_client.return_value = catalog_with(["a", "b"])
        opts = ServiceOptions(yt_api_key="k", cache_backend="memory")

        first = import_pool("PLlib0000002", opts)
        second = import_pool("PLlib0000002", ServiceOptions(yt_api_key="k", cache_backend="memory"))

        assert first.served_from_cache is False
        assert second.served_from_cache is True
        assert second.count == 2
        assert mock_client.call_count == 1
