"""Tests for the storage and catalog clients."""
from unittest.mock import Mock, patch

import pytest
import requests

from space_cli.clients import CatalogClient, StorageClient, guess_content_type
from space_cli.errors import CatalogError, DuplicateVersionError, StorageError


def make_response(status_code=200, json_body=None, text="", content=b""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.content = content
    if json_body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_body
    if response.ok:
        response.raise_for_status = Mock()
    else:
        error = requests.exceptions.HTTPError(response=response)
        response.raise_for_status = Mock(side_effect=error)
    return response


class TestContentType:
    """Test MIME type guessing for storage keys."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("id/hello.json", "application/json"),
            ("id/main.zig", "application/octet-stream"),
            ("id/noext", "application/octet-stream"),
        ],
    )
    def test_guess(self, path, expected):
        """Test known extensions map to their type and others to octet-stream."""
        assert guess_content_type(path) == expected


class TestStorageClient:
    """Test blob uploads."""

    @patch("requests.request")
    def test_upload(self, mock_request):
        """Test upload posts the bytes to the object URL with auth and type."""
        mock_request.return_value = make_response(200)
        client = StorageClient("https://example.supabase.co/", "token-123")

        client.upload("node-files", "abc/hello.json", b"{}")

        call_args = mock_request.call_args
        assert call_args[1]["method"] == "POST"
        assert call_args[1]["url"] == (
            "https://example.supabase.co/storage/v1/object/node-files/abc/hello.json"
        )
        assert call_args[1]["headers"]["Authorization"] == "Bearer token-123"
        assert call_args[1]["headers"]["Content-Type"] == "application/json"
        assert call_args[1]["data"] == b"{}"
        assert call_args[1]["timeout"] == 30

    @patch("requests.request")
    def test_bearer_prefix_not_doubled(self, mock_request):
        """Test a token that already carries Bearer is sent unchanged."""
        mock_request.return_value = make_response(200)
        client = StorageClient("https://example.supabase.co", "Bearer abc")

        client.upload("node-files", "x/y.wasm", b"")

        assert mock_request.call_args[1]["headers"]["Authorization"] == "Bearer abc"

    @patch("requests.request")
    def test_upload_http_error(self, mock_request):
        """Test a non-2xx response raises StorageError with the status code."""
        mock_request.return_value = make_response(400, text="Duplicate")
        client = StorageClient("https://example.supabase.co", "token")

        with pytest.raises(StorageError) as exc_info:
            client.upload("node-files", "x/y.wasm", b"")

        assert exc_info.value.status_code == 400

    @patch("requests.request")
    def test_upload_connection_error(self, mock_request):
        """Test transport failures are wrapped into StorageError."""
        mock_request.side_effect = requests.exceptions.ConnectionError("refused")
        client = StorageClient("https://example.supabase.co", "token")

        with pytest.raises(StorageError, match="Connection error"):
            client.upload("node-files", "x/y.wasm", b"")

    @patch("requests.request")
    def test_download(self, mock_request):
        """Test download returns the response body."""
        mock_request.return_value = make_response(200, content=b"bytes")
        client = StorageClient("https://example.supabase.co", "token")

        assert client.download("node-files", "x/y.wasm") == b"bytes"
        assert mock_request.call_args[1]["method"] == "GET"

    @patch("requests.request")
    def test_upload_uses_injected_session(self, mock_request):
        """Test requests go through a given session instead of the module."""
        session = Mock(spec=requests.Session)
        session.request.return_value = make_response(200)
        client = StorageClient("https://example.supabase.co", "token", session=session)

        client.upload("node-files", "x/y.wasm", b"wasm")

        mock_request.assert_not_called()
        call_args = session.request.call_args
        assert call_args[1]["method"] == "POST"
        assert call_args[1]["data"] == b"wasm"
        assert call_args[1]["timeout"] == 30


class TestCatalogClient:
    """Test catalog inserts."""

    @patch("requests.request")
    def test_insert(self, mock_request):
        """Test insert posts the record as JSON with both auth headers."""
        mock_request.return_value = make_response(201)
        client = CatalogClient("https://example.supabase.co", "anon-key", "token")

        client.insert("nodes", {"unique_node_id": "hello.0.1"})

        call_args = mock_request.call_args
        assert call_args[1]["method"] == "POST"
        assert call_args[1]["url"] == "https://example.supabase.co/rest/v1/nodes"
        assert call_args[1]["headers"]["apikey"] == "anon-key"
        assert call_args[1]["headers"]["Authorization"] == "Bearer token"
        assert call_args[1]["json"] == {"unique_node_id": "hello.0.1"}

    @patch("requests.request")
    def test_conflict_is_duplicate_version(self, mock_request):
        """Test a 409 conflict raises DuplicateVersionError for the node key."""
        mock_request.return_value = make_response(409, json_body={"code": "23505"})
        client = CatalogClient("https://example.supabase.co", "anon-key", "token")

        with pytest.raises(DuplicateVersionError) as exc_info:
            client.insert("nodes", {"unique_node_id": "hello.0.1"})

        assert exc_info.value.unique_node_id == "hello.0.1"

    @patch("requests.request")
    def test_unique_violation_code_without_409(self, mock_request):
        """Test the unique_violation code alone is reported as a duplicate."""
        mock_request.return_value = make_response(400, json_body={"code": "23505"})
        client = CatalogClient("https://example.supabase.co", "anon-key", "token")

        with pytest.raises(DuplicateVersionError):
            client.insert("nodes", {"unique_node_id": "hello.0.1"})

    @patch("requests.request")
    def test_other_rejection(self, mock_request):
        """Test other rejections raise a plain CatalogError."""
        mock_request.return_value = make_response(500, text="internal")
        client = CatalogClient("https://example.supabase.co", "anon-key", "token")

        with pytest.raises(CatalogError) as exc_info:
            client.insert("nodes", {})

        assert not isinstance(exc_info.value, DuplicateVersionError)
        assert exc_info.value.status_code == 500

    @patch("requests.request")
    def test_timeout(self, mock_request):
        """Test a timeout reports the configured limit."""
        mock_request.side_effect = requests.exceptions.Timeout()
        client = CatalogClient("https://example.supabase.co", "anon-key", "token", timeout=5)

        with pytest.raises(CatalogError, match="timeout after 5s"):
            client.insert("nodes", {})

    @patch("requests.request")
    def test_insert_uses_injected_session(self, mock_request):
        """Test inserts go through a given session instead of the module."""
        session = Mock(spec=requests.Session)
        session.request.return_value = make_response(201)
        client = CatalogClient(
            "https://example.supabase.co", "anon-key", "token", session=session
        )

        client.insert("nodes", {"unique_node_id": "hello.0.1"})

        mock_request.assert_not_called()
        assert session.request.call_args[1]["json"] == {"unique_node_id": "hello.0.1"}
