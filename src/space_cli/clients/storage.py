"""
Storage Client - blob object storage over HTTP.

Thin pass-through adapter: no retry, backoff or caching. Transport and
non-2xx failures surface as StorageError.
"""

from __future__ import annotations

import logging
import mimetypes
from typing import Optional

import requests

from space_cli.errors import StorageError


logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


def bearer(token: str) -> str:
    """Authorization header value for a stored token."""
    if token.lower().startswith("bearer "):
        return token
    return f"Bearer {token}"


def guess_content_type(path: str) -> str:
    """MIME type for a storage key, falling back to octet-stream."""
    content_type, _ = mimetypes.guess_type(path)
    return content_type or OCTET_STREAM


class StorageClient:
    """Client for the object storage API (``{endpoint}/storage/v1``)."""

    def __init__(
        self,
        endpoint: str,
        authorization: str,
        timeout: Optional[int] = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = f"{endpoint.rstrip('/')}/storage/v1"
        self.authorization = authorization
        self.timeout = timeout
        self.session = session

    def object_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/object/{bucket}/{path}"

    def _request(
        self,
        method: str,
        url: str,
        data: bytes | None = None,
        content_type: str | None = None,
    ) -> requests.Response:
        """Make authenticated request to storage."""
        headers = {"Authorization": bearer(self.authorization)}
        if content_type:
            headers["Content-Type"] = content_type

        try:
            response = (self.session or requests).request(
                method=method,
                url=url,
                headers=headers,
                data=data,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response
        except requests.exceptions.Timeout:
            raise StorageError(f"Request timeout after {self.timeout}s")
        except requests.exceptions.ConnectionError as e:
            raise StorageError(f"Connection error: {e}")
        except requests.exceptions.HTTPError as e:
            raise StorageError(
                f"HTTP error {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
            )
        except requests.exceptions.RequestException as e:
            raise StorageError(f"Request failed: {e}")

    def upload(self, bucket: str, path: str, data: bytes) -> None:
        """
        Store ``data`` at ``path`` in ``bucket``.

        The content type is guessed from the key's extension.
        """
        content_type = guess_content_type(path)
        logger.debug(f"Uploading {len(data)} bytes to {bucket}/{path} as {content_type}")
        self._request("POST", self.object_url(bucket, path), data=data, content_type=content_type)

    def download(self, bucket: str, path: str) -> bytes:
        """Fetch the object stored at ``path`` in ``bucket``."""
        response = self._request("GET", self.object_url(bucket, path))
        return response.content
