"""
Catalog Client - row inserts over a PostgREST-style API.

A unique-key conflict is reported as DuplicateVersionError; any other
rejection or transport failure as CatalogError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from space_cli.errors import CatalogError, DuplicateVersionError

from .storage import bearer


logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def _is_conflict(response: requests.Response) -> bool:
    if response.status_code == 409:
        return True
    try:
        body = response.json()
    except ValueError:
        return False
    return isinstance(body, dict) and body.get("code") == UNIQUE_VIOLATION


class CatalogClient:
    """Client for the row-based catalog (``{endpoint}/rest/v1``)."""

    def __init__(
        self,
        endpoint: str,
        apikey: str,
        authorization: str,
        timeout: Optional[int] = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = f"{endpoint.rstrip('/')}/rest/v1"
        self.apikey = apikey
        self.authorization = authorization
        self.timeout = timeout
        self.session = session

    def insert(self, table: str, record: Dict[str, Any]) -> None:
        """
        Insert one row into ``table``.

        Raises:
            DuplicateVersionError: If the row's unique key already exists
            CatalogError: On any other failure
        """
        url = f"{self.base_url}/{table}"
        headers = {
            "apikey": self.apikey,
            "Authorization": bearer(self.authorization),
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

        try:
            response = (self.session or requests).request(
                method="POST",
                url=url,
                headers=headers,
                json=record,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            raise CatalogError(f"Request timeout after {self.timeout}s")
        except requests.exceptions.ConnectionError as e:
            raise CatalogError(f"Connection error: {e}")
        except requests.exceptions.RequestException as e:
            raise CatalogError(f"Request failed: {e}")

        if response.ok:
            logger.debug(f"Inserted row into {table}")
            return

        if _is_conflict(response):
            raise DuplicateVersionError(
                str(record.get("unique_node_id", "")),
                status_code=response.status_code,
            )

        raise CatalogError(
            f"HTTP error {response.status_code}: {response.text}",
            status_code=response.status_code,
        )
