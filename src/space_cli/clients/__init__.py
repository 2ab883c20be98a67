"""
Remote service clients.

This package provides:
- StorageClient: blob upload/download under ``/storage/v1``
- CatalogClient: row insert under ``/rest/v1``
"""

from .catalog import CatalogClient
from .storage import StorageClient, guess_content_type

__all__ = [
    "CatalogClient",
    "StorageClient",
    "guess_content_type",
]
