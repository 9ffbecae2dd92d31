"""Public azure module.

Exposes `AzureBlobBackend` and a `get_blob_service_client` factory. The
SDK client classes are imported inside the factory so that using the
memory or file backends does not pay for importing them.
"""
from __future__ import annotations
import logging

from textstore_lib.config import StoreSettings
from textstore_lib.azure.blob_backend import AzureBlobBackend, classify_error

logger = logging.getLogger(__name__)

__all__ = ["AzureBlobBackend", "classify_error", "get_blob_service_client"]


def get_blob_service_client(settings: StoreSettings):
    """Build a `BlobServiceClient` from settings.

    Precedence: connection string -> account URL + account key ->
    account URL + `DefaultAzureCredential`.
    """
    from azure.storage.blob import BlobServiceClient

    if settings.connection_string:
        logger.debug("Using Azure storage connection string")
        return BlobServiceClient.from_connection_string(settings.connection_string)

    if not settings.account_url:
        raise RuntimeError(
            "Azure storage not configured: set connection_string or account_url "
            "(or AZURE_STORAGE_CONNECTION_STRING / AZURE_STORAGE_ACCOUNT_URL)."
        )

    if settings.account_key:
        logger.debug("Using account key for %s", settings.account_url)
        return BlobServiceClient(settings.account_url, credential=settings.account_key)

    from azure.identity import DefaultAzureCredential

    logger.debug("Using DefaultAzureCredential for %s", settings.account_url)
    return BlobServiceClient(settings.account_url, credential=DefaultAzureCredential())
