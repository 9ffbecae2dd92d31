"""Versioned text storage package."""

from typing import Optional

from textstore_lib.config import StoreSettings
from .base import (
    BlobBackend,
    BlobRead,
    Condition,
    ConditionKind,
    NamespaceMissingError,
    UnexpectedOutcomeError,
    WriteOutcome,
)
from .document_store import VersionedDocument, VersionedDocumentStore
from .interfaces import BlobBackendProtocol, VersionedTextStoreProtocol
from .file_backend import FileBlobBackend
from .memory_backend import MemoryBlobBackend
from .serializer import JSONSerializer, Serializer, YAMLSerializer
from .text_store import VersionedTextStore
from .versioning import VersionToken, VersionedText

__all__ = [
    "BlobBackend",
    "BlobBackendProtocol",
    "VersionedTextStoreProtocol",
    "BlobRead",
    "Condition",
    "ConditionKind",
    "NamespaceMissingError",
    "UnexpectedOutcomeError",
    "WriteOutcome",
    "VersionToken",
    "VersionedText",
    "VersionedTextStore",
    "VersionedDocument",
    "VersionedDocumentStore",
    "MemoryBlobBackend",
    "FileBlobBackend",
    "JSONSerializer",
    "YAMLSerializer",
    "create_backend",
    "create_text_store",
    "create_document_store",
]


def create_backend(settings: StoreSettings) -> BlobBackend:
    if settings.backend == "memory":
        return MemoryBlobBackend()
    if settings.backend == "file":
        return FileBlobBackend(data_dir=settings.data_dir)
    if settings.backend == "azure":
        from textstore_lib.azure import AzureBlobBackend, get_blob_service_client

        return AzureBlobBackend(get_blob_service_client(settings))
    raise ValueError(f"Unknown backend: {settings.backend!r}")


def create_text_store(settings: Optional[StoreSettings] = None, **options) -> VersionedTextStore:
    """Build a VersionedTextStore from `settings`, or from keyword options
    (`backend`, `namespace`, `data_dir`, ...) when no settings are given."""
    settings = settings or StoreSettings(**options)
    return VersionedTextStore(create_backend(settings), settings.namespace)


def create_document_store(
    settings: Optional[StoreSettings] = None,
    serializer: str = "json",
    **options,
) -> VersionedDocumentStore:
    if serializer == "json":
        ser: Serializer = JSONSerializer()
    elif serializer == "yaml":
        ser = YAMLSerializer()
    else:
        raise ValueError(f"Unknown serializer: {serializer!r}")
    return VersionedDocumentStore(create_text_store(settings, **options), ser)
