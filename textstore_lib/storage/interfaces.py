from typing import Protocol, Optional, runtime_checkable

from .base import BlobRead, Condition, WriteOutcome
from .versioning import VersionToken, VersionedText


@runtime_checkable
class BlobBackendProtocol(Protocol):
    """Backend protocol mirroring `textstore_lib.storage.base.BlobBackend`.

    Implementations should follow the semantics documented on the abstract
    base class (outcomes returned rather than raised, atomic conditional
    writes, idempotent namespace creation).
    """

    def get(self, namespace: str, key: str) -> Optional[BlobRead]: ...

    def put(self, namespace: str, key: str, data: bytes, condition: Condition) -> WriteOutcome: ...

    def delete(self, namespace: str, key: str, condition: Condition) -> WriteOutcome: ...

    def ensure_namespace_exists(self, namespace: str) -> None: ...


@runtime_checkable
class VersionedTextStoreProtocol(Protocol):
    """Public surface of `VersionedTextStore` used by the document layer."""

    def read(self, id: str) -> Optional[VersionedText]: ...

    def create_or_update(self, id: str, text: str) -> None: ...

    def try_create(self, id: str, text: str) -> bool: ...

    def try_update(self, id: str, text: str, version: VersionToken) -> bool: ...

    def try_delete(self, id: str, version: VersionToken) -> bool: ...

    def delete_if_exists(self, id: str) -> None: ...
