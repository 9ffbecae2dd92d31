"""Versioned documents on top of `VersionedTextStore`.

Each document is serialized to text with a `Serializer` and stored under
its id; the version token of the underlying text is the document's
version. All concurrency semantics are those of the text store.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from .interfaces import VersionedTextStoreProtocol
from .serializer import JSONSerializer, Serializer
from .versioning import VersionToken


@dataclass(frozen=True)
class VersionedDocument:
    document: Any
    version: VersionToken


class VersionedDocumentStore:
    def __init__(self, text_store: VersionedTextStoreProtocol, serializer: Optional[Serializer] = None) -> None:
        self._store = text_store
        self.serializer = serializer or JSONSerializer()

    def read(self, id: str) -> Optional[VersionedDocument]:
        text = self._store.read(id)
        if text is None:
            return None
        return VersionedDocument(self.serializer.load(text.content), text.version)

    def create_or_update(self, id: str, document: Any) -> None:
        self._store.create_or_update(id, self.serializer.dump(document))

    def try_create(self, id: str, document: Any) -> bool:
        return self._store.try_create(id, self.serializer.dump(document))

    def try_update(self, id: str, document: Any, version: VersionToken) -> bool:
        return self._store.try_update(id, self.serializer.dump(document), version)

    def try_delete(self, id: str, version: VersionToken) -> bool:
        return self._store.try_delete(id, version)

    def delete_if_exists(self, id: str) -> None:
        self._store.delete_if_exists(id)
