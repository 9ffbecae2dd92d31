"""Simple memory-backed blob backend

This backend stores bytes in memory as a data structure `[<namespace>][<key>] = (data, etag)`.
Every successful put issues a new etag from a per-backend counter.
"""
import itertools
from threading import RLock
from typing import Dict, Optional, Tuple

from .base import BlobBackend, BlobRead, Condition, ConditionKind, WriteOutcome
from .versioning import VersionToken, issue_token, token_value


class MemoryBlobBackend(BlobBackend):
    def __init__(self):
        self._lock = RLock()
        self._store: Dict[str, Dict[str, Tuple[bytes, str]]] = {}
        self._counter = itertools.count(1)

    def _next_etag(self) -> str:
        return f'"0x{next(self._counter):016X}"'

    def get(self, namespace: str, key: str) -> Optional[BlobRead]:
        with self._lock:
            entry = self._store.get(namespace, {}).get(key)
        if entry is None:
            return None
        data, etag = entry
        return BlobRead(data, issue_token(etag))

    def put(self, namespace: str, key: str, data: bytes, condition: Condition) -> WriteOutcome:
        with self._lock:
            ns = self._store.get(namespace)
            if ns is None:
                return WriteOutcome.NOT_FOUND
            current = ns.get(key)
            if condition.kind is ConditionKind.MUST_NOT_EXIST and current is not None:
                return WriteOutcome.CONFLICT
            if condition.kind is ConditionKind.MUST_MATCH and not _matches(current, condition.version):
                return WriteOutcome.PRECONDITION_FAILED
            ns[key] = (bytes(data), self._next_etag())
            return WriteOutcome.OK

    def delete(self, namespace: str, key: str, condition: Condition) -> WriteOutcome:
        with self._lock:
            ns = self._store.get(namespace)
            if ns is None or key not in ns:
                return WriteOutcome.NOT_FOUND
            if condition.kind is ConditionKind.MUST_MATCH and not _matches(ns[key], condition.version):
                return WriteOutcome.PRECONDITION_FAILED
            del ns[key]
            return WriteOutcome.OK

    def ensure_namespace_exists(self, namespace: str) -> None:
        with self._lock:
            self._store.setdefault(namespace, {})

    def drop_namespace(self, namespace: str) -> None:
        """Remove a namespace and everything in it, as if deleted out of band."""
        with self._lock:
            self._store.pop(namespace, None)

    def namespace_exists(self, namespace: str) -> bool:
        with self._lock:
            return namespace in self._store


def _matches(entry: Optional[Tuple[bytes, str]], version: Optional[VersionToken]) -> bool:
    return entry is not None and version is not None and entry[1] == token_value(version)
