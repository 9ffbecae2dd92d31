"""File-backed blob backend.

Objects live under `<data_dir>/<namespace>/<quoted key>.blob`. The first
line of each file holds the object's etag, the remainder is the payload.
Writes go to a temporary file which is fsynced and then renamed over the
target, so readers always see either the old or the new object together
with its etag.

Conditional operations hold a per-namespace lock while they compare the
etag and write: an RLock taken from a fixed pool keyed by namespace hash,
plus an advisory `flock` on `<namespace>/.lock` so several processes can
share a data directory.
"""
from __future__ import annotations
import logging
import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Iterator, Optional, Tuple
from urllib.parse import quote

from .base import BlobBackend, BlobRead, Condition, ConditionKind, WriteOutcome
from .versioning import issue_token, token_value

try:
    import fcntl
except ImportError:  # pragma: no cover - Windows has no flock
    fcntl = None

logger = logging.getLogger(__name__)

LOCK_FILE = ".lock"
SUFFIX = ".blob"
# Namespaces share a fixed pool of in-process locks
LOCK_STRIPES = 32


class FileBlobBackend(BlobBackend):
    def __init__(self, data_dir: str | Path = "./data") -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._locks = tuple(RLock() for _ in range(LOCK_STRIPES))

    def _ns_dir(self, namespace: str) -> Path:
        if namespace in ("", ".", ".."):
            raise ValueError(f"invalid namespace {namespace!r}")
        return self.data_dir / quote(namespace, safe="")

    def _path_for(self, namespace: str, key: str) -> Path:
        return self._ns_dir(namespace) / f"{quote(key, safe='')}{SUFFIX}"

    @contextmanager
    def _locked(self, namespace: str) -> Iterator[bool]:
        """Hold the namespace lock. Yields False when the namespace is missing."""
        with self._locks[hash(namespace) % LOCK_STRIPES]:
            try:
                f = open(self._ns_dir(namespace) / LOCK_FILE, "a+")
            except FileNotFoundError:
                f = None
            if f is None:
                yield False
                return
            try:
                if fcntl is not None:
                    fcntl.flock(f, fcntl.LOCK_EX)
                yield True
            finally:
                if fcntl is not None:
                    fcntl.flock(f, fcntl.LOCK_UN)
                f.close()

    def get(self, namespace: str, key: str) -> Optional[BlobRead]:
        entry = _read_entry(self._path_for(namespace, key))
        if entry is None:
            return None
        etag, data = entry
        return BlobRead(data, issue_token(etag))

    def put(self, namespace: str, key: str, data: bytes, condition: Condition) -> WriteOutcome:
        path = self._path_for(namespace, key)
        with self._locked(namespace) as present:
            if not present:
                return WriteOutcome.NOT_FOUND
            current = _read_entry(path)
            if condition.kind is ConditionKind.MUST_NOT_EXIST and current is not None:
                return WriteOutcome.CONFLICT
            if condition.kind is ConditionKind.MUST_MATCH and not _matches(current, condition):
                return WriteOutcome.PRECONDITION_FAILED
            self._write(path, data)
            return WriteOutcome.OK

    def delete(self, namespace: str, key: str, condition: Condition) -> WriteOutcome:
        path = self._path_for(namespace, key)
        with self._locked(namespace) as present:
            if not present:
                return WriteOutcome.NOT_FOUND
            current = _read_entry(path)
            if current is None:
                return WriteOutcome.NOT_FOUND
            if condition.kind is ConditionKind.MUST_MATCH and not _matches(current, condition):
                return WriteOutcome.PRECONDITION_FAILED
            path.unlink()
            return WriteOutcome.OK

    def ensure_namespace_exists(self, namespace: str) -> None:
        ns = self._ns_dir(namespace)
        if ns.is_dir():
            return
        ns.mkdir(parents=True, exist_ok=True)
        logger.info("Created namespace directory %s", ns)

    def _write(self, path: Path, data: bytes) -> None:
        etag = f'"{uuid.uuid4().hex}"'
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(tmp, "wb") as f:
                f.write(etag.encode("ascii") + b"\n")
                f.write(bytes(data))
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("FileBlobBackend wrote %s (%d bytes)", path, len(data))


def _read_entry(path: Path) -> Optional[Tuple[str, bytes]]:
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        return None
    etag, _, data = raw.partition(b"\n")
    return etag.decode("ascii"), data


def _matches(entry: Optional[Tuple[str, bytes]], condition: Condition) -> bool:
    return entry is not None and condition.version is not None and entry[0] == token_value(condition.version)
