"""Blob backend interface definitions.

Defines the `BlobBackend` abstract class the versioned stores talk to.
A backend is a namespaced key -> bytes store that can make a write or a
delete conditional on the object's current version. Expected outcomes of
those conditional operations are returned as `WriteOutcome` values; any
other failure is raised by the backend and reaches the caller untouched.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .versioning import VersionToken


class WriteOutcome(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    PRECONDITION_FAILED = "precondition_failed"
    CONFLICT = "conflict"


class ConditionKind(Enum):
    NONE = "none"
    MUST_NOT_EXIST = "must_not_exist"
    MUST_MATCH = "must_match"


@dataclass(frozen=True)
class Condition:
    """Precondition attached to a put or delete."""

    kind: ConditionKind
    version: Optional[VersionToken] = None

    @classmethod
    def none(cls) -> "Condition":
        return cls(ConditionKind.NONE)

    @classmethod
    def must_not_exist(cls) -> "Condition":
        return cls(ConditionKind.MUST_NOT_EXIST)

    @classmethod
    def must_match(cls, version: VersionToken) -> "Condition":
        if not isinstance(version, VersionToken):
            raise TypeError(f"expected VersionToken, got {type(version).__name__}")
        return cls(ConditionKind.MUST_MATCH, version)


@dataclass(frozen=True)
class BlobRead:
    data: bytes
    version: VersionToken


class NamespaceMissingError(RuntimeError):
    """The namespace was still missing after it had been created."""

    def __init__(self, namespace: str, key: str) -> None:
        super().__init__(f"namespace {namespace!r} missing after creation (key {key!r})")
        self.namespace = namespace
        self.key = key


class UnexpectedOutcomeError(RuntimeError):
    """An unconditional operation reported a precondition failure or conflict."""

    def __init__(self, operation: str, namespace: str, key: str, outcome: WriteOutcome) -> None:
        super().__init__(f"{operation} {namespace}/{key} failed: {outcome.value}")
        self.operation = operation
        self.namespace = namespace
        self.key = key
        self.outcome = outcome


class BlobBackend(ABC):
    """Abstract conditional blob backend.

    Implementations must be safe to call concurrently and must evaluate a
    condition and apply the write (or delete) as one atomic step.
    """

    @abstractmethod
    def get(self, namespace: str, key: str) -> Optional[BlobRead]:
        """Return data and current version, or None when the object or
        the namespace does not exist."""

    @abstractmethod
    def put(self, namespace: str, key: str, data: bytes, condition: Condition) -> WriteOutcome:
        """Write `data` if `condition` holds.

        Returns NOT_FOUND when the namespace does not exist, CONFLICT when
        MUST_NOT_EXIST is violated and PRECONDITION_FAILED when MUST_MATCH
        is violated (including when the object is missing).
        """

    @abstractmethod
    def delete(self, namespace: str, key: str, condition: Condition) -> WriteOutcome:
        """Delete the object if `condition` holds.

        Returns NOT_FOUND when the object or the namespace does not exist.
        """

    @abstractmethod
    def ensure_namespace_exists(self, namespace: str) -> None:
        """Create the namespace unless it already exists."""
