"""Optimistic-concurrency text storage over a conditional blob backend.

Every operation is a live round-trip to the backend. Version checks are
never done client side: the backend evaluates the condition attached to
each put/delete atomically, and the outcome it reports is mapped to the
`None`/`False` results callers branch on.

The namespace is created lazily. A write that reports NOT_FOUND because
the namespace is missing is retried once after an idempotent
`ensure_namespace_exists`; a second NOT_FOUND is raised as
`NamespaceMissingError` instead of looping.
"""
from __future__ import annotations
import logging
from typing import Callable, Optional

from .base import (
    BlobBackend,
    Condition,
    NamespaceMissingError,
    UnexpectedOutcomeError,
    WriteOutcome,
)
from .versioning import VersionToken, VersionedText

logger = logging.getLogger(__name__)

ENCODING = "utf-8"

# Outcomes where the backend refused the operation on version grounds
_REJECTED = (WriteOutcome.PRECONDITION_FAILED, WriteOutcome.CONFLICT)


class VersionedTextStore:
    def __init__(self, backend: BlobBackend, namespace: str) -> None:
        if not namespace:
            raise ValueError("namespace must be a non-empty string")
        self._backend = backend
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    def read(self, id: str) -> Optional[VersionedText]:
        blob = self._backend.get(self._namespace, id)
        if blob is None:
            logger.debug("read %s/%s: absent", self._namespace, id)
            return None
        return VersionedText(blob.data.decode(ENCODING), blob.version)

    def create_or_update(self, id: str, text: str) -> None:
        data = text.encode(ENCODING)
        outcome = self._with_namespace_retry(
            id, lambda: self._backend.put(self._namespace, id, data, Condition.none())
        )
        if outcome is not WriteOutcome.OK:
            raise UnexpectedOutcomeError("put", self._namespace, id, outcome)
        logger.debug("create_or_update %s/%s: written", self._namespace, id)

    def try_create(self, id: str, text: str) -> bool:
        self._backend.ensure_namespace_exists(self._namespace)
        return self._try_put(id, text, Condition.must_not_exist())

    def try_update(self, id: str, text: str, version: VersionToken) -> bool:
        return self._try_put(id, text, Condition.must_match(version))

    def try_delete(self, id: str, version: VersionToken) -> bool:
        # NOT_FOUND covers both an object deleted by someone else and a
        # namespace deleted out of band.
        outcome = self._backend.delete(self._namespace, id, Condition.must_match(version))
        logger.debug("try_delete %s/%s: %s", self._namespace, id, outcome.value)
        return outcome is WriteOutcome.OK

    def delete_if_exists(self, id: str) -> None:
        outcome = self._backend.delete(self._namespace, id, Condition.none())
        if outcome in _REJECTED:
            raise UnexpectedOutcomeError("delete", self._namespace, id, outcome)
        logger.debug("delete_if_exists %s/%s: %s", self._namespace, id, outcome.value)

    def _try_put(self, id: str, text: str, condition: Condition) -> bool:
        data = text.encode(ENCODING)
        outcome = self._with_namespace_retry(
            id, lambda: self._backend.put(self._namespace, id, data, condition)
        )
        logger.debug("%s %s/%s: %s", condition.kind.value, self._namespace, id, outcome.value)
        return outcome is WriteOutcome.OK

    def _with_namespace_retry(self, id: str, attempt: Callable[[], WriteOutcome]) -> WriteOutcome:
        """Run `attempt`; on NOT_FOUND ensure the namespace and run it once more."""
        outcome = attempt()
        if outcome is not WriteOutcome.NOT_FOUND:
            return outcome
        logger.info("Namespace %s missing while writing %s; creating and retrying", self._namespace, id)
        self._backend.ensure_namespace_exists(self._namespace)
        outcome = attempt()
        if outcome is WriteOutcome.NOT_FOUND:
            raise NamespaceMissingError(self._namespace, id)
        return outcome
