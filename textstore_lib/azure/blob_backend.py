"""Azure Blob Storage backend.

Namespaces are blob containers and keys are blob names. Conditional
writes use the blob ETag: `If-None-Match: *` for creation and
`If-Match: <etag>` for updates and deletes, so the comparison happens
inside the storage service.

The SDK reports conditional failures as exceptions; they are mapped to
`WriteOutcome` values here:

- 404 (`ResourceNotFoundError`) -> NOT_FOUND (blob or container missing)
- 409 (`ResourceExistsError`)   -> CONFLICT
- 412 (`ResourceModifiedError`) -> PRECONDITION_FAILED

Every other `HttpResponseError` (authorization, throttling, bad container
name, ...) is re-raised unchanged, and so is a 409 or 412 on an
unconditional request, where it cannot stand for a version mismatch.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

from azure.core import MatchConditions
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceModifiedError,
    ResourceNotFoundError,
)
from azure.storage.blob import ContentSettings

from textstore_lib.storage.base import BlobBackend, BlobRead, Condition, ConditionKind, WriteOutcome
from textstore_lib.storage.versioning import issue_token, token_value

if TYPE_CHECKING:
    from azure.storage.blob import BlobClient, BlobServiceClient  # pragma: no cover

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain; charset=utf-8"

_STATUS_OUTCOMES = {
    404: WriteOutcome.NOT_FOUND,
    409: WriteOutcome.CONFLICT,
    412: WriteOutcome.PRECONDITION_FAILED,
}


def classify_error(exc: HttpResponseError) -> Optional[WriteOutcome]:
    """Return the outcome an SDK error stands for, or None for real faults."""
    if isinstance(exc, ResourceModifiedError):
        return WriteOutcome.PRECONDITION_FAILED
    if isinstance(exc, ResourceExistsError):
        return WriteOutcome.CONFLICT
    if isinstance(exc, ResourceNotFoundError):
        return WriteOutcome.NOT_FOUND
    return _STATUS_OUTCOMES.get(getattr(exc, "status_code", None))


class AzureBlobBackend(BlobBackend):
    def __init__(self, service_client: "BlobServiceClient") -> None:
        self._service = service_client

    def _blob(self, namespace: str, key: str) -> "BlobClient":
        return self._service.get_blob_client(container=namespace, blob=key)

    def get(self, namespace: str, key: str) -> Optional[BlobRead]:
        try:
            downloader = self._blob(namespace, key).download_blob()
            data = downloader.readall()
        except ResourceNotFoundError:
            logger.debug("Blob %s/%s not found", namespace, key)
            return None
        # ETag from the same response as the content
        return BlobRead(data, issue_token(downloader.properties.etag))

    def put(self, namespace: str, key: str, data: bytes, condition: Condition) -> WriteOutcome:
        kwargs = {"content_settings": ContentSettings(content_type=CONTENT_TYPE)}
        if condition.kind is ConditionKind.MUST_NOT_EXIST:
            kwargs["overwrite"] = False
        else:
            kwargs["overwrite"] = True
        if condition.kind is ConditionKind.MUST_MATCH:
            kwargs["etag"] = token_value(condition.version)
            kwargs["match_condition"] = MatchConditions.IfNotModified
        try:
            self._blob(namespace, key).upload_blob(data, **kwargs)
        except HttpResponseError as exc:
            return self._outcome_or_raise("upload", namespace, key, condition, exc)
        return WriteOutcome.OK

    def delete(self, namespace: str, key: str, condition: Condition) -> WriteOutcome:
        kwargs = {}
        if condition.kind is ConditionKind.MUST_MATCH:
            kwargs["etag"] = token_value(condition.version)
            kwargs["match_condition"] = MatchConditions.IfNotModified
        try:
            self._blob(namespace, key).delete_blob(**kwargs)
        except HttpResponseError as exc:
            return self._outcome_or_raise("delete", namespace, key, condition, exc)
        return WriteOutcome.OK

    def ensure_namespace_exists(self, namespace: str) -> None:
        try:
            self._service.get_container_client(namespace).create_container()
        except ResourceExistsError:
            return
        logger.info("Created blob container %s", namespace)

    def _outcome_or_raise(
        self, operation: str, namespace: str, key: str, condition: Condition, exc: HttpResponseError
    ) -> WriteOutcome:
        outcome = classify_error(exc)
        # 409/412 on an unconditional request (lease held, snapshots present)
        # is a real fault, not a version check
        if outcome is None or (condition.kind is ConditionKind.NONE and outcome is not WriteOutcome.NOT_FOUND):
            raise exc
        logger.debug("%s %s/%s: %s (%s)", operation, namespace, key, outcome.value, getattr(exc, "error_code", None))
        return outcome
