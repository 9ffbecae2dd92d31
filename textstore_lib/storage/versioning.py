"""Version tokens and versioned values.

A `VersionToken` wraps whatever a backend uses to identify the current
revision of an object (an ETag for Azure Blob Storage, a counter for the
memory backend). Callers only compare tokens and hand them back; the raw
value is reachable through `token_value` which backends use when building
their conditional requests.
"""
from __future__ import annotations
from dataclasses import dataclass


# Only issue_token passes this, so callers cannot build tokens themselves
_ISSUER = object()


class VersionToken:
    __slots__ = ("_raw",)

    def __init__(self, raw: str, _issuer: object = None) -> None:
        if _issuer is not _ISSUER:
            raise TypeError("VersionToken is issued by backends; it cannot be constructed directly")
        object.__setattr__(self, "_raw", raw)

    def __setattr__(self, name, value):
        raise AttributeError("VersionToken is immutable")

    def __eq__(self, other) -> bool:
        if not isinstance(other, VersionToken):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(("VersionToken", self._raw))

    def __repr__(self) -> str:
        return f"VersionToken({self._raw!r})"

    def __reduce__(self):
        return (issue_token, (self._raw,))

    def __copy__(self) -> "VersionToken":
        return self

    def __deepcopy__(self, memo) -> "VersionToken":
        return self


def issue_token(raw: str) -> VersionToken:
    """Wrap a backend revision identifier. Intended for backends only."""
    if not isinstance(raw, str) or not raw:
        raise ValueError("version token must be a non-empty string")
    return VersionToken(raw, _ISSUER)


def token_value(token: VersionToken) -> str:
    """Return the backend revision identifier wrapped by `token`."""
    if not isinstance(token, VersionToken):
        raise TypeError(f"expected VersionToken, got {type(token).__name__}")
    return token._raw


@dataclass(frozen=True)
class VersionedText:
    content: str
    version: VersionToken
