from __future__ import annotations
from collections.abc import MutableMapping
from typing import Any, Iterator, Mapping, Optional

from cookie_session.session import codec
from cookie_session.session.context import SessionContext


class Session(MutableMapping):
    """Session payload plus lifecycle flags.

    Behaves like a plain dict of JSON-compatible values keyed by strings.
    The lifecycle flags are recomputed on every access so they always
    reflect the payload as it is right now:

    - `is_new`: the session was not loaded from a cookie.
    - `is_populated`: the payload has at least one key.
    - `is_changed`: new, or the current serialization differs from the
      cookie value the session was loaded from.
    """

    def __init__(self, context: SessionContext, payload: Optional[Mapping[str, Any]] = None) -> None:
        self._context = context
        self._data: dict[str, Any] = {}
        if payload:
            for key, value in payload.items():
                self[key] = value

    @classmethod
    def create(cls, owner: Any, payload: Optional[Mapping[str, Any]] = None) -> "Session":
        """Create a brand-new session for `owner`."""
        return cls(SessionContext(owner), payload)

    @classmethod
    def reconstruct(cls, owner: Any, raw: str) -> "Session":
        """Rebuild a session from a previously issued cookie value.

        Raises MalformedPayload when `raw` cannot be decoded.
        """
        return cls.restore(owner, raw, codec.deserialize(raw))

    @classmethod
    def restore(cls, owner: Any, raw: str, payload: Mapping[str, Any]) -> "Session":
        """Build a loaded session from an already decoded payload.

        `raw` is kept verbatim as the change-detection baseline.
        """
        return cls(SessionContext(owner, freshly_created=False, baseline=raw), payload)

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def is_new(self) -> bool:
        return self._context.freshly_created

    @property
    def is_populated(self) -> bool:
        return bool(self._data)

    @property
    def is_changed(self) -> bool:
        return self.is_new or self._context.baseline != self.serialize_for_transport()

    def serialize_for_transport(self) -> str:
        return codec.serialize(self._data)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"session keys must be strings, not {type(key).__name__}")
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Session({self._data!r}, is_new={self.is_new})"
