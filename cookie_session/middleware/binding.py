from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Mapping, Optional
import logging

from cookie_session.config import SessionOptions
from cookie_session.errors import InvalidSessionValue
from cookie_session.session import codec
from cookie_session.session.interfaces import CookieTransportProtocol
from cookie_session.session.model import Session

logger = logging.getLogger(__name__)


class SlotState(Enum):
    UNRESOLVED = "unresolved"
    PRESENT = "present"
    CLEARED = "cleared"


class RequestBinding:
    """Per-request session slot.

    The session is loaded lazily on the first `get_session()` call and can
    be replaced or cleared with `set_session()`. `commit()` is called once
    when response headers are finalized and decides whether the cookie is
    written, deleted or left alone:

    - never touched: nothing
    - cleared: cookie deleted
    - present: written when changed, unless the session is new and empty

    `options` is a per-request copy of the forwarded cookie options;
    handlers may adjust it (e.g. `max_age`) for the current response only.
    """

    def __init__(self, transport: CookieTransportProtocol, options: SessionOptions) -> None:
        self.transport = transport
        self.name = options.name
        self.options: Dict[str, Any] = options.cookie_options()
        self._state = SlotState.UNRESOLVED
        self._session: Optional[Session] = None
        self._committed = False

    @property
    def state(self) -> SlotState:
        return self._state

    def get_session(self) -> Optional[Session]:
        if self._state is SlotState.CLEARED:
            return None
        if self._state is SlotState.UNRESOLVED:
            self._session = self._load()
            self._state = SlotState.PRESENT
        return self._session

    def set_session(self, value: Any) -> Optional[Session]:
        if value is None:
            self._session = None
            self._state = SlotState.CLEARED
            return None
        if isinstance(value, Mapping):
            bad_keys = [k for k in value if not isinstance(k, str)]
            if bad_keys:
                raise InvalidSessionValue(f"session keys must be strings, got {bad_keys[0]!r}")
            self._session = Session.create(self, value)
            self._state = SlotState.PRESENT
            return self._session
        raise InvalidSessionValue(
            f"session can only be set to None or a mapping, not {type(value).__name__}"
        )

    def _load(self) -> Session:
        try:
            raw = self.transport.read(self.name, self.options)
        except Exception as e:
            logger.warning("Error reading session cookie %s: %s", self.name, e)
            raw = None
        if not raw:
            logger.debug("new session")
            return Session.create(self)

        logger.debug("parse %s", raw)
        result = codec.decode(raw)
        if isinstance(result, codec.DecodeError):
            logger.debug("Discarding malformed session cookie: %s", result.reason)
            return Session.create(self)
        return Session.restore(self, raw, result.payload)

    def commit(self) -> None:
        """Emit the session cookie for this response, at most once."""
        if self._committed:
            logger.debug("Session already committed for this response")
            return
        self._committed = True

        if self._state is SlotState.UNRESOLVED:
            return
        try:
            if self._state is SlotState.CLEARED:
                logger.debug("remove session cookie %s", self.name)
                self.transport.write(self.name, "", self.options)
                return
            sess = self._session
            if sess is not None and (not sess.is_new or sess.is_populated) and sess.is_changed:
                val = sess.serialize_for_transport()
                logger.debug("save %s", val)
                self.transport.write(self.name, val, self.options)
        except Exception as e:
            logger.warning("Error saving session: %s", e)
