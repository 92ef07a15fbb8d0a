from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Optional, Set, Tuple
import logging

from starlette.requests import HTTPConnection
from starlette.responses import Response
from starlette.types import Message, Scope

from cookie_session.errors import ConfigurationError
from cookie_session.transport.keygrip import Keygrip

logger = logging.getLogger(__name__)

SIGNATURE_SUFFIX = ".sig"


def _cookie_name(header_value: bytes) -> str:
    return header_value.split(b"=", 1)[0].strip().decode("latin-1")


class ScopeCookieTransport:
    """Read request cookies from an ASGI scope and queue outbound ones.

    Signed cookies carry a companion `<name>.sig` cookie holding the
    keygrip signature of `"<name>=<value>"`. Outbound cookies are rendered
    with Starlette's `Response.set_cookie` and held until `apply` merges
    them into the `http.response.start` message.
    """

    def __init__(self, scope: Scope, keys: Optional[Iterable[str]] = None) -> None:
        self._cookies = HTTPConnection(scope).cookies
        self._keygrip = Keygrip(keys) if keys else None
        self._pending: List[Tuple[str, bytes]] = []
        self._overwrite: Set[str] = set()

    @property
    def pending(self) -> List[str]:
        """Queued `Set-Cookie` header values, in emission order."""
        return [v.decode("latin-1") for _, v in self._pending]

    def _require_keygrip(self) -> Keygrip:
        if self._keygrip is None:
            raise ConfigurationError("signed cookies require keys")
        return self._keygrip

    def read(self, name: str, options: Mapping[str, Any]) -> Optional[str]:
        value = self._cookies.get(name)
        if not value or not options.get("signed"):
            return value or None

        keygrip = self._require_keygrip()
        sig_name = name + SIGNATURE_SUFFIX
        remote = self._cookies.get(sig_name)
        if not remote:
            logger.debug("Cookie %s has no signature", name)
            return None

        data = f"{name}={value}"
        index = keygrip.index(data, remote)
        if index < 0:
            logger.debug("Cookie %s signature mismatch, dropping signature", name)
            self._queue(sig_name, "", {**options, "signed": False})
            return None
        if index > 0:
            # verified with a rotated key, re-sign with the current one
            self._queue(sig_name, keygrip.sign(data), {**options, "signed": False})
        return value

    def write(self, name: str, value: str, options: Mapping[str, Any]) -> None:
        self._queue(name, value, options)
        if options.get("signed"):
            keygrip = self._require_keygrip()
            sig = keygrip.sign(f"{name}={value}") if value else ""
            self._queue(name + SIGNATURE_SUFFIX, sig, options)

    def _queue(self, name: str, value: str, options: Mapping[str, Any]) -> None:
        if options.get("overwrite"):
            self._pending = [(n, h) for n, h in self._pending if n != name]
            self._overwrite.add(name)

        scratch = Response()
        attrs = dict(
            path=options.get("path") or "/",
            domain=options.get("domain"),
            secure=bool(options.get("secure")),
            httponly=bool(options.get("httponly")),
            samesite=options.get("samesite"),
        )
        if value:
            scratch.set_cookie(name, value, max_age=options.get("max_age"), **attrs)
        else:
            scratch.delete_cookie(name, **attrs)
        for key, header in scratch.raw_headers:
            if key == b"set-cookie":
                self._pending.append((name, header))

    def apply(self, message: Message) -> None:
        """Merge queued cookies into an `http.response.start` message."""
        if not self._pending:
            return
        headers: List[Any] = [
            (k, v) for k, v in message.get("headers", [])
            if not (k.lower() == b"set-cookie" and _cookie_name(v) in self._overwrite)
        ]
        headers.extend((b"set-cookie", v) for _, v in self._pending)
        message["headers"] = headers
