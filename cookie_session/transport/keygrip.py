"""Keygrip-style cookie signing.

A keygrip is an ordered list of secrets. The first key signs new data;
every key is tried when verifying so keys can be rotated without
invalidating cookies that are already out there.
"""
from __future__ import annotations
import base64
from typing import Iterable

from cryptography.hazmat.primitives import constant_time, hashes, hmac

from cookie_session.errors import ConfigurationError


class Keygrip:
    def __init__(self, keys: Iterable[str]) -> None:
        self._keys = [k.encode("utf-8") if isinstance(k, str) else bytes(k) for k in keys]
        if not self._keys:
            raise ConfigurationError("Keygrip requires at least one key")

    def __len__(self) -> int:
        return len(self._keys)

    @staticmethod
    def _digest(data: str, key: bytes) -> str:
        h = hmac.HMAC(key, hashes.SHA1())
        h.update(data.encode("utf-8"))
        sig = base64.b64encode(h.finalize()).decode("ascii")
        # cookie-safe alphabet, no padding
        return sig.replace("/", "_").replace("+", "-").rstrip("=")

    def sign(self, data: str) -> str:
        return self._digest(data, self._keys[0])

    def index(self, data: str, digest: str) -> int:
        """Return the index of the key that produced `digest`, or -1."""
        if not digest:
            return -1
        expected = digest.encode("utf-8")
        for i, key in enumerate(self._keys):
            if constant_time.bytes_eq(self._digest(data, key).encode("ascii"), expected):
                return i
        return -1

    def verify(self, data: str, digest: str) -> bool:
        return self.index(data, digest) > -1
