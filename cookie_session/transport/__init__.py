"""Cookie transport: keygrip signing and ASGI scope cookie handling."""

from .keygrip import Keygrip
from .cookies import ScopeCookieTransport, SIGNATURE_SUFFIX

__all__ = ["Keygrip", "ScopeCookieTransport", "SIGNATURE_SUFFIX"]
