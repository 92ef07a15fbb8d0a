"""Session entity, context and payload codec."""

from .codec import serialize, deserialize, decode, Decoded, DecodeError
from .context import SessionContext
from .model import Session
from .interfaces import CookieTransportProtocol

__all__ = [
	"serialize",
	"deserialize",
	"decode",
	"Decoded",
	"DecodeError",
	"SessionContext",
	"Session",
	"CookieTransportProtocol",
]
