"""Stateless cookie-carried sessions for ASGI applications."""

from .config import SessionOptions, load_options
from .errors import CookieSessionError, MalformedPayload, InvalidSessionValue, ConfigurationError
from .session import Session, SessionContext, serialize, deserialize
from .middleware import (
	CookieSessionMiddleware,
	RequestBinding,
	SlotState,
	install_cookie_session,
	get_session_binding,
	get_session,
)

__all__ = [
	"SessionOptions",
	"load_options",
	"CookieSessionError",
	"MalformedPayload",
	"InvalidSessionValue",
	"ConfigurationError",
	"Session",
	"SessionContext",
	"serialize",
	"deserialize",
	"CookieSessionMiddleware",
	"RequestBinding",
	"SlotState",
	"install_cookie_session",
	"get_session_binding",
	"get_session",
]
