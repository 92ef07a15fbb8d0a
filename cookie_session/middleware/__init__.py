from .binding import RequestBinding, SlotState
from .session import (
	CookieSessionMiddleware,
	SCOPE_KEY,
	install_cookie_session,
	get_session_binding,
	get_session,
)

__all__ = [
	"RequestBinding",
	"SlotState",
	"CookieSessionMiddleware",
	"SCOPE_KEY",
	"install_cookie_session",
	"get_session_binding",
	"get_session",
]
