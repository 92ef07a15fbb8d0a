from typing import Any, Optional
import logging

from fastapi import FastAPI, HTTPException
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cookie_session.config import SessionOptions
from cookie_session.middleware.binding import RequestBinding
from cookie_session.session.model import Session
from cookie_session.transport import ScopeCookieTransport

logger = logging.getLogger(__name__)

# Scope key holding the per-request RequestBinding
SCOPE_KEY = "cookie_session"


def _resolve_options(options: Optional[SessionOptions], overrides: dict) -> SessionOptions:
    if options is None:
        return SessionOptions(**overrides)
    if overrides:
        return SessionOptions.from_mapping({**vars(options), **overrides})
    return options


#############################################
## Cookie session middleware for ASGI
## Binds a lazily loaded session to every HTTP request and writes the
## session cookie when the response headers go out.
#############################################
class CookieSessionMiddleware:
    def __init__(self, app: ASGIApp, options: Optional[SessionOptions] = None, **overrides: Any):
        self.app = app
        self.options = _resolve_options(options, overrides)
        logger.debug("session options %s", self.options.describe())

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope['type'] != 'http':
            await self.app(scope, receive, send)
            return

        transport = ScopeCookieTransport(scope, keys=self.options.keys)
        binding = RequestBinding(transport, self.options)
        scope[SCOPE_KEY] = binding

        async def send_wrapper(message: Message) -> None:
            if message.get('type') == 'http.response.start':
                binding.commit()
                transport.apply(message)
            await send(message)

        await self.app(scope, receive, send_wrapper)


def install_cookie_session(app: FastAPI, options: Optional[SessionOptions] = None, **overrides: Any) -> SessionOptions:
    """Validate options and register `CookieSessionMiddleware` on `app`.

    Options are resolved here rather than when Starlette first builds its
    middleware stack, so a missing signing key fails at setup.
    """
    resolved = _resolve_options(options, overrides)
    app.add_middleware(CookieSessionMiddleware, options=resolved)
    logger.info("Cookie session middleware installed (cookie=%s, signed=%s)", resolved.name, resolved.signed)
    return resolved


def get_session_binding(request: Request) -> RequestBinding:
    """Return the request's session binding.

    Raises HTTPException(500) when the middleware is not installed.
    """
    binding = request.scope.get(SCOPE_KEY)
    if binding is None:
        raise HTTPException(status_code=500, detail="Cookie session middleware not installed")
    return binding


def get_session(request: Request) -> Optional[Session]:
    """Current session for the request, or None if it was cleared."""
    return get_session_binding(request).get_session()
