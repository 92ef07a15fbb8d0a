"""Application factory for a FastAPI app with cookie sessions.

`create_app(config: Config) -> FastAPI` performs all setup (logging,
option loading, middleware and router registration) so tests and runners
can build isolated apps:

    from cookie_session.main import create_app, Config
    app = create_app(Config(config_path=Path('session.yml')))

Options are resolved in order: an explicit `Config.session`, the YAML file
at `Config.config_path`, then keyword defaults. When neither supplies key
material, the `COOKIE_SESSION_SECRET` environment variable is used.
"""
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cookie_session.config import SessionOptions, load_options, secret_from_env
from cookie_session.errors import InvalidSessionValue
from cookie_session.logging_config import configure_logging


@dataclass
class Config:
    config_path: Optional[Path] = None
    session: Optional[SessionOptions] = None
    configure_logging: bool = True


def resolve_options(config: Config) -> SessionOptions:
    if config.session is not None:
        return config.session
    secret = secret_from_env()
    defaults = {'secret': secret} if secret else {}
    if config.config_path is not None:
        return load_options(config.config_path, defaults)
    return SessionOptions(**defaults)


def create_app(config: Config) -> FastAPI:
    """Create and return a configured FastAPI application.

    Raises ConfigurationError when the session options are invalid, e.g.
    signing is enabled but no keys are available.
    """
    if config.configure_logging:
        logger = configure_logging(config.config_path)
    else:
        logger = logging.getLogger(__name__)

    options = resolve_options(config)

    app = FastAPI(title="Cookie Session Server")

    from cookie_session.middleware import install_cookie_session
    install_cookie_session(app, options)

    @app.exception_handler(InvalidSessionValue)
    async def invalid_session_value_handler(request: Request, exc: InvalidSessionValue):
        return JSONResponse(status_code=400, content={'error': 'invalid_session_value', 'message': str(exc)})

    # Router registration: import routers here to avoid import-time side-effects
    from cookie_session.session.api import router as session_router
    app.include_router(session_router, prefix='/api')

    logger.info("Cookie session app created (cookie=%s)", options.name)
    return app
