"""Exception types raised by the cookie session engine."""


class CookieSessionError(Exception):
    """Base class for all cookie session errors."""


class MalformedPayload(CookieSessionError, ValueError):
    """A cookie value could not be decoded into a session payload.

    Callers loading a session from a request treat this as "no session"
    and start a fresh one; it never reaches handler code.
    """


class InvalidSessionValue(CookieSessionError, TypeError):
    """Raised when the current session is assigned something other than a
    mapping or None."""


class ConfigurationError(CookieSessionError, ValueError):
    """Invalid middleware options, e.g. signing enabled without keys."""
