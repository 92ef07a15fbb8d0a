"""Cookie session options.

`SessionOptions` holds the cookie name, signing keys and the cookie
attributes that are forwarded to the transport on every read and write.
Options can be built in code or loaded from a YAML file:

    session:
      name: session
      keys: ["current-key", "previous-key"]
      max_age: 86400
      samesite: lax
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
import logging
import os

import yaml

from cookie_session.errors import ConfigurationError

logger = logging.getLogger(__name__)

SECRET_ENV = "COOKIE_SESSION_SECRET"
SAMESITE_VALUES = ("lax", "strict", "none")


@dataclass
class SessionOptions:
    name: str = "session"
    keys: Optional[List[str]] = None
    secret: Optional[str] = None
    signed: bool = True
    httponly: bool = True
    overwrite: bool = True
    max_age: Optional[int] = None
    path: str = "/"
    domain: Optional[str] = None
    secure: bool = False
    samesite: Optional[str] = "lax"

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("cookie name must not be empty")
        if isinstance(self.keys, str):
            self.keys = [self.keys]
        if not self.keys and self.secret:
            self.keys = [self.secret]
        if self.keys is not None:
            self.keys = list(self.keys)
            if not all(isinstance(k, str) and k for k in self.keys):
                raise ConfigurationError("keys must be non-empty strings")
        if self.signed and not self.keys:
            raise ConfigurationError(".keys required when signed is enabled")
        if self.samesite is not None:
            self.samesite = str(self.samesite).lower()
            if self.samesite not in SAMESITE_VALUES:
                raise ConfigurationError(f"samesite must be one of {SAMESITE_VALUES}, got {self.samesite!r}")
        if self.max_age is not None and not isinstance(self.max_age, int):
            raise ConfigurationError("max_age must be an integer number of seconds")

    @classmethod
    def from_mapping(cls, data: Any) -> "SessionOptions":
        """Build options from a plain mapping, rejecting unknown keys."""
        if not isinstance(data, Mapping):
            raise ConfigurationError("invalid session options: expected mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown session options: {', '.join(map(str, unknown))}")
        return cls(**dict(data))

    def cookie_options(self) -> Dict[str, Any]:
        """Return the options forwarded to the transport with each call."""
        return {
            "httponly": self.httponly,
            "overwrite": self.overwrite,
            "signed": self.signed,
            "max_age": self.max_age,
            "path": self.path,
            "domain": self.domain,
            "secure": self.secure,
            "samesite": self.samesite,
        }

    def describe(self) -> Dict[str, Any]:
        """Options safe to log: key material replaced by a count."""
        out = self.cookie_options()
        out["name"] = self.name
        out["keys"] = len(self.keys or [])
        return out


def load_options(path: Path, defaults: Optional[Mapping[str, Any]] = None) -> SessionOptions:
    """Load `SessionOptions` from a YAML file.

    A top-level `session:` mapping is used when present, otherwise the whole
    document is treated as the options mapping. `defaults` fill in options
    the file does not set.
    """
    try:
        with Path(path).open('r', encoding='utf-8') as f:
            data: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError("invalid config format: parse error") from e
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("invalid config format: expected mapping")
    section = data.get('session', data)
    if not isinstance(section, dict):
        raise ConfigurationError("invalid config format: 'session' must be a mapping")
    # log_level belongs to logging setup, not to the session options
    section = {k: v for k, v in section.items() if k != 'log_level'}
    if defaults:
        section = {**defaults, **section}
    logger.debug("Loaded session options from %s", path)
    return SessionOptions.from_mapping(section)


def secret_from_env() -> Optional[str]:
    """Return the signing secret from the environment, if set."""
    value = os.environ.get(SECRET_ENV)
    return value or None
