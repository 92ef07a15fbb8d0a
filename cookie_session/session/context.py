from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class SessionContext:
    """Ties a session to the request that loaded it.

    `baseline` is the raw cookie value the session was reconstructed from,
    or None for a freshly created session.
    """

    owner: Any
    freshly_created: bool = True
    baseline: Optional[str] = None
