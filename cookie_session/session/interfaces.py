from typing import Protocol, Any, Mapping, Optional, runtime_checkable


@runtime_checkable
class CookieTransportProtocol(Protocol):
    """Cookie transport consumed by the request binding.

    `read` returns the raw cookie value, or None when the cookie is missing
    or (for signed cookies) its signature does not verify. `write` with an
    empty value deletes the cookie. `options` is forwarded unchanged from
    configuration (httponly, overwrite, signed, max_age, path, domain,
    secure, samesite).
    """

    def read(self, name: str, options: Mapping[str, Any]) -> Optional[str]: ...

    def write(self, name: str, value: str, options: Mapping[str, Any]) -> None: ...
