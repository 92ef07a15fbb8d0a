from typing import Any, Mapping, Optional


class RecordingTransport:
    """In-memory cookie transport for binding tests.

    `inbound` is the value `read` returns (or an exception to raise);
    every `write` is recorded as `(name, value, options)`.
    """

    def __init__(self, inbound: Any = None, fail_write: Optional[Exception] = None):
        self.inbound = inbound
        self.fail_write = fail_write
        self.reads: list[str] = []
        self.writes: list[tuple[str, str, dict]] = []

    def read(self, name: str, options: Mapping[str, Any]) -> Optional[str]:
        self.reads.append(name)
        if isinstance(self.inbound, Exception):
            raise self.inbound
        return self.inbound

    def write(self, name: str, value: str, options: Mapping[str, Any]) -> None:
        if self.fail_write is not None:
            raise self.fail_write
        self.writes.append((name, value, dict(options)))

    @property
    def saves(self) -> list[tuple[str, str, dict]]:
        return [w for w in self.writes if w[1]]

    @property
    def deletes(self) -> list[tuple[str, str, dict]]:
        return [w for w in self.writes if not w[1]]
