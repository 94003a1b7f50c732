"""Exception types raised by hotpotato."""


class HotPotatoError(Exception):
    """Base class for hotpotato failures."""


class DeltaTraversalError(HotPotatoError):
    """A change notification tree could not be walked."""

    def __init__(self, path: str | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f" at {path}" if path else ""
        super().__init__(f"malformed resource delta{where}: {reason}")
