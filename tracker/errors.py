"""Error taxonomy for the ledger and its record store."""


class LedgerError(Exception):
    """Base class for every error raised by the tracker."""


class InvalidAmount(LedgerError, ValueError):
    """Raised for non-positive or unparseable amounts and limits."""


class InvalidKind(LedgerError, ValueError):
    """Raised when a transaction type is neither income nor expense."""


class MalformedRecord(LedgerError, ValueError):
    """A single row could not be turned into a transaction or limit."""

    def __init__(self, line: int, reason: str):
        super().__init__(f"line {line}: {reason}")
        self.line = line
        self.reason = reason


class FileUnavailable(LedgerError, OSError):
    """The record store could not open a file."""

    def __init__(self, path: str, reason: str = ""):
        super().__init__(f"cannot access {path}" + (f": {reason}" if reason else ""))
        self.path = path
