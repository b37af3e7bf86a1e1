"""
Exception hierarchy for Sahifa library.

All errors raised by the pagination engine derive from SahifaError so that
callers can handle them in one place:
- FetchFailure: a verse source or chapter directory call failed
- InvalidTarget: a requested page, chapter or verse is out of range
- CorruptVerseSequence: fetched verses have gaps, duplicates or bad order
"""


class SahifaError(Exception):
    """Base exception for Sahifa library."""

    def __init__(self, message: str = "An error occurred", detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message if detail is None else f"{message}: {detail}")


class FetchFailure(SahifaError):
    """Raised when verses or chapter metadata could not be fetched."""

    def __init__(self, target: str, reason: str | None = None):
        self.target = target
        super().__init__(f"Failed to fetch {target}", reason)


class InvalidTarget(SahifaError, ValueError):
    """Raised when a navigation target is outside its valid range."""

    def __init__(self, kind: str, value: object, valid_range: tuple[int, int] | None = None):
        self.kind = kind
        self.value = value
        self.valid_range = valid_range
        detail = None
        if valid_range is not None:
            detail = f"must be between {valid_range[0]} and {valid_range[1]}"
        super().__init__(f"Invalid {kind}: {value!r}", detail)


class CorruptVerseSequence(SahifaError):
    """Raised when a verse sequence is not contiguous or out of order."""

    def __init__(self, reason: str, global_index: int | None = None):
        self.reason = reason
        self.global_index = global_index
        detail = None if global_index is None else f"at global index {global_index}"
        super().__init__(f"Corrupt verse sequence ({reason})", detail)
