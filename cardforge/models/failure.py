"""
Failure taxonomy for the card data pipeline.

Every error raised by the parser, codec and archive layers derives from
CardForgeError and is classified by a FailureKind:

- io: the XML source could not be opened or read
- parse: the XML token stream is broken and cannot be advanced
- decode: an encoded payload is truncated or structurally inconsistent
- archive: the artifact file could not be read/written, or its compressed
  frame (or the payload inside it) is invalid
- verification: a reloaded archive differs from the catalog it was built from

Malformed values inside an otherwise readable catalog are NOT failures.
The parser resolves them to defaults (0, empty string, absent text).
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    IO = "io"
    PARSE = "parse"
    DECODE = "decode"
    ARCHIVE = "archive"
    VERIFICATION = "verification"


class ArchiveCause(str, Enum):
    """Why an archive operation failed."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO = "io"
    CORRUPT_FRAME = "corrupt_frame"
    DECODE = "decode"


class CardForgeError(Exception):
    """
    Base class for known, explainable pipeline failures.

    Attributes:
        kind: Failure classification
        message: Human-readable explanation of what went wrong
        detail: Additional technical detail (optional)
    """

    def __init__(self, kind: FailureKind, message: str, detail: str | None = None):
        self.kind = kind
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class SourceReadError(CardForgeError):
    """Raised when the XML source cannot be opened or read."""

    def __init__(self, source: str, detail: str | None = None):
        self.source = source
        super().__init__(
            kind=FailureKind.IO,
            message=f"Could not read card definitions from {source}",
            detail=detail,
        )


class CardDefsParseError(CardForgeError):
    """
    Raised when the XML token stream is structurally broken.

    position is the (line, column) reported by the XML tokenizer, if known.
    """

    def __init__(self, reason: str, position: tuple[int, int] | None = None):
        self.reason = reason
        self.position = position
        if position is not None:
            message = f"Malformed card definitions at line {position[0]}, column {position[1]}"
        else:
            message = "Malformed card definitions"
        super().__init__(kind=FailureKind.PARSE, message=message, detail=reason)


class DecodeError(CardForgeError):
    """Raised when an encoded card payload cannot be decoded."""

    def __init__(self, reason: str, offset: int):
        self.reason = reason
        self.offset = offset
        super().__init__(
            kind=FailureKind.DECODE,
            message=f"Invalid card payload at byte {offset}: {reason}",
        )


class ArchiveError(CardForgeError):
    """
    Raised when the card archive cannot be written or read back.

    The cause code distinguishes filesystem failures from invalid contents.
    """

    def __init__(self, cause: ArchiveCause, path: str, detail: str | None = None):
        self.cause = cause
        self.path = path
        super().__init__(
            kind=FailureKind.ARCHIVE,
            message=f"Card archive {path} failed: {cause.value}",
            detail=detail,
        )


def archive_cause_for(error: OSError) -> ArchiveCause:
    """Map an OS-level error to its archive cause code."""
    if isinstance(error, FileNotFoundError):
        return ArchiveCause.NOT_FOUND
    if isinstance(error, PermissionError):
        return ArchiveCause.PERMISSION_DENIED
    return ArchiveCause.IO
