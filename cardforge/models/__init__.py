from cardforge.models.card import U8_MAX, U32_MAX, CardCollection, CardDef
from cardforge.models.failure import (
    ArchiveCause,
    ArchiveError,
    CardDefsParseError,
    CardForgeError,
    DecodeError,
    FailureKind,
    SourceReadError,
)

__all__ = [
    "ArchiveCause",
    "ArchiveError",
    "CardCollection",
    "CardDef",
    "CardDefsParseError",
    "CardForgeError",
    "DecodeError",
    "FailureKind",
    "SourceReadError",
    "U32_MAX",
    "U8_MAX",
]
