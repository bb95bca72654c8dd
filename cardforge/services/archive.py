"""
Card archive service.

Writes a CardCollection to disk as an LZ4-framed payload and loads it back.
Each save fully replaces the file at the destination path.
"""

import logging
from pathlib import Path

import lz4.frame

from cardforge.models.card import CardCollection
from cardforge.models.failure import ArchiveCause, ArchiveError, DecodeError, archive_cause_for
from cardforge.services.codec import decode_cards, encode_cards

logger = logging.getLogger(__name__)

DEFAULT_COMPRESSION_LEVEL = 4
MAX_COMPRESSION_LEVEL = lz4.frame.COMPRESSIONLEVEL_MAX


def save_cards(
    collection: CardCollection,
    path: Path | str,
    *,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
) -> None:
    """
    Encode, compress and write cards to a file.

    Args:
        collection: Cards to save
        path: Destination file, replaced if it exists
        compression_level: LZ4 level, 0 (fastest) to MAX_COMPRESSION_LEVEL

    Raises:
        ValueError: If compression_level is out of range
        ArchiveError: If the file cannot be written
    """
    if not 0 <= compression_level <= MAX_COMPRESSION_LEVEL:
        raise ValueError(
            f"compression_level must be between 0 and {MAX_COMPRESSION_LEVEL}, "
            f"got {compression_level}"
        )

    payload = encode_cards(collection)

    try:
        with (
            open(path, "wb") as f,
            lz4.frame.LZ4FrameFile(
                f,
                mode="wb",
                compression_level=compression_level,
                content_checksum=True,
            ) as writer,
        ):
            writer.write(payload)
    except OSError as e:
        raise ArchiveError(archive_cause_for(e), str(path), detail=str(e)) from e

    logger.info("Compressed and saved %d cards to %s", len(collection), path)


def _decompress(raw: bytes, path: Path | str) -> bytes:
    decompressor = lz4.frame.LZ4FrameDecompressor()
    try:
        payload = decompressor.decompress(raw)
    except RuntimeError as e:
        raise ArchiveError(ArchiveCause.CORRUPT_FRAME, str(path), detail=str(e)) from e

    if not decompressor.eof:
        raise ArchiveError(ArchiveCause.CORRUPT_FRAME, str(path), detail="frame is incomplete")
    if decompressor.unused_data:
        raise ArchiveError(
            ArchiveCause.CORRUPT_FRAME,
            str(path),
            detail=f"{len(decompressor.unused_data)} bytes after end of frame",
        )
    return payload


def load_cards(path: Path | str) -> CardCollection:
    """
    Read, decompress and decode cards from a file.

    The whole frame is decompressed into memory before decoding.

    Args:
        path: Archive written by save_cards

    Returns:
        The stored CardCollection

    Raises:
        ArchiveError: If the file cannot be read (NOT_FOUND, PERMISSION_DENIED,
            IO), the frame is corrupt (CORRUPT_FRAME), or the payload does not
            decode (DECODE, chained to the DecodeError)
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise ArchiveError(archive_cause_for(e), str(path), detail=str(e)) from e

    payload = _decompress(raw, path)

    try:
        cards = decode_cards(payload)
    except DecodeError as e:
        raise ArchiveError(ArchiveCause.DECODE, str(path), detail=e.message) from e

    logger.info("Decompressed and loaded %d cards from %s", len(cards), path)
    return cards
