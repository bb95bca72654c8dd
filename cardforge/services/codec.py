"""
Binary codec for card collections.

Payload layout (all integers little-endian):

    magic           4 bytes   b"CFDB"
    format version  u8        FORMAT_VERSION
    record count    u32
    per record:
        id u32, version u8, cost u32, attack u32, health u32
        cardid        u32 length + UTF-8
        name          u32 length + UTF-8
        hand_text     u8 presence flag [+ u32 length + UTF-8]
        flavor_text   u8 presence flag [+ u32 length + UTF-8]

Encoding is deterministic: the same collection always yields the same bytes.
"""

import struct

from cardforge.models.card import CardCollection, CardDef
from cardforge.models.failure import DecodeError

MAGIC = b"CFDB"
FORMAT_VERSION = 1

_HEADER = struct.Struct("<4sBI")
_NUMERIC = struct.Struct("<IBIII")
_LENGTH = struct.Struct("<I")
_FLAG = struct.Struct("<B")

# numeric fields, two empty strings, two absent optionals
_MIN_RECORD_SIZE = _NUMERIC.size + 2 * _LENGTH.size + 2 * _FLAG.size


def _pack_str(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return _LENGTH.pack(len(encoded)) + encoded


def _pack_optional(value: str | None) -> bytes:
    if value is None:
        return _FLAG.pack(0)
    return _FLAG.pack(1) + _pack_str(value)


def encode_card(card: CardDef) -> bytes:
    """Encode a single card record (without collection framing)."""
    return b"".join(
        (
            _NUMERIC.pack(card.id, card.version, card.cost, card.attack, card.health),
            _pack_str(card.cardid),
            _pack_str(card.name),
            _pack_optional(card.hand_text),
            _pack_optional(card.flavor_text),
        )
    )


def encode_cards(collection: CardCollection) -> bytes:
    """
    Encode a card collection to its canonical payload.

    Args:
        collection: Cards to encode

    Returns:
        Payload bytes, stable across runs for equal collections
    """
    parts = [_HEADER.pack(MAGIC, FORMAT_VERSION, len(collection))]
    parts.extend(encode_card(card) for card in collection)
    return b"".join(parts)


class _PayloadReader:
    """Bounds-checked cursor over an encoded payload."""

    def __init__(self, data: bytes) -> None:
        self.data = memoryview(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def unpack(self, fmt: struct.Struct, what: str) -> tuple:
        if self.remaining < fmt.size:
            raise DecodeError(f"truncated {what}", self.offset)
        values = fmt.unpack_from(self.data, self.offset)
        self.offset += fmt.size
        return values

    def read_str(self, what: str) -> str:
        (length,) = self.unpack(_LENGTH, f"{what} length")
        if length > self.remaining:
            raise DecodeError(
                f"{what} length {length} exceeds remaining {self.remaining} bytes",
                self.offset,
            )
        start = self.offset
        self.offset += length
        try:
            return bytes(self.data[start : self.offset]).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"{what} is not valid UTF-8", start) from e

    def read_optional(self, what: str) -> str | None:
        (flag,) = self.unpack(_FLAG, f"{what} flag")
        if flag == 0:
            return None
        if flag != 1:
            raise DecodeError(f"invalid {what} presence flag {flag}", self.offset - 1)
        return self.read_str(what)


def _decode_card(reader: _PayloadReader) -> CardDef:
    card_id, version, cost, attack, health = reader.unpack(_NUMERIC, "record")
    return CardDef(
        id=card_id,
        version=version,
        cost=cost,
        attack=attack,
        health=health,
        cardid=reader.read_str("cardid"),
        name=reader.read_str("name"),
        hand_text=reader.read_optional("hand_text"),
        flavor_text=reader.read_optional("flavor_text"),
    )


def decode_cards(data: bytes) -> CardCollection:
    """
    Decode a payload produced by encode_cards.

    Args:
        data: Payload bytes

    Returns:
        The decoded CardCollection

    Raises:
        DecodeError: If the payload is truncated, has the wrong magic or
            format version, contains an invalid presence flag, a string
            overrunning the buffer, invalid UTF-8, or trailing bytes
    """
    reader = _PayloadReader(data)
    magic, version, count = reader.unpack(_HEADER, "header")
    if magic != MAGIC:
        raise DecodeError(f"bad magic {magic!r}", 0)
    if version != FORMAT_VERSION:
        raise DecodeError(f"unsupported format version {version}", len(MAGIC))
    if count * _MIN_RECORD_SIZE > reader.remaining:
        raise DecodeError(f"record count {count} exceeds payload size", len(MAGIC) + 1)

    cards = [_decode_card(reader) for _ in range(count)]

    if reader.remaining:
        raise DecodeError(f"{reader.remaining} trailing bytes after last record", reader.offset)

    return CardCollection(cards=cards)
