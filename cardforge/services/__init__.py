"""
CardForge services.

Binary encoding and on-disk archiving of parsed card collections.
"""

from cardforge.services.archive import (
    DEFAULT_COMPRESSION_LEVEL,
    MAX_COMPRESSION_LEVEL,
    load_cards,
    save_cards,
)
from cardforge.services.codec import FORMAT_VERSION, MAGIC, decode_cards, encode_cards

__all__ = [
    "DEFAULT_COMPRESSION_LEVEL",
    "FORMAT_VERSION",
    "MAGIC",
    "MAX_COMPRESSION_LEVEL",
    "decode_cards",
    "encode_cards",
    "load_cards",
    "save_cards",
]
