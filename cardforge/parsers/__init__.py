from cardforge.parsers.carddefs_xml import (
    CardDefsParser,
    parse_carddefs,
    parse_carddefs_xml,
    parse_unsigned,
    resolve_locale_text,
)

__all__ = [
    "CardDefsParser",
    "parse_carddefs",
    "parse_carddefs_xml",
    "parse_unsigned",
    "resolve_locale_text",
]
