"""
Streaming parser for CardDefs.xml catalogs.

Catalog format:
    <CardDefs>
      <Entity CardID="EX1_116" ID="559" version="2">
        <Tag enumID="185" name="CARDNAME" type="LocString">
          <enUS>Leeroy Jenkins</enUS>
          <frFR>Leeroy Jenkins</frFR>
        </Tag>
        <Tag enumID="48" name="COST" type="Int" value="5"/>
        ...
      </Entity>
    </CardDefs>

The document is read once, front to back. Entities are released from memory
as soon as they close, so a full catalog streams in bounded memory.

Malformed values never abort a parse: unparseable numbers become 0 and
missing localized text leaves the field at its default. Only unreadable
sources and a broken token stream raise.
"""

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO
from xml.parsers.expat import errors as expat_errors

from cardforge.models.card import U8_MAX, U32_MAX, CardCollection, CardDef
from cardforge.models.failure import CardDefsParseError, SourceReadError

logger = logging.getLogger(__name__)

ENTITY_ELEMENT = "Entity"
TAG_ELEMENT = "Tag"

# Tag names whose content is a set of per-locale children
LOCALIZED_TAGS = frozenset({"CARDNAME", "CARDTEXT", "FLAVORTEXT"})

# Inline-valued tag name -> CardDef field
NUMERIC_TAGS = {
    "COST": "cost",
    "ATK": "attack",
    "HEALTH": "health",
}

# ASCII digits only, optional leading plus (no whitespace, no sign, no "_")
_UNSIGNED_PATTERN = re.compile(r"\+?[0-9]+")

_Events = Iterator[tuple[str, ET.Element]]

# Tokenizer errors meaning "input stopped early" rather than "input is broken".
# The stream ends there, so any entity still open is dropped.
_END_OF_STREAM_ERRORS = frozenset(
    expat_errors.codes[message]
    for message in (
        expat_errors.XML_ERROR_NO_ELEMENTS,
        expat_errors.XML_ERROR_UNCLOSED_TOKEN,
        expat_errors.XML_ERROR_PARTIAL_CHAR,
    )
)


def parse_unsigned(raw: str | None, limit: int = U32_MAX) -> int:
    """
    Parse an unsigned integer attribute, defaulting to 0.

    Args:
        raw: Attribute text, or None if the attribute is missing
        limit: Largest representable value for the target field

    Returns:
        The parsed value, or 0 if missing, malformed or out of range
    """
    if raw is None or not _UNSIGNED_PATTERN.fullmatch(raw):
        return 0
    value = int(raw)
    return value if value <= limit else 0


@dataclass(slots=True)
class _CardDraft:
    """Card under construction while the parser is inside an entity."""

    id: int = 0
    version: int = 0
    cost: int = 0
    attack: int = 0
    health: int = 0
    cardid: str = ""
    name: str = ""
    hand_text: str | None = None
    flavor_text: str | None = None

    @classmethod
    def from_entity(cls, entity: ET.Element) -> "_CardDraft":
        return cls(
            cardid=entity.get("CardID", ""),
            id=parse_unsigned(entity.get("ID"), U32_MAX),
            version=parse_unsigned(entity.get("version"), U8_MAX),
        )

    def freeze(self) -> CardDef:
        return CardDef(
            id=self.id,
            version=self.version,
            cost=self.cost,
            attack=self.attack,
            health=self.health,
            cardid=self.cardid,
            name=self.name,
            hand_text=self.hand_text,
            flavor_text=self.flavor_text,
        )


class _ScanState(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


def resolve_locale_text(events: _Events, tag: ET.Element, locale: str) -> str | None:
    """
    Read forward through a tag's children for the requested locale's text.

    Consumes events up to and including the matching locale element's close,
    or up to the enclosing tag's close when the locale is missing. Text from
    other locales is read past and discarded.

    Args:
        events: Shared (event, element) iterator positioned just after the
            tag's start event
        tag: The enclosing Tag element
        locale: Locale element name to match exactly (e.g., "enUS")

    Returns:
        Unescaped, whitespace-trimmed leading text of the locale element, or
        None if the tag closes (or the stream ends) without a non-empty match.
    """
    candidate: ET.Element | None = None

    for event, elem in events:
        if event == "start":
            if candidate is None and elem.tag == locale:
                candidate = elem
            continue

        if elem is candidate:
            text = (elem.text or "").strip()
            if text:
                return text
            # Empty locale element: keep looking until the tag closes
            candidate = None
        elif elem is tag:
            return None

    return None


class CardDefsParser:
    """
    Single-pass parser from a CardDefs.xml byte stream to a CardCollection.

    Usage:
        parser = CardDefsParser("enUS")
        with open("CardDefs.xml", "rb") as f:
            cards = parser.parse(f)
    """

    def __init__(self, locale: str) -> None:
        if not locale:
            raise ValueError("locale must be a non-empty locale code")
        self.locale = locale
        self._localized_seen = 0
        self._localized_hits = 0

    def parse(self, source: BinaryIO) -> CardCollection:
        """
        Parse every entity in the stream.

        Args:
            source: Binary stream positioned at the start of the document

        Returns:
            CardCollection in document order. An entity left open at end of
            stream is dropped.

        Raises:
            SourceReadError: If reading the stream fails
            CardDefsParseError: If the XML is structurally broken
        """
        self._localized_seen = 0
        self._localized_hits = 0
        source_name = str(getattr(source, "name", "<stream>"))
        cards: list[CardDef] = []

        try:
            self._scan(ET.iterparse(source, events=("start", "end")), cards)
        except ET.ParseError as e:
            if getattr(e, "code", None) not in _END_OF_STREAM_ERRORS:
                raise CardDefsParseError(str(e), getattr(e, "position", None)) from e
            logger.warning(
                "Catalog %s ended inside an open element (%s); kept %d complete cards",
                source_name,
                e,
                len(cards),
            )
        except OSError as e:
            raise SourceReadError(source_name, detail=str(e)) from e

        if self._localized_seen and not self._localized_hits:
            logger.warning(
                "Locale %s not found in any of %d localized tags",
                self.locale,
                self._localized_seen,
            )
        logger.info("Parsed %d cards (locale %s) from %s", len(cards), self.locale, source_name)
        return CardCollection(cards=cards)

    def _scan(self, events: _Events, cards: list[CardDef]) -> None:
        state = _ScanState.OUTSIDE
        draft: _CardDraft | None = None
        root: ET.Element | None = None

        for event, elem in events:
            if root is None:
                root = elem

            if event == "start" and elem.tag == ENTITY_ELEMENT:
                # A nested entity open restarts the card under construction
                draft = _CardDraft.from_entity(elem)
                state = _ScanState.INSIDE
                continue

            if state is _ScanState.OUTSIDE or draft is None:
                continue

            if event == "start" and elem.tag == TAG_ELEMENT:
                self._apply_tag(draft, elem, events)
            elif event == "end" and elem.tag == ENTITY_ELEMENT:
                cards.append(draft.freeze())
                draft = None
                state = _ScanState.OUTSIDE
                elem.clear()
                root.clear()

    def _apply_tag(self, draft: _CardDraft, tag: ET.Element, events: _Events) -> None:
        tag_name = tag.get("name")
        if tag_name is None:
            return

        if tag_name in LOCALIZED_TAGS:
            self._localized_seen += 1
            text = resolve_locale_text(events, tag, self.locale)
            if text is None:
                return
            self._localized_hits += 1
            if tag_name == "CARDNAME":
                draft.name = text
            elif tag_name == "CARDTEXT":
                draft.hand_text = text
            else:
                draft.flavor_text = text
            return

        field_name = NUMERIC_TAGS.get(tag_name)
        if field_name is not None:
            setattr(draft, field_name, parse_unsigned(tag.get("value"), U32_MAX))


def parse_carddefs(source: BinaryIO, locale: str) -> CardCollection:
    """
    Parse a CardDefs.xml byte stream.

    Args:
        source: Binary stream of the XML document
        locale: Locale code whose text fills name/hand_text/flavor_text

    Returns:
        CardCollection in document order
    """
    return CardDefsParser(locale).parse(source)


def parse_carddefs_xml(path: Path | str, locale: str) -> CardCollection:
    """
    Parse a CardDefs.xml file.

    Args:
        path: Path to the XML catalog
        locale: Locale code (e.g., "enUS")

    Returns:
        CardCollection in document order

    Raises:
        SourceReadError: If the file cannot be opened or read
        CardDefsParseError: If the XML is structurally broken
    """
    parser = CardDefsParser(locale)
    try:
        f = open(path, "rb")  # noqa: SIM115
    except OSError as e:
        raise SourceReadError(str(path), detail=str(e)) from e

    with f:
        return parser.parse(f)
