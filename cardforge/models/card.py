from collections.abc import Iterator
from dataclasses import dataclass, field

U8_MAX = 0xFF
U32_MAX = 0xFFFF_FFFF

# (field, inclusive upper bound) in encoding order
NUMERIC_FIELDS: tuple[tuple[str, int], ...] = (
    ("id", U32_MAX),
    ("version", U8_MAX),
    ("cost", U32_MAX),
    ("attack", U32_MAX),
    ("health", U32_MAX),
)


@dataclass(frozen=True, slots=True)
class CardDef:
    """
    One card entity from the catalog, flattened.

    Attributes:
        id: Catalog ID (0 if the source attribute was unparseable)
        version: Revision marker of the entity
        cost: Mana cost (0 when absent)
        attack: Attack value (0 when absent)
        health: Health value (0 when absent)
        cardid: String card identifier (e.g., "EX1_116"), may be empty
        name: Localized card name, empty if the locale was missing
        hand_text: Localized rules text, None when absent
        flavor_text: Localized flavor text, None when absent
    """

    id: int = 0
    version: int = 0
    cost: int = 0
    attack: int = 0
    health: int = 0
    cardid: str = ""
    name: str = ""
    hand_text: str | None = None
    flavor_text: str | None = None

    def __post_init__(self) -> None:
        for field_name, limit in NUMERIC_FIELDS:
            value = getattr(self, field_name)
            if not 0 <= value <= limit:
                raise ValueError(f"{field_name} must be between 0 and {limit}, got {value}")


@dataclass
class CardCollection:
    """
    Cards in catalog document order.

    Duplicate ids are allowed; the catalog's own identity scheme is trusted.
    """

    cards: list[CardDef] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[CardDef]:
        return iter(self.cards)

    def __getitem__(self, index: int) -> CardDef:
        return self.cards[index]

    def get_by_card_id(self, cardid: str) -> CardDef | None:
        """Get the first card with a given string identifier."""
        for card in self.cards:
            if card.cardid == cardid:
                return card
        return None

    def get_by_id(self, card_id: int) -> CardDef | None:
        """Get the first card with a given catalog ID."""
        for card in self.cards:
            if card.id == card_id:
                return card
        return None
