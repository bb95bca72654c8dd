from collections.abc import Callable
from pathlib import Path

import pytest

from cardforge.models.card import CardCollection, CardDef

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def carddefs_path() -> Path:
    """Small multi-locale CardDefs.xml catalog."""
    return FIXTURES_DIR / "CardDefs.xml"


@pytest.fixture
def single_entity_xml() -> bytes:
    """Catalog with one entity, named only in enUS."""
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<CardDefs>
  <Entity CardID="TEST_001" ID="1" version="1">
    <Tag name="COST" value="3"/>
    <Tag name="ATK" value="2"/>
    <Tag name="HEALTH" value="4"/>
    <Tag name="CARDNAME">
      <enUS>Test Card</enUS>
    </Tag>
  </Entity>
</CardDefs>"""


@pytest.fixture
def write_xml(tmp_path: Path) -> Callable[[bytes], Path]:
    """Write XML bytes to a temporary CardDefs.xml and return its path."""

    def _write(content: bytes) -> Path:
        path = tmp_path / "CardDefs.xml"
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def sample_collection() -> CardCollection:
    """Collection mixing present and absent optional text."""
    return CardCollection(
        cards=[
            CardDef(
                id=559,
                version=2,
                cost=5,
                attack=6,
                health=2,
                cardid="EX1_116",
                name="Leeroy Jenkins",
                hand_text="<b>Charge</b>. <b>Battlecry:</b> Summon two 1/1 Whelps.",
                flavor_text="At least he has Angry & Chicken.",
            ),
            CardDef(
                id=1369,
                version=2,
                cost=4,
                attack=4,
                health=5,
                cardid="CS2_182",
                name="Yéti noroît",
                flavor_text="Il a toujours rêvé de descendre des montagnes.",
            ),
            CardDef(id=637, version=3, health=30, cardid="HERO_08", name="Jaina Proudmoore"),
        ]
    )
