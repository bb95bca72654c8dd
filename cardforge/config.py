from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Build job settings loaded from environment (CARDFORGE_*)."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDFORGE_", extra="ignore")

    app_name: str = "CardForge"

    source_path: Path = Path("hsdata/CardDefs.xml")
    output_path: Path = Path("cards.dat")

    # Language-region code, e.g. enUS, frFR, zhTW
    locale: str = Field(default="enUS", pattern=r"^[a-z]{2}[A-Z]{2}$")

    # LZ4 frame level: 0 is fastest, 16 gives the best ratio
    compression_level: int = Field(default=4, ge=0, le=16)


settings = Settings()
