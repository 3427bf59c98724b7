from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# DECK SAMPLER CONSTANTS
# =============================================================================

# A generated deck is "valid" once it reaches this share of the target size
# (the candidate pool may run dry before the target is met)
DECK_COMPLETION_THRESHOLD = 0.9

# Basic lands are added this many copies at a time
BASIC_LAND_BATCH = 4

# Mana curve histogram buckets (lands excluded)
MANA_CURVE_BUCKETS: tuple[str, ...] = ("0-1", "2", "3", "4", "5", "6+")


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKFORGE_")

    app_name: str = "DeckForge"
    debug: bool = False
    log_level: str = "INFO"

    # Local JSON file of raw card objects, loaded into the search index on startup
    card_data_path: Path | None = None

    # Cards normalized/indexed between cooperative yields to the event loop
    index_chunk_size: int = 1000

    # Keep only the most recent printing of each oracle id
    deduplicate_printings: bool = False

    deck_completion_threshold: float = DECK_COMPLETION_THRESHOLD
    default_deck_count: int = 5
    max_deck_count: int = 20


settings = Settings()
