from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Seed cell of the empty board
    center_q: int = 0
    center_r: int = 0

    # Players
    starting_player: int = 0
    first_player_name: str = "BLACK"
    second_player_name: str = "GRAY"

    # Rules
    queen_deadline: int = 4  # the Queen must be down by each player's 4th turn

    # Diagnostics
    verify_invariants: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="HIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
