"""The contract between a game and the driver that runs it.

Plugins hold no per-game state: every call receives the current
``game_data`` and ``Phase``, so a driver can replay, clone or serialise a
game without the plugin's help.
"""

from __future__ import annotations

from typing import ClassVar, Protocol, runtime_checkable

from hive_engine.engine.models import (
    Action,
    Event,
    GameConfig,
    Phase,
    Player,
    PlayerId,
    TransitionResult,
)


@runtime_checkable
class GamePlugin(Protocol):
    """Interface that every game must implement.

    ``validate_action`` reports a rejected action as a message string and
    leaves state untouched; ``apply_action`` is only called with actions
    that passed it.
    """

    game_id: ClassVar[str]
    display_name: ClassVar[str]
    min_players: ClassVar[int]
    max_players: ClassVar[int]
    description: ClassVar[str]
    config_schema: ClassVar[dict]

    def create_initial_state(
        self,
        players: list[Player],
        config: GameConfig,
    ) -> tuple[dict, Phase, list[Event]]:
        ...

    def validate_config(self, options: dict) -> list[str]:
        ...

    def get_valid_actions(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId,
    ) -> list[dict]:
        ...

    def validate_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
    ) -> str | None:
        ...

    def apply_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
        players: list[Player],
    ) -> TransitionResult:
        ...

    def get_player_view(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId | None,
        players: list[Player],
    ) -> dict:
        """State as seen by ``player_id``; None asks for the spectator view."""
        ...

    def on_player_forfeit(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId,
        players: list[Player],
    ) -> TransitionResult | None:
        """Called when a player resigns.

        Return a TransitionResult that ends or advances the game, or None
        if the driver should handle it generically.
        """
        ...
