from __future__ import annotations

from hive_engine.engine.models import GameConfig, Phase, Player, PlayerId
from hive_engine.engine.protocol import GamePlugin


def validate_plugin(plugin: GamePlugin) -> list[str]:
    """Run sanity checks on a plugin. Returns list of errors (empty = OK)."""
    errors: list[str] = []

    # Check required attributes
    for attr in ("game_id", "display_name", "min_players", "max_players"):
        if not hasattr(plugin, attr):
            errors.append(f"Missing attribute: {attr}")

    if errors:
        return errors  # Can't proceed without metadata

    if plugin.validate_config({}):
        errors.append("validate_config rejects the default (empty) options")

    # Test create_initial_state with min players
    try:
        players = [
            Player(
                player_id=PlayerId(f"test-{i}"),
                display_name=f"Test {i}",
                seat_index=i,
            )
            for i in range(plugin.min_players)
        ]
        config = GameConfig()
        game_data, phase, events = plugin.create_initial_state(players, config)

        if not isinstance(game_data, dict):
            errors.append("create_initial_state must return dict as game_data")

        if not isinstance(phase, Phase):
            errors.append("create_initial_state must return Phase as second element")

        if not phase.expected_actions:
            errors.append("First phase has no expected_actions")

        # The player on turn must have something to do
        acting = phase.acting_player
        for p in players:
            actions = plugin.get_valid_actions(game_data, phase, p.player_id)
            if p.player_id == acting and not actions:
                errors.append(f"No valid actions for acting player {p.player_id}")

        # Verify get_player_view doesn't crash
        for p in players:
            plugin.get_player_view(game_data, phase, p.player_id, players)

        # Verify determinism
        game_data2, phase2, events2 = plugin.create_initial_state(players, config)
        if game_data != game_data2:
            errors.append("create_initial_state is not deterministic")

    except Exception as e:
        errors.append(f"create_initial_state failed: {e}")

    return errors
