"""Synchronous game simulator: drives a plugin through a sequence of actions.

Used by the replay CLI and the tests to play complete games without any
session, network or storage layer in between.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from hive_engine.engine.errors import GameNotActiveError, InvalidActionError
from hive_engine.engine.models import (
    Action,
    Event,
    GameConfig,
    GameResult,
    Phase,
    Player,
    PlayerId,
)
from hive_engine.engine.protocol import GamePlugin


@dataclass
class SimulationState:
    """Mutable game state for synchronous simulation."""

    game_data: dict
    phase: Phase
    players: list[Player]
    scores: dict[str, float] = field(default_factory=dict)
    game_over: GameResult | None = None
    events: list[Event] = field(default_factory=list)


def new_simulation(
    plugin: GamePlugin,
    players: list[Player],
    config: GameConfig | None = None,
) -> SimulationState:
    """Create the initial state of a game."""
    config = config or GameConfig()
    errors = plugin.validate_config(config.options)
    if errors:
        raise ValueError(f"Invalid config for {plugin.game_id}: {'; '.join(errors)}")

    game_data, phase, events = plugin.create_initial_state(players, config)
    return SimulationState(
        game_data=game_data,
        phase=phase,
        players=players,
        scores={p.player_id: 0.0 for p in players},
        events=list(events),
    )


def apply_action(
    plugin: GamePlugin,
    state: SimulationState,
    action: Action,
) -> None:
    """Validate and apply an action.

    Mutates *state* in place.  Raises InvalidActionError when the plugin
    rejects the action; the state is left untouched in that case.
    """
    if state.game_over is not None:
        raise GameNotActiveError("Game is already over")

    err = plugin.validate_action(state.game_data, state.phase, action)
    if err is not None:
        raise InvalidActionError(err, action)

    result = plugin.apply_action(
        state.game_data, state.phase, action, state.players
    )
    state.game_data = result.game_data
    state.phase = result.next_phase
    state.scores = result.scores or state.scores
    state.game_over = result.game_over
    state.events.extend(result.events)


def play_payloads(
    plugin: GamePlugin,
    state: SimulationState,
    payloads: list[dict],
) -> None:
    """Apply payloads in order, each on behalf of the player to act."""
    for payload in payloads:
        pid = current_player_id(state)
        action_type = (
            state.phase.expected_actions[0].action_type
            if state.phase.expected_actions
            else state.phase.name
        )
        apply_action(
            plugin,
            state,
            Action(action_type=action_type, player_id=pid, payload=payload),
        )


def clone_state(state: SimulationState) -> SimulationState:
    """Deep-copy a simulation state.

    ``players`` is shared (immutable during a game).
    """
    return SimulationState(
        game_data=copy.deepcopy(state.game_data),
        phase=state.phase.model_copy(deep=True),
        players=state.players,  # shared, never mutated
        scores=dict(state.scores),
        game_over=state.game_over,
        events=list(state.events),
    )


def current_player_id(state: SimulationState) -> PlayerId:
    """Extract the acting player from the phase, falling back to first player."""
    phase = state.phase
    if phase.acting_player is not None:
        return phase.acting_player
    pi = phase.metadata.get("player_index")
    if pi is not None and pi < len(state.players):
        return state.players[pi].player_id
    return state.players[0].player_id if state.players else PlayerId("system")
