"""Data passed between a game plugin and the driver that runs it.

A plugin keeps its whole state in a JSON-able ``game_data`` dict; these
models describe everything around it: who is seated, what the driver should
wait for next, what a player sent, and what happened as a result.
"""

from __future__ import annotations

from typing import NewType

from pydantic import BaseModel, Field

# --- Identifiers ---
PlayerId = NewType("PlayerId", str)


# --- Seating ---
class Player(BaseModel):
    player_id: PlayerId
    display_name: str
    seat_index: int  # 0 plays the first colour


class GameConfig(BaseModel):
    """Per-game options, checked by the plugin's ``validate_config``."""

    options: dict = Field(default_factory=dict)


# --- Turn flow ---
class ExpectedAction(BaseModel):
    """An action the driver is waiting for; ``player_id`` None means anyone."""

    player_id: PlayerId | None = None
    action_type: str
    constraints: dict = Field(default_factory=dict)


class Phase(BaseModel):
    name: str
    expected_actions: list[ExpectedAction] = Field(default_factory=list)
    metadata: dict = Field(default_factory=dict)

    @property
    def acting_player(self) -> PlayerId | None:
        if not self.expected_actions:
            return None
        return self.expected_actions[0].player_id


class Action(BaseModel):
    action_type: str
    player_id: PlayerId
    payload: dict = Field(default_factory=dict)


class Event(BaseModel):
    event_type: str
    player_id: PlayerId | None = None
    payload: dict = Field(default_factory=dict)


# --- Outcomes ---
class GameResult(BaseModel):
    winners: list[PlayerId]  # empty on a draw
    final_scores: dict[str, float]
    reason: str = "normal"
    details: dict = Field(default_factory=dict)


class TransitionResult(BaseModel):
    """New state after one action, plus the game result once it is over."""

    game_data: dict
    events: list[Event]
    next_phase: Phase
    scores: dict[str, float] = Field(default_factory=dict)
    game_over: GameResult | None = None
