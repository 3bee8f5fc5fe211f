"""HivePlugin: implements the GamePlugin protocol for Hive."""

from __future__ import annotations

import logging
from typing import ClassVar

from hive_engine.config import settings
from hive_engine.engine.models import (
    Action,
    Event,
    ExpectedAction,
    GameConfig,
    GameResult,
    Phase,
    Player,
    PlayerId,
    TransitionResult,
)
from hive_engine.games.hive.game import (
    QUEEN_MESSAGE,
    WINNING_MESSAGE,
    BoardSelection,
    GameStatus,
    HiveGame,
    InventorySelection,
    Selection,
)
from hive_engine.games.hive.inventory import QUEEN_SLOT
from hive_engine.games.hive.types import FIRST_PLAYER, SECOND_PLAYER, HexCoordinate, opponent_of

logger = logging.getLogger(__name__)

ACTION_TYPE = "play"

_INT_OPTIONS = ("center_q", "center_r", "starting_player", "queen_deadline")


class HivePlugin:
    """Hive: two-player abstract strategy game on an unbounded hex grid."""

    game_id: ClassVar[str] = "hive"
    display_name: ClassVar[str] = "Hive"
    min_players: ClassVar[int] = 2
    max_players: ClassVar[int] = 2
    description: ClassVar[str] = (
        "Place and slide bugs around a growing hive. "
        "Surround the opposing Queen Bee to win."
    )
    config_schema: ClassVar[dict] = {
        "type": "object",
        "properties": {
            "center_q": {"type": "integer"},
            "center_r": {"type": "integer"},
            "starting_player": {"type": "integer", "enum": [0, 1]},
            "queen_deadline": {"type": "integer", "minimum": 1},
            "verify_invariants": {"type": "boolean"},
        },
    }

    # ── Lifecycle ──

    def create_initial_state(
        self,
        players: list[Player],
        config: GameConfig,
    ) -> tuple[dict, Phase, list[Event]]:
        options = config.options
        seated = sorted(players, key=lambda p: p.seat_index)

        game = HiveGame(
            center=HexCoordinate(
                q=options.get("center_q", settings.center_q),
                r=options.get("center_r", settings.center_r),
            ),
            starting_player=options.get("starting_player", settings.starting_player),
            player_names=(seated[0].display_name, seated[1].display_name),
            queen_deadline=options.get("queen_deadline"),
            verify_invariants=options.get("verify_invariants"),
        )

        player_ids = [p.player_id for p in seated]
        game_data: dict = {
            "hive": game.to_dict(),
            "player_ids": player_ids,
            "scores": {pid: 0.0 for pid in player_ids},
        }

        events = [
            Event(event_type="game_started", payload={
                "players": player_ids,
                "starting_player": player_ids[game.player_to_move],
            }),
        ]
        logger.info(f"Hive game started: {' vs '.join(player_ids)}")

        return game_data, self._play_phase(game, player_ids), events

    def validate_config(self, options: dict) -> list[str]:
        errors: list[str] = []
        known = set(self.config_schema["properties"])
        for key in options:
            if key not in known:
                errors.append(f"Unknown option: {key}")
        for key in _INT_OPTIONS:
            if key in options and (
                not isinstance(options[key], int) or isinstance(options[key], bool)
            ):
                errors.append(f"{key} must be an integer")
        if options.get("starting_player", 0) not in (FIRST_PLAYER, SECOND_PLAYER):
            errors.append("starting_player must be 0 or 1")
        deadline = options.get("queen_deadline", 1)
        if isinstance(deadline, int) and deadline < 1:
            errors.append("queen_deadline must be at least 1")
        if "verify_invariants" in options and not isinstance(options["verify_invariants"], bool):
            errors.append("verify_invariants must be a boolean")
        return errors

    # ── Core game loop ──

    def get_valid_actions(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId,
    ) -> list[dict]:
        if phase.name != "play":
            return []

        expected_pid = phase.acting_player
        if player_id != expected_pid:
            return []

        game = HiveGame.from_dict(game_data["hive"])
        actions: list[dict] = []
        for selection in game.selections():
            for dest in sorted(game.legal_destinations(selection)):
                if isinstance(selection, InventorySelection):
                    actions.append({
                        "kind": "place",
                        "slot": selection.slot,
                        "species": game.inventories[game.player_to_move].species_at(selection.slot).value,
                        "q": dest.q,
                        "r": dest.r,
                    })
                else:
                    actions.append({
                        "kind": "move",
                        "from_q": selection.coordinate.q,
                        "from_r": selection.coordinate.r,
                        "q": dest.q,
                        "r": dest.r,
                    })

        if not actions:
            actions.append({"kind": "pass"})
        return actions

    def validate_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
    ) -> str | None:
        if phase.name != "play":
            return f"No actions accepted in phase {phase.name}"

        expected_pid = phase.acting_player
        if action.player_id != expected_pid:
            return "Not your turn"

        game = HiveGame.from_dict(game_data["hive"])
        payload = action.payload
        kind = payload.get("kind")

        if kind == "pass":
            if game.has_legal_action():
                return "Cannot pass while a legal placement or move exists"
            return None

        selection, destination, err = _parse_play(payload)
        if err is not None:
            return err

        if not game.can_select(selection):
            if isinstance(selection, InventorySelection):
                if game.queen_required() and selection.slot != QUEEN_SLOT:
                    return QUEEN_MESSAGE
                return f"Inventory slot {selection.slot} is not available"
            tile = game.board.top(selection.coordinate)
            if tile is None or tile.player_id != game.player_to_move:
                return f"No movable piece of yours at {selection.coordinate.to_key()}"
            return "Pieces cannot move before the Queen is placed"

        if destination not in game.legal_destinations(selection):
            return f"Illegal destination {destination.to_key()}"
        return None

    def apply_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
        players: list[Player],
    ) -> TransitionResult:
        if phase.name == "play":
            return self._apply_play(game_data, action)

        raise ValueError(f"Unknown phase: {phase.name}")

    # ── View filtering ──

    def get_player_view(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId | None,
        players: list[Player],
    ) -> dict:
        # No hidden info, return everything
        game = HiveGame.from_dict(game_data["hive"])
        player_ids = game_data["player_ids"]
        return {
            "board": {
                c.to_key(): view.model_dump(mode="json")
                for c, view in game.board_snapshot().items()
            },
            "frontier": sorted(c.to_key() for c in game.frontier),
            "inventories": {
                pid: [[species.value, count] for species, count in game.inventory_snapshot(i)]
                for i, pid in enumerate(player_ids)
            },
            "player_to_move": player_ids[game.player_to_move],
            "turn": game.turn,
            "status": game.status.value,
            "message": game.message,
            "queen_required": game.queen_required() if not game.is_over else False,
            "scores": game_data["scores"],
        }

    # ── Forfeit handling ──

    def on_player_forfeit(
        self,
        game_data: dict,
        phase: Phase,
        player_id: PlayerId,
        players: list[Player],
    ) -> TransitionResult | None:
        if phase.name != "play":
            return None

        player_ids = game_data["player_ids"]
        if player_id not in player_ids:
            logger.warning(f"Ignoring forfeit from unseated player {player_id}")
            return None

        game = HiveGame.from_dict(game_data["hive"])
        winner = opponent_of(player_ids.index(player_id))
        game.state.status = (
            GameStatus.FIRST_PLAYER_WON if winner == FIRST_PLAYER else GameStatus.SECOND_PLAYER_WON
        )
        game.state.message = WINNING_MESSAGE.format(game.player_names[winner])
        game_data["hive"] = game.to_dict()

        events = [Event(event_type="player_forfeited", player_id=player_id, payload={})]
        return self._end_game(game_data, game, events, reason="forfeit")

    # ── Private handlers ──

    def _apply_play(self, game_data: dict, action: Action) -> TransitionResult:
        game = HiveGame.from_dict(game_data["hive"])
        payload = action.payload
        player_id = action.player_id

        if payload.get("kind") == "pass":
            game.pass_turn()
            events = [Event(event_type="turn_passed", player_id=player_id, payload={})]
        else:
            selection, destination, err = _parse_play(payload)
            if err is not None:
                raise ValueError(err)
            game.commit(selection, destination)
            if isinstance(selection, InventorySelection):
                tile = game.board.top(destination)
                events = [Event(
                    event_type="piece_placed",
                    player_id=player_id,
                    payload={"species": tile.species.value, "q": destination.q, "r": destination.r},
                )]
            else:
                events = [Event(
                    event_type="piece_moved",
                    player_id=player_id,
                    payload={
                        "from_q": selection.coordinate.q,
                        "from_r": selection.coordinate.r,
                        "q": destination.q,
                        "r": destination.r,
                    },
                )]

        game_data["hive"] = game.to_dict()
        if game.is_over:
            return self._end_game(game_data, game, events, reason="queen_surrounded")

        return TransitionResult(
            game_data=game_data,
            events=events,
            next_phase=self._play_phase(game, game_data["player_ids"]),
            scores=game_data["scores"],
            game_over=None,
        )

    def _play_phase(self, game: HiveGame, player_ids: list[str]) -> Phase:
        return Phase(
            name="play",
            expected_actions=[
                ExpectedAction(
                    player_id=player_ids[game.player_to_move],
                    action_type=ACTION_TYPE,
                ),
            ],
            metadata={
                "player_index": game.player_to_move,
                "turn": game.turn,
                "queen_required": game.queen_required(),
            },
        )

    def _end_game(
        self,
        game_data: dict,
        game: HiveGame,
        events: list[Event],
        reason: str,
    ) -> TransitionResult:
        player_ids = game_data["player_ids"]
        if game.status == GameStatus.DRAW:
            winners: list[PlayerId] = []
            scores = {pid: 0.5 for pid in player_ids}
            reason = "draw"
        else:
            winner = player_ids[FIRST_PLAYER if game.status == GameStatus.FIRST_PLAYER_WON else SECOND_PLAYER]
            winners = [winner]
            scores = {pid: 1.0 if pid == winner else 0.0 for pid in player_ids}
        game_data["scores"] = scores

        events.append(Event(
            event_type="game_ended",
            payload={
                "status": game.status.value,
                "message": game.message,
                "winners": winners,
            },
        ))

        return TransitionResult(
            game_data=game_data,
            events=events,
            next_phase=Phase(name="game_over"),
            scores=scores,
            game_over=GameResult(
                winners=winners,
                final_scores=scores,
                reason=reason,
                details={"message": game.message, "turn": game.turn},
            ),
        )


def _parse_play(payload: dict) -> tuple[Selection | None, HexCoordinate | None, str | None]:
    """Turn a place/move payload into (selection, destination, error)."""
    kind = payload.get("kind")
    q = payload.get("q")
    r = payload.get("r")
    if kind not in ("place", "move"):
        return None, None, f"Unknown action kind: {kind!r}"
    if not isinstance(q, int) or not isinstance(r, int):
        return None, None, "Missing q or r in payload"

    destination = HexCoordinate(q=q, r=r)
    if kind == "place":
        slot = payload.get("slot")
        if not isinstance(slot, int):
            return None, None, "slot must be an integer"
        return InventorySelection(slot=slot), destination, None

    from_q = payload.get("from_q")
    from_r = payload.get("from_r")
    if not isinstance(from_q, int) or not isinstance(from_r, int):
        return None, None, "Missing from_q or from_r in payload"
    return BoardSelection(coordinate=HexCoordinate(q=from_q, r=from_r)), destination, None

