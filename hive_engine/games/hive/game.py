"""Turn and win bookkeeping for a single game of Hive.

HiveGame owns the board, the frontier, both inventories and the turn
state. Callers select a piece (a slot in hand or a tile on the board), ask
for its legal destinations and commit one of them.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from hive_engine.config import settings
from hive_engine.engine.errors import (
    GameNotActiveError,
    IllegalMoveError,
    InvariantViolationError,
)
from hive_engine.games.hive.board import Board
from hive_engine.games.hive.connectivity import is_surrounded
from hive_engine.games.hive.frontier import Frontier
from hive_engine.games.hive.inventory import QUEEN_SLOT, Inventory
from hive_engine.games.hive.moves import legal_moves, placement_targets
from hive_engine.games.hive.types import (
    FIRST_PLAYER,
    PLAYER_IDS,
    SECOND_PLAYER,
    HexCoordinate,
    Species,
    opponent_of,
)

logger = logging.getLogger(__name__)

QUEEN_MESSAGE = "You must place Queen on this turn"
DRAW_MESSAGE = "Game ended in draw"
WINNING_MESSAGE = "Player {} has won"


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    DRAW = "draw"
    FIRST_PLAYER_WON = "first_player_won"
    SECOND_PLAYER_WON = "second_player_won"


class InventorySelection(BaseModel):
    """A piece picked from the hand of the player to move."""

    model_config = ConfigDict(frozen=True)

    slot: int


class BoardSelection(BaseModel):
    """The top tile at a board coordinate."""

    model_config = ConfigDict(frozen=True)

    coordinate: HexCoordinate


Selection = InventorySelection | BoardSelection


class TileView(BaseModel):
    species: Species
    player_id: int
    color: str
    height: int


class TurnState(BaseModel):
    turn: int = 0  # full rounds completed
    player_to_move: int = FIRST_PLAYER
    starting_player: int = FIRST_PLAYER
    moves_made: list[int] = Field(default_factory=lambda: [0, 0])
    status: GameStatus = GameStatus.IN_PROGRESS
    message: str = ""


class HiveGame:
    def __init__(
        self,
        center: HexCoordinate | None = None,
        starting_player: int | None = None,
        player_names: tuple[str, str] | None = None,
        queen_deadline: int | None = None,
        verify_invariants: bool | None = None,
    ) -> None:
        if center is None:
            center = HexCoordinate(q=settings.center_q, r=settings.center_r)
        if starting_player is None:
            starting_player = settings.starting_player
        if starting_player not in PLAYER_IDS:
            raise ValueError(f"Invalid starting player: {starting_player}")
        if player_names is None:
            player_names = (settings.first_player_name, settings.second_player_name)

        self.board = Board()
        self.frontier = Frontier(center)
        self.inventories = [Inventory(p) for p in PLAYER_IDS]
        self.state = TurnState(player_to_move=starting_player, starting_player=starting_player)
        self.player_names = tuple(player_names)
        self.queen_deadline = settings.queen_deadline if queen_deadline is None else queen_deadline
        self.verify_invariants = (
            settings.verify_invariants if verify_invariants is None else verify_invariants
        )

    # ── Status ──

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def message(self) -> str:
        return self.state.message

    @property
    def turn(self) -> int:
        return self.state.turn

    @property
    def player_to_move(self) -> int:
        return self.state.player_to_move

    @property
    def is_over(self) -> bool:
        return self.state.status != GameStatus.IN_PROGRESS

    def queen_required(self, player_id: int | None = None) -> bool:
        """True when the player's next turn must place the Queen."""
        if player_id is None:
            player_id = self.state.player_to_move
        if self.inventories[player_id].queen_placed:
            return False
        # Stays in force after the deadline turn if the player had to pass
        return self.state.moves_made[player_id] >= self.queen_deadline - 1

    def queen_position(self, player_id: int) -> HexCoordinate | None:
        return self.board.find(Species.QUEEN_BEE, player_id)

    # ── Selection ──

    def can_select(self, selection: Selection) -> bool:
        if self.is_over:
            return False
        player_id = self.state.player_to_move
        inventory = self.inventories[player_id]

        if isinstance(selection, InventorySelection):
            if not inventory.has_slot(selection.slot) or inventory.remaining(selection.slot) <= 0:
                return False
            return selection.slot == QUEEN_SLOT or not self.queen_required(player_id)

        tile = self.board.top(selection.coordinate)
        if tile is None or tile.player_id != player_id:
            return False
        # No tile moves before its owner's Queen is on the board
        return inventory.queen_placed

    def legal_destinations(self, selection: Selection) -> set[HexCoordinate]:
        """Where the selected piece may go; empty for an illegal selection."""
        if not self.can_select(selection):
            return set()
        if isinstance(selection, InventorySelection):
            return placement_targets(
                self.board,
                self.frontier,
                self.state.player_to_move,
                first_turn=self.state.turn == 0,
            )
        return legal_moves(self.board, self.frontier, selection.coordinate)

    def selections(self, player_id: int | None = None) -> list[Selection]:
        """Every selection the player to move could make, hand first."""
        if player_id is None:
            player_id = self.state.player_to_move
        result: list[Selection] = [
            InventorySelection(slot=slot) for slot in range(len(self.inventories[player_id]))
        ]
        result.extend(
            BoardSelection(coordinate=c)
            for c, tile in self.board.items()
            if tile.player_id == player_id
        )
        return [s for s in result if self.can_select(s)]

    def has_legal_action(self) -> bool:
        return any(self.legal_destinations(s) for s in self.selections())

    # ── Commit ──

    def commit(self, selection: Selection, destination: HexCoordinate) -> GameStatus:
        """Apply a placement or move, then advance the turn."""
        if self.is_over:
            raise GameNotActiveError(f"Game already finished: {self.state.status.value}")
        if destination not in self.legal_destinations(selection):
            raise IllegalMoveError(
                f"Illegal destination {destination.to_key()} for {selection!r}",
                destination=destination,
            )

        player_id = self.state.player_to_move
        if isinstance(selection, InventorySelection):
            tile = self.inventories[player_id].take(selection.slot)
            self.board.place(destination, tile)
            self.frontier.on_tile_placed_or_moved_in(self.board, destination)
            logger.debug(
                f"Player {player_id} placed {tile.species.value} at {destination.to_key()}"
            )
        else:
            origin = selection.coordinate
            tile = self.board.move(origin, destination)
            self.frontier.on_tile_placed_or_moved_in(self.board, destination)
            self.frontier.on_tile_vacated(self.board, origin)
            logger.debug(
                f"Player {player_id} moved {tile.species.value} "
                f"{origin.to_key()} -> {destination.to_key()}"
            )

        if self.verify_invariants:
            self.frontier.verify(self.board)

        return self._end_turn()

    def pass_turn(self) -> GameStatus:
        """Skip a turn; only allowed when nothing else is legal."""
        if self.is_over:
            raise GameNotActiveError(f"Game already finished: {self.state.status.value}")
        if self.has_legal_action():
            raise IllegalMoveError("Cannot pass while a legal placement or move exists")
        logger.debug(f"Player {self.state.player_to_move} passed")
        return self._end_turn()

    def _end_turn(self) -> GameStatus:
        mover = self.state.player_to_move
        self.state.moves_made[mover] += 1

        status = self._evaluate_status()
        if status == GameStatus.IN_PROGRESS:
            # The shared counter moves once per full round
            if mover != self.state.starting_player:
                self.state.turn += 1
            self.state.player_to_move = opponent_of(mover)
            return status

        self.state.status = status
        if status == GameStatus.DRAW:
            self.state.message = DRAW_MESSAGE
        elif status == GameStatus.FIRST_PLAYER_WON:
            self.state.message = WINNING_MESSAGE.format(self.player_names[FIRST_PLAYER])
        else:
            self.state.message = WINNING_MESSAGE.format(self.player_names[SECOND_PLAYER])
        logger.info(f"Game over after turn {self.state.turn}: {self.state.message}")
        return status

    def _evaluate_status(self) -> GameStatus:
        first_lost = self._queen_surrounded(FIRST_PLAYER)
        second_lost = self._queen_surrounded(SECOND_PLAYER)

        if first_lost and second_lost:
            return GameStatus.DRAW
        if first_lost:
            return GameStatus.SECOND_PLAYER_WON
        if second_lost:
            return GameStatus.FIRST_PLAYER_WON
        return GameStatus.IN_PROGRESS

    def _queen_surrounded(self, player_id: int) -> bool:
        if not self.inventories[player_id].queen_placed:
            return False
        position = self.queen_position(player_id)
        if position is None:
            raise InvariantViolationError(f"Queen of player {player_id} placed but not on board")
        return is_surrounded(self.board, position)

    # ── Snapshots ──

    def board_snapshot(self) -> dict[HexCoordinate, TileView]:
        return {
            c: TileView(
                species=tile.species,
                player_id=tile.player_id,
                color=tile.color,
                height=self.board.height(c),
            )
            for c, tile in self.board.items()
        }

    def inventory_snapshot(self, player_id: int) -> list[tuple[Species, int]]:
        return self.inventories[player_id].slots

    def to_dict(self) -> dict:
        return {
            "board": self.board.to_dict(),
            "frontier": sorted(c.to_key() for c in self.frontier),
            "center": self.frontier.center.to_key(),
            "inventories": [inv.counts for inv in self.inventories],
            "state": self.state.model_dump(mode="json"),
            "player_names": list(self.player_names),
            "queen_deadline": self.queen_deadline,
            "verify_invariants": self.verify_invariants,
        }

    @classmethod
    def from_dict(cls, data: dict) -> HiveGame:
        game = cls(
            center=HexCoordinate.from_key(data["center"]),
            starting_player=data["state"]["starting_player"],
            player_names=tuple(data["player_names"]),
            queen_deadline=data["queen_deadline"],
            verify_invariants=data["verify_invariants"],
        )
        game.board = Board.from_dict(data["board"])
        game.frontier = Frontier(
            game.frontier.center,
            {HexCoordinate.from_key(key) for key in data["frontier"]},
        )
        game.inventories = [Inventory(p, counts) for p, counts in zip(PLAYER_IDS, data["inventories"])]
        game.state = TurnState(**data["state"])
        if game.verify_invariants:
            game.frontier.verify(game.board)
        return game
