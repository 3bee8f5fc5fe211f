"""Placement frontier ("border of the hive").

The frontier is the set of empty cells touching at least one occupied cell,
or just the seed cell while the board is empty. It is updated locally after
each placement or move instead of being rebuilt from the whole board.
"""

from __future__ import annotations

from collections.abc import Iterator

from hive_engine.engine.errors import InvariantViolationError
from hive_engine.games.hive.board import Board
from hive_engine.games.hive.types import HexCoordinate


class Frontier:
    def __init__(self, center: HexCoordinate, cells: set[HexCoordinate] | None = None) -> None:
        self.center = center
        self._cells: set[HexCoordinate] = {center} if cells is None else set(cells)

    @classmethod
    def from_board(cls, board: Board, center: HexCoordinate) -> Frontier:
        """Build a frontier for an existing board in one full scan."""
        frontier = cls(center)
        frontier._cells = frontier.recompute(board)
        return frontier

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._cells

    def __iter__(self) -> Iterator[HexCoordinate]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def cells(self) -> frozenset[HexCoordinate]:
        return frozenset(self._cells)

    def on_tile_placed_or_moved_in(self, board: Board, coordinate: HexCoordinate) -> None:
        """Coordinate just became occupied."""
        self._cells.discard(coordinate)
        self._cells.update(board.empty_neighbors(coordinate))

    def on_tile_vacated(self, board: Board, origin: HexCoordinate) -> None:
        """Origin may have been emptied by a move.

        Must run after on_tile_placed_or_moved_in() for the destination.
        """
        if board.is_occupied(origin):
            return  # a beetle left a stack; the cell is still occupied

        if board.occupied_neighbors(origin):
            self._cells.add(origin)
        else:
            self._cells.discard(origin)

        # Each candidate may still touch the hive through another tile
        for candidate in board.empty_neighbors(origin):
            if not board.occupied_neighbors(candidate):
                self._cells.discard(candidate)

    def recompute(self, board: Board) -> set[HexCoordinate]:
        """Brute-force frontier straight from the definition."""
        if len(board) == 0:
            return {self.center}
        result: set[HexCoordinate] = set()
        for coordinate in board.occupied_cells():
            result.update(board.empty_neighbors(coordinate))
        return result

    def verify(self, board: Board) -> None:
        expected = self.recompute(board)
        if self._cells != expected:
            missing = sorted(c.to_key() for c in expected - self._cells)
            extra = sorted(c.to_key() for c in self._cells - expected)
            raise InvariantViolationError(
                f"Frontier out of sync with board: missing={missing} extra={extra}"
            )
