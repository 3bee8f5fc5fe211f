"""One-hive rule and sliding constraints."""

from __future__ import annotations

from collections.abc import Iterable

from hive_engine.engine.errors import InvariantViolationError
from hive_engine.games.hive.board import Board
from hive_engine.games.hive.types import HexCoordinate, common_neighbors


def would_disconnect(board: Board, coordinate: HexCoordinate) -> bool:
    """Return True if lifting the top tile at coordinate splits the hive.

    Works on a scratch copy of the occupied cells; the board is untouched.
    A covered cell stays occupied when its top tile leaves, so lifting a
    stacked beetle never disconnects anything.
    """
    if board.is_empty(coordinate):
        raise InvariantViolationError(
            f"Connectivity check on empty cell {coordinate.to_key()}"
        )
    if board.height(coordinate) > 1:
        return False

    remaining = board.occupied_cells()
    remaining.discard(coordinate)

    start = next(iter(board.occupied_neighbors(coordinate)), None)
    if start is None:
        return False  # isolated tile, nothing to split

    # Flood fill over the occupied cells
    reached = {start}
    to_visit = [start]
    while to_visit:
        current = to_visit.pop()
        for n in current.neighbors():
            if n in remaining and n not in reached:
                reached.add(n)
                to_visit.append(n)

    return len(reached) != len(remaining)


def is_surrounded(board: Board, coordinate: HexCoordinate) -> bool:
    """True iff all 6 neighbors of coordinate are occupied."""
    return all(board.is_occupied(n) for n in coordinate.neighbors())


def can_slide(
    board: Board,
    origin: HexCoordinate,
    destination: HexCoordinate,
    ignore: HexCoordinate | None = None,
) -> bool:
    """Check a single ground-level slide between adjacent cells.

    Of the two cells flanking the step exactly one must be occupied: two
    occupied flanks form a gate too narrow to pass, two empty flanks mean
    the piece would lose contact with the hive. ``ignore`` is treated as
    empty (the cell the moving piece started from).
    """
    if not origin.is_adjacent(destination):
        return False

    def occupied(c: HexCoordinate) -> bool:
        return c != ignore and board.is_occupied(c)

    if occupied(destination):
        return False

    left, right = common_neighbors(origin, destination)
    return occupied(left) != occupied(right)


def gate_filter(
    board: Board,
    candidates: Iterable[HexCoordinate],
    pivot: HexCoordinate,
    ignore: HexCoordinate | None = None,
) -> set[HexCoordinate]:
    """Drop candidates next to pivot that cannot be reached by sliding from it.

    Candidates that are not empty neighbors of the pivot pass through.
    Every kept neighbor touches the pivot plus at least one other tile.
    """
    result = set(candidates)
    for n in board.empty_neighbors(pivot):
        if n in result and not can_slide(board, pivot, n, ignore):
            result.discard(n)
    return result


def borders_hive(
    board: Board,
    coordinate: HexCoordinate,
    ignore: HexCoordinate | None = None,
) -> bool:
    """True if coordinate touches an occupied cell other than ``ignore``."""
    return any(n != ignore for n in board.occupied_neighbors(coordinate))
