"""Legal destination generators for each species, plus placement targets.

Every generator is a pure function of (board, frontier, origin) and
returns an empty set rather than raising when the piece cannot move.
"""

from __future__ import annotations

from collections import deque

from hive_engine.engine.errors import InvariantViolationError
from hive_engine.games.hive.board import Board
from hive_engine.games.hive.connectivity import (
    borders_hive,
    can_slide,
    gate_filter,
    is_surrounded,
    would_disconnect,
)
from hive_engine.games.hive.frontier import Frontier
from hive_engine.games.hive.types import AXIAL_DIRECTIONS, HexCoordinate, Species

SPIDER_STEPS = 3


def placement_targets(
    board: Board,
    frontier: Frontier,
    player_id: int,
    first_turn: bool = False,
) -> set[HexCoordinate]:
    """Cells where a player may put a new piece from hand.

    On the first turn any frontier cell will do; afterwards the cell must
    touch at least one of the player's own pieces.
    """
    if first_turn:
        return set(frontier)

    result: set[HexCoordinate] = set()
    for cell in frontier:
        for n in board.occupied_neighbors(cell):
            if board.top(n).player_id == player_id:
                result.add(cell)
                break
    return result


def queen_moves(board: Board, frontier: Frontier, origin: HexCoordinate) -> set[HexCoordinate]:
    """One slide step."""
    if would_disconnect(board, origin) or is_surrounded(board, origin):
        return set()

    candidates = {c for c in board.empty_neighbors(origin) if c in frontier}
    # can_slide is symmetric in its endpoints, so one pass around the origin
    # covers both the leaving and the arriving side of each step
    return gate_filter(board, candidates, origin)


def beetle_moves(board: Board, frontier: Frontier, origin: HexCoordinate) -> set[HexCoordinate]:
    """One step in any direction, climbing onto occupied cells allowed."""
    on_ground = board.height(origin) == 1
    if on_ground and would_disconnect(board, origin):
        return set()

    destinations = set(origin.neighbors())
    if on_ground:
        destinations = gate_filter(board, destinations, origin)
    return destinations


def spider_moves(board: Board, frontier: Frontier, origin: HexCoordinate) -> set[HexCoordinate]:
    """Exactly three slides along the hive, never revisiting a cell."""
    if would_disconnect(board, origin) or is_surrounded(board, origin):
        return set()

    # Breadth-first over paths; each level is one more slide
    paths: list[tuple[HexCoordinate, ...]] = [(origin,)]
    for _ in range(SPIDER_STEPS):
        extended: list[tuple[HexCoordinate, ...]] = []
        for path in paths:
            current = path[-1]
            for n in current.neighbors():
                if n in path or n not in frontier:
                    continue
                if not borders_hive(board, n, ignore=origin):
                    continue
                if can_slide(board, current, n, ignore=origin):
                    extended.append(path + (n,))
        paths = extended

    return {path[-1] for path in paths}


def grasshopper_moves(board: Board, frontier: Frontier, origin: HexCoordinate) -> set[HexCoordinate]:
    """Straight jump over one or more occupied cells."""
    if would_disconnect(board, origin):
        return set()

    result: set[HexCoordinate] = set()
    for dq, dr in AXIAL_DIRECTIONS:
        position = origin.step(dq, dr)
        jumped = False
        while board.is_occupied(position):
            position = position.step(dq, dr)
            jumped = True
        if jumped:
            result.add(position)
    return result


def soldier_ant_moves(board: Board, frontier: Frontier, origin: HexCoordinate) -> set[HexCoordinate]:
    """Any number of slides around the outside of the hive."""
    if would_disconnect(board, origin) or is_surrounded(board, origin):
        return set()

    reached: set[HexCoordinate] = set()
    seen = {origin}
    queue = deque([origin])
    while queue:
        current = queue.popleft()
        for n in current.neighbors():
            if n in seen or n not in frontier:
                continue
            if not borders_hive(board, n, ignore=origin):
                continue
            if can_slide(board, current, n, ignore=origin):
                seen.add(n)
                reached.add(n)
                queue.append(n)

    return {c for c in reached if not is_surrounded(board, c)}


def legal_moves(board: Board, frontier: Frontier, origin: HexCoordinate) -> set[HexCoordinate]:
    """Destinations for the top tile at origin."""
    tile = board.top(origin)
    if tile is None:
        raise InvariantViolationError(f"No tile to move at {origin.to_key()}")

    species = tile.species
    if species == Species.QUEEN_BEE:
        return queen_moves(board, frontier, origin)
    if species == Species.BEETLE:
        return beetle_moves(board, frontier, origin)
    if species == Species.SPIDER:
        return spider_moves(board, frontier, origin)
    if species == Species.GRASSHOPPER:
        return grasshopper_moves(board, frontier, origin)
    if species == Species.SOLDIER_ANT:
        return soldier_ant_moves(board, frontier, origin)

    raise ValueError(f"Unknown species: {species}")
