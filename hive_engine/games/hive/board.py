"""Board state for Hive.

The board maps each occupied coordinate to a stack of tiles, bottom first.
Only a Beetle may sit on top of another tile; the tiles it covers stay in
the stack until it climbs off again.
"""

from __future__ import annotations

from collections.abc import Iterator

from hive_engine.engine.errors import InvariantViolationError
from hive_engine.games.hive.types import HexCoordinate, Species, Tile


class Board:
    """Sparse mapping from coordinate to a non-empty tile stack."""

    def __init__(self) -> None:
        self._stacks: dict[HexCoordinate, list[Tile]] = {}

    def __len__(self) -> int:
        return len(self._stacks)

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._stacks

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Board):
            return self._stacks == other._stacks
        return NotImplemented

    # ── Queries ──

    def is_occupied(self, coordinate: HexCoordinate) -> bool:
        return coordinate in self._stacks

    def is_empty(self, coordinate: HexCoordinate) -> bool:
        return coordinate not in self._stacks

    def top(self, coordinate: HexCoordinate) -> Tile | None:
        stack = self._stacks.get(coordinate)
        return stack[-1] if stack else None

    def height(self, coordinate: HexCoordinate) -> int:
        return len(self._stacks.get(coordinate, ()))

    def stack(self, coordinate: HexCoordinate) -> list[Tile]:
        """Tiles at a coordinate, bottom first (copy)."""
        return list(self._stacks.get(coordinate, ()))

    def occupied_cells(self) -> set[HexCoordinate]:
        return set(self._stacks)

    def items(self) -> Iterator[tuple[HexCoordinate, Tile]]:
        """(coordinate, top tile) pairs in coordinate order."""
        for coordinate in sorted(self._stacks):
            yield coordinate, self._stacks[coordinate][-1]

    def empty_neighbors(self, coordinate: HexCoordinate) -> set[HexCoordinate]:
        return {n for n in coordinate.neighbors() if n not in self._stacks}

    def occupied_neighbors(self, coordinate: HexCoordinate) -> set[HexCoordinate]:
        return {n for n in coordinate.neighbors() if n in self._stacks}

    def find(self, species: Species, player_id: int) -> HexCoordinate | None:
        """Locate a player's tile of a species, including covered ones."""
        for coordinate, stack in self._stacks.items():
            for tile in stack:
                if tile.species == species and tile.player_id == player_id:
                    return coordinate
        return None

    # ── Mutation ──

    def place(self, coordinate: HexCoordinate, tile: Tile) -> None:
        """Put a new tile from a player's hand on an empty cell."""
        if coordinate in self._stacks:
            raise InvariantViolationError(
                f"Cannot place {tile.species.value} on occupied cell {coordinate.to_key()}"
            )
        self._stacks[coordinate] = [tile]

    def move(self, origin: HexCoordinate, destination: HexCoordinate) -> Tile:
        """Move the top tile of origin onto destination. Returns the moved tile."""
        stack = self._stacks.get(origin)
        if not stack:
            raise InvariantViolationError(f"No tile to move at {origin.to_key()}")
        tile = stack[-1]
        if destination in self._stacks and tile.species != Species.BEETLE:
            raise InvariantViolationError(
                f"Only a beetle may climb, got {tile.species.value} onto {destination.to_key()}"
            )

        stack.pop()
        if not stack:
            del self._stacks[origin]
        self._stacks.setdefault(destination, []).append(tile)
        return tile

    # ── Serialization ──

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            coordinate.to_key(): [tile.model_dump(mode="json") for tile in stack]
            for coordinate, stack in sorted(self._stacks.items())
        }

    @classmethod
    def from_dict(cls, data: dict[str, list[dict]]) -> Board:
        board = cls()
        for key, stack in data.items():
            if not stack:
                raise InvariantViolationError(f"Empty stack stored at {key}")
            board._stacks[HexCoordinate.from_key(key)] = [Tile(**t) for t in stack]
        return board
