"""Domain models for Hive."""

from __future__ import annotations

from enum import Enum
from functools import total_ordering

from pydantic import BaseModel, ConfigDict


class Species(str, Enum):
    QUEEN_BEE = "queen_bee"
    SPIDER = "spider"
    BEETLE = "beetle"
    GRASSHOPPER = "grasshopper"
    SOLDIER_ANT = "soldier_ant"


# Inventory slot order; slot 0 is always the Queen
STARTING_PIECES: list[tuple[Species, int]] = [
    (Species.QUEEN_BEE, 1),
    (Species.SPIDER, 2),
    (Species.BEETLE, 2),
    (Species.GRASSHOPPER, 3),
    (Species.SOLDIER_ANT, 3),
]

SPECIES_COLORS: dict[Species, str] = {
    Species.QUEEN_BEE: "orange",
    Species.BEETLE: "purple",
    Species.GRASSHOPPER: "darkgreen",
    Species.SPIDER: "brown",
    Species.SOLDIER_ANT: "blue",
}

FIRST_PLAYER = 0
SECOND_PLAYER = 1
PLAYER_IDS = (FIRST_PLAYER, SECOND_PLAYER)


# Axial hex directions: the 6 neighbor offsets of (q, r)
AXIAL_DIRECTIONS: list[tuple[int, int]] = [
    (-1, 1), (1, -1), (1, 0), (-1, 0), (0, -1), (0, 1),
]


@total_ordering
class HexCoordinate(BaseModel):
    """Axial (q, r) coordinate on the unbounded hex grid.

    Ordered lexicographically on q then r so it can key sorted output.
    """

    model_config = ConfigDict(frozen=True)

    q: int
    r: int

    def __lt__(self, other: object) -> bool:
        if isinstance(other, HexCoordinate):
            return (self.q, self.r) < (other.q, other.r)
        return NotImplemented

    def __add__(self, other: HexCoordinate) -> HexCoordinate:
        return HexCoordinate(q=self.q + other.q, r=self.r + other.r)

    def __repr__(self) -> str:
        return f"HexCoordinate({self.q}, {self.r})"

    def step(self, dq: int, dr: int) -> HexCoordinate:
        return HexCoordinate(q=self.q + dq, r=self.r + dr)

    def neighbors(self) -> list[HexCoordinate]:
        """The 6 adjacent coordinates, independent of board contents."""
        return [self.step(dq, dr) for dq, dr in AXIAL_DIRECTIONS]

    def is_adjacent(self, other: HexCoordinate) -> bool:
        return (other.q - self.q, other.r - self.r) in AXIAL_DIRECTIONS

    def to_key(self) -> str:
        return f"{self.q},{self.r}"

    @staticmethod
    def from_key(key: str) -> HexCoordinate:
        q, r = key.split(",")
        return HexCoordinate(q=int(q), r=int(r))


def neighbors(coordinate: HexCoordinate) -> list[HexCoordinate]:
    """Return the 6 axial-coordinate neighbors of a coordinate."""
    return coordinate.neighbors()


def common_neighbors(a: HexCoordinate, b: HexCoordinate) -> list[HexCoordinate]:
    """Cells adjacent to both a and b (two of them when a and b touch)."""
    around_b = set(b.neighbors())
    return [c for c in a.neighbors() if c in around_b]


class Tile(BaseModel):
    """A bug piece owned by one player."""

    model_config = ConfigDict(frozen=True)

    species: Species
    player_id: int

    @property
    def color(self) -> str:
        return SPECIES_COLORS[self.species]


def opponent_of(player_id: int) -> int:
    return SECOND_PLAYER if player_id == FIRST_PLAYER else FIRST_PLAYER
