"""Pieces a player still holds in hand."""

from __future__ import annotations

from hive_engine.engine.errors import InvalidActionError
from hive_engine.games.hive.types import STARTING_PIECES, Species, Tile

QUEEN_SLOT = 0


class Inventory:
    """Ordered (species, remaining) slots for one player.

    Counts only go down; the Queen counts as placed once her slot is empty.
    """

    def __init__(self, player_id: int, counts: list[int] | None = None) -> None:
        self.player_id = player_id
        self._species = [species for species, _ in STARTING_PIECES]
        if counts is None:
            counts = [count for _, count in STARTING_PIECES]
        if len(counts) != len(self._species):
            raise ValueError(f"Expected {len(self._species)} slot counts, got {len(counts)}")
        self._remaining = list(counts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Inventory):
            return self.player_id == other.player_id and self._remaining == other._remaining
        return NotImplemented

    def __len__(self) -> int:
        return len(self._species)

    @property
    def slots(self) -> list[tuple[Species, int]]:
        return list(zip(self._species, self._remaining))

    @property
    def counts(self) -> list[int]:
        return list(self._remaining)

    @property
    def queen_placed(self) -> bool:
        return self._remaining[QUEEN_SLOT] == 0

    @property
    def pieces_in_hand(self) -> int:
        return sum(self._remaining)

    def has_slot(self, slot: int) -> bool:
        return 0 <= slot < len(self._species)

    def species_at(self, slot: int) -> Species:
        return self._species[slot]

    def remaining(self, slot: int) -> int:
        return self._remaining[slot]

    def take(self, slot: int) -> Tile:
        """Remove one piece from a slot and return it as a tile."""
        if not self.has_slot(slot):
            raise InvalidActionError(f"Invalid inventory slot: {slot}")
        if self._remaining[slot] <= 0:
            raise InvalidActionError(f"No {self._species[slot].value} left in hand")
        self._remaining[slot] -= 1
        return Tile(species=self._species[slot], player_id=self.player_id)
