from __future__ import annotations

from hive_engine.games.hive.board import Board
from hive_engine.games.hive.frontier import Frontier
from hive_engine.games.hive.game import (
    BoardSelection,
    GameStatus,
    HiveGame,
    InventorySelection,
    TileView,
)
from hive_engine.games.hive.inventory import Inventory
from hive_engine.games.hive.plugin import HivePlugin
from hive_engine.games.hive.types import HexCoordinate, Species, Tile

__all__ = [
    "Board",
    "BoardSelection",
    "Frontier",
    "GameStatus",
    "HexCoordinate",
    "HiveGame",
    "HivePlugin",
    "Inventory",
    "InventorySelection",
    "Species",
    "Tile",
    "TileView",
]
