"""Tests for the one-hive rule and the sliding check."""

from __future__ import annotations

import random

import pytest

from hive_engine.engine.errors import InvariantViolationError
from hive_engine.games.hive.board import Board
from hive_engine.games.hive.connectivity import (
    borders_hive,
    can_slide,
    gate_filter,
    is_surrounded,
    would_disconnect,
)
from hive_engine.games.hive.types import Species, Tile
from tests.games.hive.boards import c, cells, is_connected, make_board

ANT = (Species.SOLDIER_ANT, 0)
RING = [(1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1)]


def _brute_force(board: Board, coordinate) -> bool:
    """Remove the tile from a copy and flood-fill what is left."""
    if board.height(coordinate) > 1:
        return False
    data = board.to_dict()
    del data[coordinate.to_key()]
    return not is_connected(Board.from_dict(data))


def _random_hive(rng: random.Random, size: int) -> Board:
    board = Board()
    board.place(c(0, 0), Tile(species=Species.SOLDIER_ANT, player_id=0))
    while len(board) < size:
        anchor = rng.choice(sorted(board.occupied_cells()))
        empty = sorted(board.empty_neighbors(anchor))
        if empty:
            board.place(rng.choice(empty), Tile(species=Species.SOLDIER_ANT, player_id=0))
    return board


class TestWouldDisconnect:
    def test_line_middle_disconnects(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT, (2, 0): ANT})
        assert would_disconnect(board, c(1, 0))
        assert not would_disconnect(board, c(0, 0))
        assert not would_disconnect(board, c(2, 0))

    def test_single_tile(self) -> None:
        board = make_board({(0, 0): ANT})
        assert not would_disconnect(board, c(0, 0))

    def test_ring_has_no_cut_cell(self) -> None:
        board = make_board({cell: ANT for cell in RING})
        for q, r in RING:
            assert not would_disconnect(board, c(q, r))

    def test_stacked_beetle_never_disconnects(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT, (2, 0): ANT, (1, 1): (Species.BEETLE, 1)})
        board.move(c(1, 1), c(1, 0))
        assert board.height(c(1, 0)) == 2
        assert not would_disconnect(board, c(1, 0))

    def test_empty_cell_raises(self) -> None:
        with pytest.raises(InvariantViolationError):
            would_disconnect(make_board({(0, 0): ANT}), c(5, 5))

    def test_board_untouched(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT, (2, 0): ANT})
        before = board.to_dict()
        would_disconnect(board, c(1, 0))
        assert board.to_dict() == before

    @pytest.mark.parametrize("seed", range(6))
    def test_matches_brute_force(self, seed: int) -> None:
        rng = random.Random(seed)
        board = _random_hive(rng, size=12)
        for coordinate in sorted(board.occupied_cells()):
            assert would_disconnect(board, coordinate) == _brute_force(board, coordinate), coordinate


class TestIsSurrounded:
    def test_all_six(self) -> None:
        board = make_board({cell: ANT for cell in RING})
        assert is_surrounded(board, c(0, 0))

    def test_five_of_six(self) -> None:
        board = make_board({cell: ANT for cell in RING[:5]})
        assert not is_surrounded(board, c(0, 0))


class TestCanSlide:
    def test_one_occupied_flank(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT})
        # flanks of (1,0)->(1,-1) are (0,0) and (2,-1)
        assert can_slide(board, c(1, 0), c(1, -1))

    def test_gate_blocks(self) -> None:
        board = make_board({(1, -1): ANT, (0, 1): ANT, (0, 0): ANT})
        assert not can_slide(board, c(0, 0), c(1, 0))

    def test_no_flank_loses_contact(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT})
        assert not can_slide(board, c(1, 0), c(2, 0))

    def test_ignored_flank_counts_as_empty(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT})
        assert can_slide(board, c(0, 1), c(1, 1))
        assert not can_slide(board, c(0, 1), c(1, 1), ignore=c(1, 0))

    def test_not_adjacent(self) -> None:
        board = make_board({(0, 0): ANT})
        assert not can_slide(board, c(1, 0), c(3, 0))

    def test_occupied_destination(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT})
        assert not can_slide(board, c(0, 1), c(1, 0))


class TestGateFilter:
    def test_keeps_open_drops_gated(self) -> None:
        board = make_board({(1, -1): ANT, (0, 1): ANT, (0, 0): ANT})
        kept = gate_filter(board, board.empty_neighbors(c(0, 0)), c(0, 0))
        # (1,0) sits in a gate, (-1,0) would lose contact
        assert kept == cells((-1, 1), (0, -1))

    def test_passes_non_neighbors_through(self) -> None:
        board = make_board({(0, 0): ANT})
        assert gate_filter(board, cells((5, 5)), c(0, 0)) == cells((5, 5))


class TestBordersHive:
    def test_ignore(self) -> None:
        board = make_board({(0, 0): ANT, (1, 0): ANT})
        assert borders_hive(board, c(2, 0))
        assert not borders_hive(board, c(2, 0), ignore=c(1, 0))
        assert borders_hive(board, c(1, -1), ignore=c(1, 0))
