"""Tests for the Hive plugin: JSON payloads through the GamePlugin protocol."""

from __future__ import annotations

import copy

from hive_engine.engine.models import Action, GameConfig, Phase, Player
from hive_engine.engine.validation import validate_plugin
from hive_engine.games.hive.game import QUEEN_MESSAGE
from hive_engine.games.hive.plugin import HivePlugin
from hive_engine.games.hive.types import Species
from tests.games.hive.boards import set_up_game


def _make_players() -> list[Player]:
    return [
        Player(player_id="p1", display_name="Alice", seat_index=0),
        Player(player_id="p2", display_name="Bob", seat_index=1),
    ]


def _make_plugin() -> HivePlugin:
    return HivePlugin()


def _place(slot: int, q: int, r: int) -> dict:
    return {"kind": "place", "slot": slot, "q": q, "r": r}


def _play(plugin: HivePlugin, game_data: dict, phase: Phase, player_id: str, payload: dict):
    """Validate then apply one payload; returns the TransitionResult."""
    action = Action(action_type="play", player_id=player_id, payload=payload)
    assert plugin.validate_action(game_data, phase, action) is None
    return plugin.apply_action(game_data, phase, action, _make_players())


def _start(options: dict | None = None) -> tuple[HivePlugin, dict, Phase]:
    plugin = _make_plugin()
    game_data, phase, _ = plugin.create_initial_state(_make_players(), GameConfig(options=options or {}))
    return plugin, game_data, phase


def _game_data_for(game) -> dict:
    return {
        "hive": game.to_dict(),
        "player_ids": ["p1", "p2"],
        "scores": {"p1": 0.0, "p2": 0.0},
    }


class TestClassAttributes:
    def test_game_id(self) -> None:
        p = _make_plugin()
        assert p.game_id == "hive"
        assert p.display_name == "Hive"

    def test_player_count(self) -> None:
        p = _make_plugin()
        assert p.min_players == 2
        assert p.max_players == 2

    def test_passes_plugin_validation(self) -> None:
        assert validate_plugin(_make_plugin()) == []


class TestCreateInitialState:
    def test_game_data_structure(self) -> None:
        _, game_data, _ = _start()
        assert game_data["player_ids"] == ["p1", "p2"]
        assert game_data["scores"] == {"p1": 0.0, "p2": 0.0}
        assert game_data["hive"]["board"] == {}
        assert game_data["hive"]["player_names"] == ["Alice", "Bob"]

    def test_first_phase(self) -> None:
        _, _, phase = _start()
        assert phase.name == "play"
        assert len(phase.expected_actions) == 1
        assert phase.expected_actions[0].player_id == "p1"
        assert phase.metadata["turn"] == 0
        assert phase.metadata["queen_required"] is False

    def test_starting_player_option(self) -> None:
        _, _, phase = _start({"starting_player": 1})
        assert phase.expected_actions[0].player_id == "p2"

    def test_seat_order_decides_colors(self) -> None:
        plugin = _make_plugin()
        players = list(reversed(_make_players()))
        game_data, _, _ = plugin.create_initial_state(players, GameConfig())
        assert game_data["player_ids"] == ["p1", "p2"]


class TestValidateConfig:
    def test_defaults_ok(self) -> None:
        assert _make_plugin().validate_config({}) == []

    def test_known_options_ok(self) -> None:
        options = {"center_q": 2, "center_r": -1, "starting_player": 1, "queen_deadline": 3}
        assert _make_plugin().validate_config(options) == []

    def test_rejects_bad_values(self) -> None:
        errors = _make_plugin().validate_config({
            "starting_player": 2,
            "queen_deadline": 0,
            "center_q": "x",
            "colour": "red",
        })
        assert "starting_player must be 0 or 1" in errors
        assert "queen_deadline must be at least 1" in errors
        assert "center_q must be an integer" in errors
        assert "Unknown option: colour" in errors


class TestValidActions:
    def test_opening_actions_all_at_center(self) -> None:
        plugin, game_data, phase = _start()
        actions = plugin.get_valid_actions(game_data, phase, "p1")
        assert len(actions) == 5
        assert {(a["q"], a["r"]) for a in actions} == {(0, 0)}
        assert actions[0]["species"] == Species.QUEEN_BEE.value

    def test_not_on_turn_gets_nothing(self) -> None:
        plugin, game_data, phase = _start()
        assert plugin.get_valid_actions(game_data, phase, "p2") == []

    def test_stuck_player_may_only_pass(self) -> None:
        game = set_up_game({
            (0, 0): (Species.SPIDER, 0),
            (-1, 1): (Species.QUEEN_BEE, 1),
            (1, -1): (Species.SPIDER, 1),
            (1, 0): (Species.SPIDER, 1),
            (-1, 0): (Species.BEETLE, 1),
            (0, -1): (Species.BEETLE, 1),
            (0, 1): (Species.GRASSHOPPER, 1),
        }, moves_made=(2, 2))
        plugin = _make_plugin()
        game_data = _game_data_for(game)
        phase = plugin._play_phase(game, game_data["player_ids"])

        assert plugin.get_valid_actions(game_data, phase, "p1") == [{"kind": "pass"}]
        result = _play(plugin, game_data, phase, "p1", {"kind": "pass"})
        assert result.events[0].event_type == "turn_passed"
        assert result.next_phase.expected_actions[0].player_id == "p2"


class TestValidateAction:
    def test_wrong_player(self) -> None:
        plugin, game_data, phase = _start()
        action = Action(action_type="play", player_id="p2", payload=_place(0, 0, 0))
        assert plugin.validate_action(game_data, phase, action) == "Not your turn"

    def test_malformed_payloads(self) -> None:
        plugin, game_data, phase = _start()

        def check(payload: dict) -> str | None:
            action = Action(action_type="play", player_id="p1", payload=payload)
            return plugin.validate_action(game_data, phase, action)

        assert check({"kind": "fly"}) == "Unknown action kind: 'fly'"
        assert check({"kind": "place", "slot": 0}) == "Missing q or r in payload"
        assert check({"kind": "place", "q": 0, "r": 0}) == "slot must be an integer"
        assert check({"kind": "move", "q": 0, "r": 0}) == "Missing from_q or from_r in payload"
        assert check(_place(9, 0, 0)) == "Inventory slot 9 is not available"
        assert check(_place(0, 1, 0)) == "Illegal destination 1,0"

    def test_pass_refused_when_moves_exist(self) -> None:
        plugin, game_data, phase = _start()
        action = Action(action_type="play", player_id="p1", payload={"kind": "pass"})
        assert plugin.validate_action(game_data, phase, action) == (
            "Cannot pass while a legal placement or move exists"
        )

    def test_move_before_queen(self) -> None:
        plugin, game_data, phase = _start()
        result = _play(plugin, game_data, phase, "p1", _place(1, 0, 0))
        result = _play(plugin, result.game_data, result.next_phase, "p2", _place(0, 1, 0))

        move = {"kind": "move", "from_q": 0, "from_r": 0, "q": 1, "r": -1}
        action = Action(action_type="play", player_id="p1", payload=move)
        assert plugin.validate_action(result.game_data, result.next_phase, action) == (
            "Pieces cannot move before the Queen is placed"
        )

        move = {"kind": "move", "from_q": 1, "from_r": 0, "q": 1, "r": -1}
        action = Action(action_type="play", player_id="p1", payload=move)
        assert plugin.validate_action(result.game_data, result.next_phase, action) == (
            "No movable piece of yours at 1,0"
        )

    def test_queen_deadline_message(self) -> None:
        plugin, game_data, phase = _start({"queen_deadline": 1})
        action = Action(action_type="play", player_id="p1", payload=_place(1, 0, 0))
        assert plugin.validate_action(game_data, phase, action) == QUEEN_MESSAGE
        assert phase.metadata["queen_required"] is True


class TestApplyAction:
    def test_placement_event_and_turn_handoff(self) -> None:
        plugin, game_data, phase = _start()
        result = _play(plugin, game_data, phase, "p1", _place(0, 0, 0))

        assert result.game_over is None
        assert result.events[0].event_type == "piece_placed"
        assert result.events[0].payload == {"species": "queen_bee", "q": 0, "r": 0}
        assert result.next_phase.expected_actions[0].player_id == "p2"
        assert result.game_data["hive"]["board"]["0,0"][0]["species"] == "queen_bee"

    def test_move_event(self) -> None:
        plugin, game_data, phase = _start()
        result = _play(plugin, game_data, phase, "p1", _place(0, 0, 0))
        result = _play(plugin, result.game_data, result.next_phase, "p2", _place(0, 1, 0))
        move = {"kind": "move", "from_q": 0, "from_r": 0, "q": 0, "r": 1}
        result = _play(plugin, result.game_data, result.next_phase, "p1", move)

        assert result.events[0].event_type == "piece_moved"
        assert result.next_phase.metadata["turn"] == 1
        assert "0,1" in result.game_data["hive"]["board"]
        assert "0,0" not in result.game_data["hive"]["board"]

    def test_win_ends_game(self) -> None:
        game = set_up_game({
            (0, 0): (Species.QUEEN_BEE, 1),
            (1, 0): (Species.SOLDIER_ANT, 0),
            (1, -1): (Species.SOLDIER_ANT, 0),
            (0, -1): (Species.SOLDIER_ANT, 0),
            (-1, 0): (Species.GRASSHOPPER, 0),
            (-1, 1): (Species.GRASSHOPPER, 0),
            (2, 0): (Species.QUEEN_BEE, 0),
        })
        plugin = _make_plugin()
        game_data = _game_data_for(game)
        phase = plugin._play_phase(game, game_data["player_ids"])

        result = _play(plugin, game_data, phase, "p1", _place(3, 0, 1))

        assert result.next_phase.name == "game_over"
        assert result.game_over is not None
        assert result.game_over.winners == ["p1"]
        assert result.game_over.reason == "queen_surrounded"
        assert result.scores == {"p1": 1.0, "p2": 0.0}
        assert result.events[-1].event_type == "game_ended"
        assert result.events[-1].payload["message"] == "Player BLACK has won"
        assert plugin.get_valid_actions(result.game_data, result.next_phase, "p2") == []

    def test_draw_splits_points(self) -> None:
        game = set_up_game({
            (0, 0): (Species.QUEEN_BEE, 1),
            (-1, 1): (Species.SPIDER, 1),
            (1, -1): (Species.SPIDER, 1),
            (-1, 0): (Species.BEETLE, 1),
            (0, -1): (Species.BEETLE, 1),
            (0, 1): (Species.GRASSHOPPER, 1),
            (2, 0): (Species.QUEEN_BEE, 0),
            (1, 1): (Species.SPIDER, 0),
            (3, -1): (Species.SPIDER, 0),
            (3, 0): (Species.BEETLE, 0),
            (2, -1): (Species.BEETLE, 0),
            (2, 1): (Species.GRASSHOPPER, 0),
        })
        plugin = _make_plugin()
        game_data = _game_data_for(game)
        phase = plugin._play_phase(game, game_data["player_ids"])

        result = _play(plugin, game_data, phase, "p1", _place(4, 1, 0))

        assert result.game_over.winners == []
        assert result.game_over.reason == "draw"
        assert result.scores == {"p1": 0.5, "p2": 0.5}


class TestPlayerView:
    def test_view_contents(self) -> None:
        plugin, game_data, phase = _start()
        result = _play(plugin, game_data, phase, "p1", _place(0, 0, 0))
        view = plugin.get_player_view(result.game_data, result.next_phase, "p2", _make_players())

        assert view["board"]["0,0"] == {
            "species": "queen_bee",
            "player_id": 0,
            "color": "orange",
            "height": 1,
        }
        assert len(view["frontier"]) == 6
        assert view["inventories"]["p1"][0] == ["queen_bee", 0]
        assert view["inventories"]["p2"][0] == ["queen_bee", 1]
        assert view["player_to_move"] == "p2"
        assert view["status"] == "in_progress"
        assert view["message"] == ""


class TestForfeit:
    def test_opponent_wins(self) -> None:
        plugin, game_data, phase = _start()
        result = plugin.on_player_forfeit(game_data, phase, "p1", _make_players())

        assert result is not None
        assert result.game_over.winners == ["p2"]
        assert result.game_over.reason == "forfeit"
        assert result.events[0].event_type == "player_forfeited"
        assert result.game_data["hive"]["state"]["status"] == "second_player_won"

    def test_ignored_after_game_over(self) -> None:
        plugin = _make_plugin()
        assert plugin.on_player_forfeit({}, Phase(name="game_over"), "p1", _make_players()) is None

    def test_unknown_player_ignored(self) -> None:
        plugin, game_data, phase = _start()
        before = copy.deepcopy(game_data)

        assert plugin.on_player_forfeit(game_data, phase, "p9", _make_players()) is None
        assert game_data == before
