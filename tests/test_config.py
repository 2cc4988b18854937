"""Tests for game config load/save."""
import json

import pytest

from catchfive.config import GameConfig, config_from_dict, config_to_dict, load_config, save_config
from catchfive.deck import DeckColor
from catchfive.errors import InvalidAction
from catchfive.state import Phase


def test_save_and_load(tmp_path):
    cfg = GameConfig(deck_color="green", target_score=31, names=["A", "B", "C", "D"], human_seats=[0, 2], seed=9)
    path = save_config(cfg, tmp_path / "sub" / "table.json")
    assert path.exists()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["target_score"] == 31
    assert load_config(path) == cfg


def test_defaults_fill_missing_keys():
    cfg = config_from_dict({"target_score": 15})
    assert cfg.target_score == 15
    assert cfg.names == ["You", "CPU 1", "Partner", "CPU 2"]
    assert cfg.seed is None
    assert config_to_dict(cfg)["deck_color"] == "blue"


@pytest.mark.parametrize(
    "data",
    [
        {"deck_color": "plaid"},
        {"target_score": 0},
        {"names": ["A", "B"]},
        {"human_seats": [4]},
        {"max_rounds": 0},
        {"target_score": "abc"},
        {"human_seats": ["x"]},
        {"seed": "s"},
        {"names": 5},
        {"max_rounds": None},
    ],
)
def test_invalid_config_rejected(data):
    with pytest.raises(InvalidAction):
        config_from_dict(data)


def test_new_game_uses_config():
    gs = GameConfig(deck_color="gold", target_score=11, names=["N", "E", "S", "W"], human_seats=[1]).new_game()
    assert gs.phase == Phase.SETUP
    assert gs.deck_color == DeckColor.GOLD
    assert gs.target_score == 11
    assert [p.name for p in gs.players] == ["N", "E", "S", "W"]
    assert [p.is_human for p in gs.players] == [False, True, False, False]
