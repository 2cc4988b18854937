"""
Game configuration: table setup for a new game plus simulation knobs.

Saved as a small JSON file:

    {"deck_color": "blue", "target_score": 25, "names": ["You", ...],
     "human_seats": [0], "seed": null, "max_rounds": 200}
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .deck import DeckColor
from .errors import InvalidAction
from .game import DEFAULT_PLAYER_NAMES, DEFAULT_TARGET_SCORE, initialize_game
from .state import NUM_SEATS, GameState


@dataclass
class GameConfig:
    deck_color: str = DeckColor.BLUE.value
    target_score: int = DEFAULT_TARGET_SCORE
    names: List[str] = field(default_factory=lambda: list(DEFAULT_PLAYER_NAMES))
    human_seats: List[int] = field(default_factory=lambda: [0])
    seed: Optional[int] = None
    # Safety stop for simulations; a real game ends long before this.
    max_rounds: int = 200

    def validate(self) -> None:
        try:
            DeckColor(self.deck_color)
        except ValueError:
            raise InvalidAction(f"Unknown deck color: {self.deck_color!r}") from None
        if isinstance(self.target_score, bool) or not isinstance(self.target_score, int) or self.target_score <= 0:
            raise InvalidAction(f"Target score must be a positive integer, got {self.target_score!r}")
        if len(self.names) != NUM_SEATS:
            raise InvalidAction(f"Expected {NUM_SEATS} player names, got {len(self.names)}")
        if any(not 0 <= s < NUM_SEATS for s in self.human_seats):
            raise InvalidAction(f"Human seats out of range: {self.human_seats!r}")
        if self.max_rounds <= 0:
            raise InvalidAction(f"max_rounds must be positive, got {self.max_rounds!r}")

    def new_game(self) -> GameState:
        self.validate()
        return initialize_game(
            deck_color=DeckColor(self.deck_color),
            target_score=self.target_score,
            names=self.names,
            human_seats=self.human_seats,
        )


def config_to_dict(cfg: GameConfig) -> Dict[str, Any]:
    return asdict(cfg)


def config_from_dict(d: Dict[str, Any]) -> GameConfig:
    defaults = GameConfig()
    seed = d.get("seed")
    try:
        cfg = GameConfig(
            deck_color=str(d.get("deck_color", defaults.deck_color)),
            target_score=int(d.get("target_score", defaults.target_score)),
            names=list(d.get("names", defaults.names)),
            human_seats=[int(s) for s in d.get("human_seats", defaults.human_seats)],
            seed=int(seed) if seed is not None else None,
            max_rounds=int(d.get("max_rounds", defaults.max_rounds)),
        )
    except (TypeError, ValueError) as exc:
        raise InvalidAction(f"Invalid game config: {exc}") from exc
    cfg.validate()
    return cfg


def save_config(cfg: GameConfig, path: str | Path) -> Path:
    """Write ``cfg`` as JSON to ``path`` (parent directories are created)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config_to_dict(cfg), indent=2), encoding="utf-8")
    return path


def load_config(path: str | Path) -> GameConfig:
    with open(path, encoding="utf-8") as f:
        return config_from_dict(json.load(f))


__all__ = ["GameConfig", "config_to_dict", "config_from_dict", "save_config", "load_config"]
