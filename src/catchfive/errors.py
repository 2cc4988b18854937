"""Engine exceptions."""
from __future__ import annotations


class GameException(Exception):
    """Base class for all engine errors."""


class InvalidAction(GameException, ValueError):
    """Malformed or out-of-domain action payload. State is left untouched."""


class NotYourTurn(InvalidAction):
    """A seat tried a turn-gated action while another seat is to act."""

    def __init__(self, seat: int, current: int):
        super().__init__(f"Seat {seat} acted out of turn (seat {current} to act)")
        self.seat = seat
        self.current = current


class InvariantViolation(GameException, AssertionError):
    """Card conservation broke: a logic bug, play cannot safely continue."""

    def __init__(self, context: str, problems: list[str]):
        super().__init__(f"Card invariant violated {context}: " + "; ".join(problems))
        self.context = context
        self.problems = list(problems)
