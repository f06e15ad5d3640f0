"""Game outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TypeAlias

from chessrules.enums import Color


class WinType(IntEnum):
    """How a game was won."""

    CHECKMATE = auto()
    # A loss on time is recorded as a resignation.
    RESIGNATION = auto()


class DrawType(IntEnum):
    """How a game was drawn."""

    FIVEFOLD_REPETITION = auto()
    SEVENTY_FIVE_MOVE_RULE = auto()
    STALEMATE = auto()
    INSUFFICIENT_MATERIAL = auto()
    # Claimed draws (threefold repetition, fifty-move rule) are recorded as
    # agreement.
    AGREEMENT = auto()


@dataclass(frozen=True, slots=True)
class Wins:
    """*winner* won the game by *win_type*."""

    winner: Color
    win_type: WinType

    def __str__(self) -> str:
        return "1-0" if self.winner == Color.WHITE else "0-1"


@dataclass(frozen=True, slots=True)
class Draw:
    """The game was drawn; ``stalemated`` names the side in stalemate."""

    draw_type: DrawType
    stalemated: Color | None = None

    def __str__(self) -> str:
        return "1/2-1/2"


GameResult: TypeAlias = Wins | Draw


def result_token(result: GameResult | None) -> str:
    """PGN-style result token; ``*`` while the game is ongoing."""
    return "*" if result is None else str(result)
