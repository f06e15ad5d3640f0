"""Notation package: FEN / SAN / movetext parsing and serialization."""

from chessrules.notation.fen import STARTING_FEN, Fen, format_fen, parse_fen
from chessrules.notation.movetext import format_movetext
from chessrules.notation.san import move_to_san, parse_san

__all__ = [
    "STARTING_FEN",
    "Fen",
    "parse_fen",
    "format_fen",
    "move_to_san",
    "parse_san",
    "format_movetext",
]
