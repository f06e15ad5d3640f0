"""Core enumerations for the chess domain."""

from __future__ import annotations

from enum import IntEnum

from chessrules.errors import InvalidPieceCharacterError

_PIECE_LETTERS = "PNBRQK"


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def letter(self) -> str:
        """Uppercase letter used by FEN and SAN, e.g. 'N'."""
        return _PIECE_LETTERS[self.value - 1]

    @classmethod
    def from_letter(cls, char: str) -> PieceType:
        """Piece type for a letter of either case, e.g. 'q' → QUEEN."""
        idx = _PIECE_LETTERS.find(char.upper()) if len(char) == 1 else -1
        if idx < 0:
            raise InvalidPieceCharacterError(char)
        return cls(idx + 1)


class MoveFlag(IntEnum):
    """Special move classification.

    ``UNCLEAR`` marks a move decoded from UCI text, which cannot tell a quiet
    move from an en-passant capture or castling; it is resolved against the
    legal move list before being applied.
    """

    NORMAL = 0
    EN_PASSANT = 1
    CASTLE_KINGSIDE = 2
    CASTLE_QUEENSIDE = 3
    PROMOTION = 4
    UNCLEAR = 5

    @property
    def is_castling(self) -> bool:
        return self in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)
