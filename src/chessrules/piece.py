"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from chessrules.enums import Color, PieceType

# Offset of each piece type from U+2654 (white king); black symbols follow
# six code points later.
_UNICODE_BASE = 0x2654
_UNICODE_ORDER: dict[PieceType, int] = {
    PieceType.KING: 0,
    PieceType.QUEEN: 1,
    PieceType.ROOK: 2,
    PieceType.BISHOP: 3,
    PieceType.KNIGHT: 4,
    PieceType.PAWN: 5,
}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    piece_type: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = self.piece_type.letter
        return letter if self.color == Color.WHITE else letter.lower()

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        piece_type = PieceType.from_letter(char)
        return cls(Color.WHITE if char.isupper() else Color.BLACK, piece_type)

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return chr(
            _UNICODE_BASE + _UNICODE_ORDER[self.piece_type] + 6 * int(self.color)
        )


# A square's content: a piece or ``None`` for an empty square.
Occupant: TypeAlias = Piece | None
