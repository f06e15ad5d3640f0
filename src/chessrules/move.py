"""Move value object and its UCI encoding."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.enums import MoveFlag, PieceType
from chessrules.errors import InvalidPieceCharacterError, InvalidUciError, UciErrorKind
from chessrules.types import FILES, RANKS, Square, parse_square, square_name

_PROMOTION_TYPES = frozenset(
    (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)
)


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    ``promotion`` is set exactly when ``flag`` is :attr:`MoveFlag.PROMOTION`.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    # ── UCI ──────────────────────────────────────────────────────────────

    @classmethod
    def from_uci(cls, uci: str) -> Move:
        """Decode UCI text such as ``e2e4`` or ``e7e8q``.

        Without a promotion letter the move is tagged :attr:`MoveFlag.UNCLEAR`
        because the text alone cannot say whether it is en passant or castling.
        """
        if len(uci) not in (4, 5):
            raise InvalidUciError(UciErrorKind.LENGTH, uci)
        for name in (uci[0:2], uci[2:4]):
            if name[0] not in FILES or name[1] not in RANKS:
                raise InvalidUciError(UciErrorKind.SQUARE_NAME, name)
        from_sq, to_sq = parse_square(uci[0:2]), parse_square(uci[2:4])

        if len(uci) == 4:
            return cls(from_sq, to_sq, MoveFlag.UNCLEAR)

        try:
            promotion = PieceType.from_letter(uci[4])
        except InvalidPieceCharacterError:
            raise InvalidUciError(UciErrorKind.PIECE_TYPE, uci[4]) from None
        if promotion not in _PROMOTION_TYPES:
            raise InvalidUciError(UciErrorKind.PIECE_TYPE, uci[4])
        return cls(from_sq, to_sq, MoveFlag.PROMOTION, promotion)

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.flag == MoveFlag.PROMOTION and self.promotion is not None:
            base += self.promotion.letter.lower()
        return base

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return self.uci

    def matches(self, other: Move) -> bool:
        """Whether *other* is a concrete reading of this (possibly unclear) move."""
        if self.flag != MoveFlag.UNCLEAR:
            return self == other
        return (
            self.from_sq == other.from_sq
            and self.to_sq == other.to_sq
            and other.flag != MoveFlag.PROMOTION
        )
