"""Position — immutable rules-relevant state with functional move application."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import NamedTuple

from chessrules.enums import Color, MoveFlag, PieceType
from chessrules.move import Move
from chessrules.piece import Occupant, Piece
from chessrules.types import A1, A8, H1, H8, Square, file_of, make_square, rank_of

# Destination files of king and rook when castling, by side.
KINGSIDE_FILES = (6, 5)  # g, f
QUEENSIDE_FILES = (2, 3)  # c, d

_BACK_RANKS = (0, 7)


class CastlingRights(NamedTuple):
    """Rook origin square for each castling right, or ``None`` if lost.

    Slots are ordered K, Q, k, q as in FEN.  Storing the rook square rather
    than a flag lets non-default rook files round-trip.
    """

    white_kingside: Square | None = None
    white_queenside: Square | None = None
    black_kingside: Square | None = None
    black_queenside: Square | None = None

    @classmethod
    def standard(cls) -> CastlingRights:
        return cls(H1, A1, H8, A8)

    @staticmethod
    def slot(color: Color, kingside: bool) -> int:
        return int(color) * 2 + (0 if kingside else 1)

    def rook_square(self, color: Color, kingside: bool) -> Square | None:
        return self[self.slot(color, kingside)]

    def with_rook(self, color: Color, kingside: bool, sq: Square | None) -> CastlingRights:
        rights = list(self)
        rights[self.slot(color, kingside)] = sq
        return CastlingRights(*rights)

    def without_color(self, color: Color) -> CastlingRights:
        return self.with_rook(color, True, None).with_rook(color, False, None)

    def without_squares(self, *squares: Square) -> CastlingRights:
        """Drop every right whose rook stands on one of *squares*."""
        return CastlingRights(*(None if sq in squares else sq for sq in self))

    @property
    def is_empty(self) -> bool:
        return all(sq is None for sq in self)


@dataclass(frozen=True, slots=True)
class Position:
    """Board content, side to move, castling rights and en-passant target.

    A position is a value: applying a move returns a new one.  Equality and
    hashing cover exactly the fields compared for repetition; move counters
    live on :class:`~chessrules.board.Board`.
    """

    squares: tuple[Occupant, ...]
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights()
    en_passant: Square | None = None
    _king_squares: tuple[Square | None, Square | None] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        squares = tuple(self.squares)
        if len(squares) != 64:
            raise ValueError(f"A position needs 64 squares, got {len(squares)}")
        kings: list[Square | None] = [None, None]
        for sq, piece in enumerate(squares):
            if piece is not None and piece.piece_type == PieceType.KING:
                kings[int(piece.color)] = sq
        object.__setattr__(self, "squares", squares)
        object.__setattr__(self, "_king_squares", (kings[0], kings[1]))

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position."""
        squares: list[Occupant] = [None] * 64
        back_rank = [
            PieceType.ROOK,
            PieceType.KNIGHT,
            PieceType.BISHOP,
            PieceType.QUEEN,
            PieceType.KING,
            PieceType.BISHOP,
            PieceType.KNIGHT,
            PieceType.ROOK,
        ]
        for f, pt in enumerate(back_rank):
            squares[make_square(f, 0)] = Piece(Color.WHITE, pt)
            squares[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            squares[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            squares[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return cls(tuple(squares), Color.WHITE, CastlingRights.standard(), None)

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Occupant:
        return self.squares[sq]

    def is_empty(self, sq: Square) -> bool:
        return self.squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self, color: Color | None = None) -> Iterator[tuple[Square, Piece]]:
        """``(square, piece)`` pairs in square order, optionally for one side."""
        for sq, piece in enumerate(self.squares):
            if piece is not None and (color is None or piece.color == color):
                yield sq, piece

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return [sq for sq, p in self.occupied(color) if p.piece_type == piece_type]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        sq = self._king_squares[int(color)]
        if sq is None:
            raise RuntimeError(f"No {color} king on board")
        return sq

    def count(self, squares: Iterable[Square], piece: Piece) -> int:
        return sum(1 for sq in squares if self.squares[sq] == piece)

    # -- Transitions --------------------------------------------------------

    def replace(
        self,
        changes: dict[Square, Occupant],
        side_to_move: Color,
        castling: CastlingRights,
        en_passant: Square | None,
    ) -> Position:
        """New position with *changes* applied to the board content."""
        squares = list(self.squares)
        for sq, occupant in changes.items():
            squares[sq] = occupant
        return Position(tuple(squares), side_to_move, castling, en_passant)

    def with_piece(self, sq: Square, occupant: Occupant) -> Position:
        """Same position with *sq* overwritten; used for hypothetical probes."""
        return self.replace({sq: occupant}, self.side_to_move, self.castling, self.en_passant)

    def apply_move(self, move: Move) -> Position:
        """Return the position after *move*.

        *move* must carry a concrete flag (never ``UNCLEAR``) and be at least
        pseudolegal here; legality is the move generator's business.
        """
        piece = self.squares[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")
        color = piece.color
        changes: dict[Square, Occupant] = {}
        castling = self.castling

        if move.flag.is_castling:
            kingside = move.flag == MoveFlag.CASTLE_KINGSIDE
            rook_sq = castling.rook_square(color, kingside)
            if rook_sq is None:
                raise ValueError(f"No castling right for {move}")
            _, rook_file = KINGSIDE_FILES if kingside else QUEENSIDE_FILES
            rank = rank_of(move.from_sq)
            changes[move.from_sq] = None
            changes[rook_sq] = None
            changes[move.to_sq] = piece
            changes[make_square(rook_file, rank)] = Piece(color, PieceType.ROOK)
        else:
            changes[move.from_sq] = None
            if move.flag == MoveFlag.EN_PASSANT:
                changes[make_square(file_of(move.to_sq), rank_of(move.from_sq))] = None
            if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
                changes[move.to_sq] = Piece(color, move.promotion)
            else:
                changes[move.to_sq] = piece

        # Castling rights: a king move loses both; a rook leaving or being
        # captured on its recorded square loses that one.
        if piece.piece_type == PieceType.KING:
            castling = castling.without_color(color)
        castling = castling.without_squares(move.from_sq, move.to_sq)

        en_passant: Square | None = None
        if (
            piece.piece_type == PieceType.PAWN
            and abs(rank_of(move.to_sq) - rank_of(move.from_sq)) == 2
        ):
            en_passant = (move.from_sq + move.to_sq) // 2

        return self.replace(changes, color.opposite, castling, en_passant)

    # -- Dunder helpers -----------------------------------------------------

    def __str__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self.squares[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)


def back_rank(color: Color) -> int:
    """Rank index of *color*'s first rank."""
    return _BACK_RANKS[int(color)]
