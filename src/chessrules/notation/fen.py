"""FEN parsing and serialization."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.enums import Color, PieceType
from chessrules.errors import (
    FenErrorKind,
    InvalidFenError,
    InvalidPieceCharacterError,
    InvalidSquareNameError,
)
from chessrules.piece import Occupant, Piece
from chessrules.position import CastlingRights, Position, back_rank
from chessrules.rules import SEVENTY_FIVE_MOVE_PLIES
from chessrules.types import FILES, Square, file_of, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_SIDES = {"w": Color.WHITE, "b": Color.BLACK}
_SIDE_CHARS = {color: char for char, color in _SIDES.items()}

# Castling letter → (color, kingside) slot for the standard letters.
_CASTLING_LETTERS: dict[str, tuple[Color, bool]] = {
    "K": (Color.WHITE, True),
    "Q": (Color.WHITE, False),
    "k": (Color.BLACK, True),
    "q": (Color.BLACK, False),
}
_SLOT_LETTERS = "KQkq"


@dataclass(frozen=True, slots=True)
class Fen:
    """A position together with its move counters."""

    position: Position
    halfmove_clock: int = 0
    fullmove_number: int = 1

    def __str__(self) -> str:
        return format_fen(self.position, self.halfmove_clock, self.fullmove_number)


def parse_fen(fen: str) -> Fen:
    """Parse a six-field FEN string, validating every field in order."""
    parts = fen.split()
    if len(parts) != 6:
        raise InvalidFenError(FenErrorKind.FIELD_COUNT, fen)
    placement, side_part, castling_part, ep_part, half_part, full_part = parts

    squares = _parse_placement(placement)

    # 2. Side to move
    side = _SIDES.get(side_part)
    if side is None:
        raise InvalidFenError(FenErrorKind.SIDE_TO_MOVE, side_part)

    # 3. Castling
    castling = _parse_castling(castling_part, squares)

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except InvalidSquareNameError:
            raise InvalidFenError(FenErrorKind.EN_PASSANT, ep_part) from None
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise InvalidFenError(FenErrorKind.EN_PASSANT, ep_part)

    # 5–6. Clocks
    if not _is_ascii_number(half_part) or int(half_part) > SEVENTY_FIVE_MOVE_PLIES:
        raise InvalidFenError(FenErrorKind.HALFMOVE_CLOCK, half_part)
    if not _is_ascii_number(full_part) or int(full_part) < 1:
        raise InvalidFenError(FenErrorKind.FULLMOVE_NUMBER, full_part)

    position = Position(tuple(squares), side, castling, ep)
    return Fen(position, int(half_part), int(full_part))


def format_fen(position: Position, halfmove_clock: int = 0, fullmove_number: int = 1) -> str:
    """Serialise *position* and counters to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = position[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = _SIDE_CHARS[position.side_to_move]

    # 3. Castling
    castling_str = ""
    for slot, rook_sq in enumerate(position.castling):
        if rook_sq is None:
            continue
        color, kingside = _CASTLING_LETTERS[_SLOT_LETTERS[slot]]
        rook = Piece(color, PieceType.ROOK)
        side_squares = _side_of_king(position.king_square(color), kingside)
        if position.count(side_squares, rook) == 1:
            castling_str += _SLOT_LETTERS[slot]
        else:
            letter = FILES[file_of(rook_sq)]
            castling_str += letter.upper() if color == Color.WHITE else letter
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(position.en_passant) if position.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {halfmove_clock} {fullmove_number}"


# ── Helpers ──────────────────────────────────────────────────────────────────


def _is_ascii_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _parse_placement(placement: str) -> list[Occupant]:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidFenError(FenErrorKind.RANK_COUNT, placement)

    squares: list[Occupant] = [None] * 64
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                if ch not in "12345678":
                    raise InvalidFenError(FenErrorKind.RANK_DIGIT, ch)
                file += int(ch)
            else:
                try:
                    piece = Piece.from_char(ch)
                except InvalidPieceCharacterError:
                    raise InvalidFenError(FenErrorKind.PIECE_CHARACTER, ch) from None
                if file < 8:
                    squares[make_square(file, rank)] = piece
                file += 1
            if file > 8:
                raise InvalidFenError(FenErrorKind.RANK_WIDTH, rank_text)
        if file != 8:
            raise InvalidFenError(FenErrorKind.RANK_WIDTH, rank_text)

    for color in Color:
        king_count = squares.count(Piece(color, PieceType.KING))
        if king_count != 1:
            raise InvalidFenError(
                FenErrorKind.KING_COUNT, f"{king_count} {color} kings"
            )
    for sq in range(64):
        piece = squares[sq]
        if piece is not None and piece.piece_type == PieceType.PAWN and rank_of(sq) in (0, 7):
            raise InvalidFenError(FenErrorKind.PAWN_ON_BACK_RANK, square_name(sq))
    return squares


def _side_of_king(king_sq: Square, kingside: bool) -> range:
    """Back-rank squares between the king and the corner on one side."""
    rank_start = make_square(0, rank_of(king_sq))
    if kingside:
        return range(king_sq + 1, rank_start + 8)
    return range(rank_start, king_sq)


def _parse_castling(field: str, squares: list[Occupant]) -> CastlingRights:
    castling = CastlingRights()
    if field == "-":
        return castling
    if not field:
        raise InvalidFenError(FenErrorKind.CASTLING_FIELD, field)

    seen: set[tuple[Color, bool]] = set()
    for ch in field:
        kingside: bool | None
        if ch in _CASTLING_LETTERS:
            color, kingside = _CASTLING_LETTERS[ch]
        elif ch.lower() in FILES:
            color = Color.WHITE if ch.isupper() else Color.BLACK
            kingside = None
        else:
            raise InvalidFenError(FenErrorKind.CASTLING_FIELD, field)

        king_sq = squares.index(Piece(color, PieceType.KING))
        rank = back_rank(color)
        if rank_of(king_sq) != rank:
            raise InvalidFenError(FenErrorKind.CASTLING_RIGHT, ch)
        rook = Piece(color, PieceType.ROOK)

        if kingside is None:
            rook_sq = make_square(FILES.index(ch.lower()), rank)
            if squares[rook_sq] != rook or rook_sq == king_sq:
                raise InvalidFenError(FenErrorKind.CASTLING_RIGHT, ch)
            kingside = rook_sq > king_sq
        else:
            rooks = [
                sq for sq in _side_of_king(king_sq, kingside) if squares[sq] == rook
            ]
            if len(rooks) != 1:
                raise InvalidFenError(FenErrorKind.CASTLING_RIGHT, ch)
            rook_sq = rooks[0]

        if (color, kingside) in seen:
            raise InvalidFenError(FenErrorKind.CASTLING_FIELD, field)
        seen.add((color, kingside))
        castling = castling.with_rook(color, kingside, rook_sq)
    return castling
