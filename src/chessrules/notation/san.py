"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

import re

from chessrules.enums import MoveFlag, PieceType
from chessrules.errors import AmbiguousMoveError, IllegalMoveError, InvalidSanError
from chessrules.move import Move
from chessrules.move_generator import MoveGenerator
from chessrules.position import Position
from chessrules.types import FILES, RANKS, file_of, parse_square, rank_of, square_name

_SAN_RE = re.compile(
    r"^(?P<piece>[NBRQK])?(?P<file>[a-h])?(?P<rank>[1-8])?(?P<capture>x)?"
    r"(?P<dest>[a-h][1-8])(?:=?(?P<promotion>[NBRQ]))?$"
)
_SUFFIX_CHARS = "+#!?"
_CASTLING_SAN = {
    "O-O": MoveFlag.CASTLE_KINGSIDE,
    "0-0": MoveFlag.CASTLE_KINGSIDE,
    "O-O-O": MoveFlag.CASTLE_QUEENSIDE,
    "0-0-0": MoveFlag.CASTLE_QUEENSIDE,
}


def move_to_san(position: Position, move: Move, legal: list[Move] | None = None) -> str:
    """Convert *move* to SAN given the *position* before the move.

    *legal* may pass in the already generated legal moves of *position*.
    Unclear moves are resolved first; an illegal move raises
    :class:`IllegalMoveError`.
    """
    gen = MoveGenerator(position)
    if legal is None:
        legal = gen.generate_legal_moves()
    move = gen.resolve(move, legal)
    san = _san_body(position, move, legal)

    after = position.apply_move(move)
    gen_after = MoveGenerator(after)
    if gen_after.is_in_check(after.side_to_move):
        san += "#" if not gen_after.generate_legal_moves() else "+"
    return san


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*."""
    legal = MoveGenerator(position).generate_legal_moves()
    clean = san.strip().rstrip(_SUFFIX_CHARS)

    # Exact match against our own encoding first.
    for m in legal:
        if _san_body(position, m, legal) == clean:
            return m

    if clean in _CASTLING_SAN:
        flag = _CASTLING_SAN[clean]
        for m in legal:
            if m.flag == flag:
                return m
        raise IllegalMoveError(san)

    match = _SAN_RE.match(clean)
    if match is None:
        raise InvalidSanError(san)

    piece_type = (
        PieceType.from_letter(match["piece"]) if match["piece"] else PieceType.PAWN
    )
    promotion = PieceType.from_letter(match["promotion"]) if match["promotion"] else None
    to_sq = parse_square(match["dest"])
    from_file = FILES.index(match["file"]) if match["file"] else None
    from_rank = RANKS.index(match["rank"]) if match["rank"] else None

    candidates: list[Move] = []
    for m in legal:
        p = position[m.from_sq]
        if p is None or p.piece_type != piece_type:
            continue
        if m.to_sq != to_sq or m.flag.is_castling:
            continue
        if m.promotion != promotion:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise IllegalMoveError(san)
    raise AmbiguousMoveError(san, candidates)


def _san_body(position: Position, move: Move, legal: list[Move]) -> str:
    """SAN of a legal *move* without the check / mate suffix."""
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return "O-O"
    if move.flag == MoveFlag.CASTLE_QUEENSIDE:
        return "O-O-O"

    piece = position[move.from_sq]
    assert piece is not None
    is_capture = position[move.to_sq] is not None or move.flag == MoveFlag.EN_PASSANT
    dest = square_name(move.to_sq)

    if piece.piece_type == PieceType.PAWN:
        san = f"{FILES[file_of(move.from_sq)]}x{dest}" if is_capture else dest
        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            san += "=" + move.promotion.letter
        return san

    # Disambiguation
    rivals = [
        m.from_sq
        for m in legal
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and position[m.from_sq] == piece
    ]
    prefix = ""
    if rivals:
        if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
            prefix = FILES[file_of(move.from_sq)]
        elif all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
            prefix = RANKS[rank_of(move.from_sq)]
        else:
            prefix = square_name(move.from_sq)

    return f"{piece.piece_type.letter}{prefix}{'x' if is_capture else ''}{dest}"
