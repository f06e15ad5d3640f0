"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from collections.abc import Iterable

from chessrules.enums import Color, MoveFlag, PieceType
from chessrules.errors import IllegalMoveError
from chessrules.move import Move
from chessrules.piece import Piece
from chessrules.position import KINGSIDE_FILES, QUEENSIDE_FILES, Position, back_rank
from chessrules.types import Square, can_step, make_square, rank_of

# Square-index offsets: ±1 along a rank, ±8 along a file, ±7/±9 diagonally.
BISHOP_DIRS: tuple[int, ...] = (7, -7, 9, -9)
ROOK_DIRS: tuple[int, ...] = (1, -1, 8, -8)
QUEEN_DIRS: tuple[int, ...] = ROOK_DIRS + BISHOP_DIRS

# A knight leap is one diagonal step followed by one orthogonal step that
# continues away from the origin.
KNIGHT_LEGS: tuple[tuple[int, tuple[int, int]], ...] = (
    (7, (-1, 8)),
    (9, (8, 1)),
    (-7, (1, -8)),
    (-9, (-8, -1)),
)

_PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


# -- Precomputed lookup tables ---------------------------------------------


def _build_king_targets() -> tuple[tuple[Square, ...], ...]:
    return tuple(
        tuple(sq + d for d in QUEEN_DIRS if can_step(sq, d)) for sq in range(64)
    )


def _build_knight_targets() -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        moves: list[Square] = []
        for diagonal, orthogonals in KNIGHT_LEGS:
            if not can_step(sq, diagonal):
                continue
            mid = sq + diagonal
            for orthogonal in orthogonals:
                if can_step(mid, orthogonal):
                    moves.append(mid + orthogonal)
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays() -> tuple[dict[int, tuple[Square, ...]], ...]:
    rays_per_square: list[dict[int, tuple[Square, ...]]] = []
    for sq in range(64):
        square_rays: dict[int, tuple[Square, ...]] = {}
        for d in QUEEN_DIRS:
            ray: list[Square] = []
            cur = sq
            while can_step(cur, d):
                cur += d
                ray.append(cur)
            square_rays[d] = tuple(ray)
        rays_per_square.append(square_rays)
    return tuple(rays_per_square)


_KING_TARGETS = _build_king_targets()
_KNIGHT_TARGETS = _build_knight_targets()
_RAYS = _build_rays()

_SLIDER_DIRS: dict[PieceType, tuple[int, ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}


class MoveGenerator:
    """Generates pseudo-legal and legal moves for a given :class:`Position`.

    Legality is decided on hypothetical positions built with
    :meth:`Position.apply_move`; attack queries only ever generate
    pseudo-legal moves, so check detection never recurses into itself.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return [m for m in self.generate_pseudo_legal_moves() if self.is_legal(m)]

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        for sq, piece in self._pos.occupied(color):
            pt = piece.piece_type
            if pt == PieceType.PAWN:
                self._gen_pawn(sq, color, moves)
            elif pt == PieceType.KNIGHT:
                self._gen_steps(sq, color, _KNIGHT_TARGETS[sq], moves)
            elif pt == PieceType.KING:
                self._gen_steps(sq, color, _KING_TARGETS[sq], moves)
                self._gen_castling(sq, color, moves)
            else:
                self._gen_sliding(sq, color, _SLIDER_DIRS[pt], moves)
        return moves

    def is_legal(self, move: Move) -> bool:
        """Whether pseudo-legal *move* keeps the mover's king safe."""
        pos = self._pos
        mover = pos.side_to_move
        opponent = mover.opposite
        if move.flag.is_castling:
            lo, hi = sorted((move.from_sq, move.to_sq))
            if any(self.controls_square(sq, opponent) for sq in range(lo, hi + 1)):
                return False
        after = pos.apply_move(move)
        return not MoveGenerator(after).is_king_capturable(opponent)

    def resolve(self, move: Move, legal: Iterable[Move] | None = None) -> Move:
        """Return the legal move *move* denotes, resolving ``UNCLEAR`` tags."""
        if legal is None:
            legal = self.generate_legal_moves()
        for candidate in legal:
            if move.matches(candidate):
                return candidate
        raise IllegalMoveError(move)

    # -- Attack detection (public) -----------------------------------------

    def controls_square(self, sq: Square, side: Color) -> bool:
        """Could *side* capture a piece standing on *sq* (ignoring pins)?

        An enemy pawn is placed on *sq* and *side*'s pseudo-legal moves are
        checked for one landing there.
        """
        probe = self._pos.with_piece(sq, Piece(side.opposite, PieceType.PAWN))
        return MoveGenerator(probe)._reaches(sq, side)

    def is_king_capturable(self, by_color: Color) -> bool:
        """Can *by_color* pseudo-legally capture the opposing king?"""
        return self._reaches(self._pos.king_square(by_color.opposite), by_color)

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_king_capturable(color.opposite)

    # -- Piece-specific generators (private) -------------------------------

    def _reaches(self, target: Square, color: Color) -> bool:
        """Whether any capture-capable pseudo-legal move of *color* lands on *target*.

        Castling never captures and is not considered.
        """
        pos = self._pos
        for sq, piece in pos.occupied(color):
            pt = piece.piece_type
            if pt == PieceType.PAWN:
                forward = 8 if color == Color.WHITE else -8
                if any(
                    can_step(sq, forward + side) and sq + forward + side == target
                    for side in (-1, 1)
                ):
                    return True
            elif pt == PieceType.KNIGHT:
                if target in _KNIGHT_TARGETS[sq]:
                    return True
            elif pt == PieceType.KING:
                if target in _KING_TARGETS[sq]:
                    return True
            else:
                for d in _SLIDER_DIRS[pt]:
                    ray = _RAYS[sq][d]
                    if target not in ray:
                        continue
                    # Everything strictly before the target must be empty.
                    if all(pos[to_sq] is None for to_sq in ray[: ray.index(target)]):
                        return True
        return False

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        pos = self._pos
        forward = 8 if color == Color.WHITE else -8
        start_rank = 1 if color == Color.WHITE else 6
        dests: list[tuple[Square, MoveFlag]] = []

        one_step = sq + forward
        if pos.is_empty(one_step):
            dests.append((one_step, MoveFlag.NORMAL))
            two_step = one_step + forward
            if rank_of(sq) == start_rank and pos.is_empty(two_step):
                dests.append((two_step, MoveFlag.NORMAL))

        for side in (-1, 1):
            diagonal = forward + side
            if not can_step(sq, diagonal):
                continue
            cap_sq = sq + diagonal
            target = pos[cap_sq]
            if target is not None:
                if target.color != color:
                    dests.append((cap_sq, MoveFlag.NORMAL))
            elif cap_sq == pos.en_passant:
                dests.append((cap_sq, MoveFlag.EN_PASSANT))

        for to_sq, flag in dests:
            if rank_of(to_sq) in (0, 7):
                for pt in _PROMOTION_TYPES:
                    moves.append(Move(sq, to_sq, MoveFlag.PROMOTION, pt))
            else:
                moves.append(Move(sq, to_sq, flag))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        pos = self._pos
        for to_sq in targets:
            target = pos[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        directions: tuple[int, ...],
        moves: list[Move],
    ) -> None:
        pos = self._pos
        for d in directions:
            for to_sq in _RAYS[sq][d]:
                target = pos[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        pos = self._pos
        rank = back_rank(color)
        if rank_of(king_sq) != rank:
            return

        own_rook = Piece(color, PieceType.ROOK)
        for kingside, flag, (king_file, rook_file) in (
            (True, MoveFlag.CASTLE_KINGSIDE, KINGSIDE_FILES),
            (False, MoveFlag.CASTLE_QUEENSIDE, QUEENSIDE_FILES),
        ):
            rook_sq = pos.castling.rook_square(color, kingside)
            if rook_sq is None or pos[rook_sq] != own_rook:
                continue
            king_to = make_square(king_file, rank)
            rook_to = make_square(rook_file, rank)
            path = _span(king_sq, king_to) | _span(rook_sq, rook_to)
            path -= {king_sq, rook_sq}
            if all(pos.is_empty(s) for s in path):
                moves.append(Move(king_sq, king_to, flag))


def _span(a: Square, b: Square) -> set[Square]:
    """Squares from *a* to *b* inclusive along one rank."""
    lo, hi = sorted((a, b))
    return set(range(lo, hi + 1))
