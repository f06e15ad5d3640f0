"""Board — a live game: position, clocks, history and outcome."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass

from chessrules.enums import Color, MoveFlag, PieceType
from chessrules.errors import EmptyHistoryError, GameOverError, NoDrawClaimError
from chessrules.move import Move
from chessrules.move_generator import MoveGenerator
from chessrules.notation.fen import STARTING_FEN, Fen, parse_fen
from chessrules.notation.movetext import format_movetext
from chessrules.notation.san import move_to_san, parse_san
from chessrules.piece import Occupant, Piece
from chessrules.position import KINGSIDE_FILES, QUEENSIDE_FILES, CastlingRights, Position
from chessrules.result import Draw, DrawType, GameResult, WinType, Wins
from chessrules.rules import FIFTY_MOVE_PLIES, THREEFOLD_REPETITIONS, Rules
from chessrules.types import FILES, RANKS, Square, file_of, make_square, rank_of

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _UndoRecord:
    """Everything needed to take back one applied move."""

    move: Move
    captured: Occupant
    capture_sq: Square
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int


class Board:
    """A game in progress.

    Wraps an immutable :class:`Position` with the halfmove clock, the
    fullmove number, an undo history and a tally of repeated positions.
    Illegal input raises and leaves the board untouched.
    """

    __slots__ = (
        "_start",
        "_position",
        "_halfmove_clock",
        "_fullmove_number",
        "_history",
        "_repetitions",
        "_declared",
        "_result",
    )

    def __init__(self, fen: str | Fen | None = None) -> None:
        if fen is None:
            fen = STARTING_FEN
        start = parse_fen(fen) if isinstance(fen, str) else fen
        self._start = start
        self._position = start.position
        self._halfmove_clock = start.halfmove_clock
        self._fullmove_number = start.fullmove_number
        self._history: list[_UndoRecord] = []
        self._repetitions: Counter[Position] = Counter({start.position: 1})
        self._declared: GameResult | None = None
        self._result: GameResult | None = None
        _LOGGER.debug("New board from FEN %s", start)
        self._update_result()

    # ── State ────────────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._position

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def halfmove_clock(self) -> int:
        return self._halfmove_clock

    @property
    def fullmove_number(self) -> int:
        return self._fullmove_number

    @property
    def moves(self) -> list[Move]:
        """Moves applied since the starting position, oldest first."""
        return [record.move for record in self._history]

    def to_fen(self) -> Fen:
        return Fen(self._position, self._halfmove_clock, self._fullmove_number)

    def repetition_count(self) -> int:
        """How many times the current position has occurred in this game."""
        return self._repetitions[self._position]

    def legal_moves(self) -> list[Move]:
        return MoveGenerator(self._position).generate_legal_moves()

    # ── Move application ─────────────────────────────────────────────────

    def make_move(self, move: Move) -> Move:
        """Apply *move* and return it with its concrete flag.

        Raises :class:`GameOverError` once the game has concluded and
        :class:`IllegalMoveError` if *move* is not legal here.
        """
        if self._result is not None:
            raise GameOverError(self._result)
        pos = self._position
        move = MoveGenerator(pos).resolve(move)

        piece = pos[move.from_sq]
        assert piece is not None
        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = None if move.flag.is_castling else pos[capture_sq]

        self._history.append(
            _UndoRecord(
                move=move,
                captured=captured,
                capture_sq=capture_sq,
                castling=pos.castling,
                en_passant=pos.en_passant,
                halfmove_clock=self._halfmove_clock,
            )
        )
        self._position = pos.apply_move(move)

        # Clocks
        if piece.piece_type == PieceType.PAWN or captured is not None:
            self._halfmove_clock = 0
        else:
            self._halfmove_clock += 1
        if piece.color == Color.BLACK:
            self._fullmove_number += 1

        self._repetitions[self._position] += 1
        _LOGGER.debug("Applied %s", move)
        self._update_result()
        return move

    def make_move_uci(self, uci: str) -> Move:
        return self.make_move(Move.from_uci(uci))

    def make_move_san(self, san: str) -> Move:
        if self._result is not None:
            raise GameOverError(self._result)
        return self.make_move(self.san_to_move(san))

    def make_moves_san(self, text: str) -> list[Move]:
        """Apply whitespace-separated SAN moves; on any failure none are kept."""
        applied: list[Move] = []
        try:
            for san in text.split():
                applied.append(self.make_move_san(san))
        except Exception:
            for _ in applied:
                self.undo_move()
            raise
        return applied

    def undo_move(self) -> Move:
        """Take back the last move and return it.

        A declared result (resignation, agreement, claim) is cleared as well.
        """
        if not self._history:
            raise EmptyHistoryError()
        record = self._history.pop()
        move = record.move
        pos = self._position

        self._repetitions[pos] -= 1
        if not self._repetitions[pos]:
            del self._repetitions[pos]

        mover = pos.side_to_move.opposite
        changes: dict[Square, Occupant] = {}
        if move.flag.is_castling:
            kingside = move.flag == MoveFlag.CASTLE_KINGSIDE
            rook_sq = record.castling.rook_square(mover, kingside)
            assert rook_sq is not None
            _, rook_file = KINGSIDE_FILES if kingside else QUEENSIDE_FILES
            # Clear both destinations before restoring, they may overlap origins.
            changes[move.to_sq] = None
            changes[make_square(rook_file, rank_of(move.from_sq))] = None
            changes[move.from_sq] = Piece(mover, PieceType.KING)
            changes[rook_sq] = Piece(mover, PieceType.ROOK)
        else:
            piece = pos[move.to_sq]
            assert piece is not None
            if move.flag == MoveFlag.PROMOTION:
                piece = Piece(mover, PieceType.PAWN)
            changes[move.to_sq] = None
            changes[record.capture_sq] = record.captured
            changes[move.from_sq] = piece

        self._position = pos.replace(changes, mover, record.castling, record.en_passant)
        self._halfmove_clock = record.halfmove_clock
        if mover == Color.BLACK:
            self._fullmove_number -= 1

        self._declared = None
        _LOGGER.debug("Undid %s", move)
        self._update_result()
        return move

    # ── Notation ─────────────────────────────────────────────────────────

    def move_to_san(self, move: Move) -> str:
        return move_to_san(self._position, move)

    def san_to_move(self, san: str) -> Move:
        return parse_san(self._position, san)

    def gen_movetext(self) -> str:
        """Numbered SAN transcript of the whole game."""
        sans: list[str] = []
        pos = self._start.position
        for record in self._history:
            sans.append(move_to_san(pos, record.move))
            pos = pos.apply_move(record.move)
        return format_movetext(
            sans,
            self._start.fullmove_number,
            black_first=self._start.position.side_to_move == Color.BLACK,
        )

    # ── Outcome ──────────────────────────────────────────────────────────

    def game_result(self) -> GameResult | None:
        """The result of the game, or ``None`` while it is ongoing."""
        return self._result

    def is_ongoing(self) -> bool:
        return self._result is None

    def resign(self, color: Color) -> GameResult:
        return self._declare(Wins(color.opposite, WinType.RESIGNATION))

    def agree_draw(self) -> GameResult:
        return self._declare(Draw(DrawType.AGREEMENT))

    def is_threefold_repetition(self) -> bool:
        return self.repetition_count() >= THREEFOLD_REPETITIONS

    def is_fifty_move_rule(self) -> bool:
        return self._halfmove_clock >= FIFTY_MOVE_PLIES

    def can_claim_draw(self) -> bool:
        return self.is_ongoing() and (
            self.is_threefold_repetition() or self.is_fifty_move_rule()
        )

    def claim_draw(self) -> GameResult:
        """Claim a draw by threefold repetition or the fifty-move rule.

        The claim is recorded as a draw by agreement.
        """
        if self._result is not None:
            raise GameOverError(self._result)
        if not self.can_claim_draw():
            raise NoDrawClaimError()
        return self._declare(Draw(DrawType.AGREEMENT))

    def _declare(self, result: GameResult) -> GameResult:
        if self._result is not None:
            raise GameOverError(self._result)
        self._declared = result
        self._result = result
        _LOGGER.info("Game declared %s (%s)", result, _reason(result))
        return result

    def _update_result(self) -> None:
        if self._declared is not None:
            self._result = self._declared
            return
        self._result = Rules.classify(
            self._position, self._halfmove_clock, self.repetition_count()
        )
        if self._result is not None:
            _LOGGER.info("Game over %s (%s)", self._result, _reason(self._result))

    # ── Rule queries ─────────────────────────────────────────────────────

    def is_check(self) -> bool:
        return Rules.is_check(self._position)

    def is_checkmate(self) -> bool:
        return Rules.is_checkmate(self._position)

    def is_stalemate(self) -> bool:
        return Rules.is_stalemate(self._position)

    def is_insufficient_material(self) -> bool:
        return Rules.is_insufficient_material(self._position)

    def checked_side(self) -> Color | None:
        return Rules.checked_side(self._position)

    def checkmated_side(self) -> Color | None:
        return Rules.checkmated_side(self._position)

    def stalemated_side(self) -> Color | None:
        return Rules.stalemated_side(self._position)

    # ── Display ──────────────────────────────────────────────────────────

    def pretty_print(self, perspective: Color = Color.WHITE, ascii: bool = False) -> str:
        """Text diagram of the board seen from *perspective*'s side.

        Pieces are drawn as Unicode chess symbols, or FEN letters with *ascii*.
        """
        ranks = range(7, -1, -1) if perspective == Color.WHITE else range(8)
        files = list(range(8)) if perspective == Color.WHITE else list(range(7, -1, -1))
        rule = ("-" if ascii else "⎯") * 33
        lines: list[str] = []
        for rank in ranks:
            cells: list[str] = []
            for file in files:
                piece = self._position[make_square(file, rank)]
                if piece is None:
                    cells.append(" ")
                else:
                    cells.append(str(piece) if ascii else piece.symbol)
            lines.append(f"{RANKS[rank]} |" + "|".join(f" {c} " for c in cells))
            lines.append(rule)
        lines.append("  |" + "|".join(f" {FILES[f]} " for f in files))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board({str(self.to_fen())!r})"


def _reason(result: GameResult) -> str:
    if isinstance(result, Wins):
        return result.win_type.name.lower()
    return result.draw_type.name.lower()
