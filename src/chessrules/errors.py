"""Exception hierarchy for parsing and move-application failures.

Every error carries the structured data needed to rebuild its message, so
callers can branch on the type (and on ``kind`` for FEN / UCI errors) rather
than on message text.  Errors caused by malformed text also derive from
:class:`ValueError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chessrules.move import Move
    from chessrules.result import GameResult


class ChessError(Exception):
    """Base class for all errors raised by :mod:`chessrules`."""


class InvalidSquareNameError(ChessError, ValueError):
    """A square name that is not a file letter a–h followed by a rank 1–8."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid square name: {text!r}")
        self.text = text


class InvalidSquareIndexError(ChessError, ValueError):
    """A square index outside ``0..64``."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Invalid square index: {index}")
        self.index = index


class InvalidPieceCharacterError(ChessError, ValueError):
    """A character that does not name a piece."""

    def __init__(self, char: str) -> None:
        super().__init__(f"Invalid piece character: {char!r}")
        self.char = char


# ── FEN ──────────────────────────────────────────────────────────────────────


class FenErrorKind(Enum):
    """Which FEN rule was violated."""

    FIELD_COUNT = "field count (need 6 fields)"
    RANK_COUNT = "board (must contain 8 ranks)"
    RANK_DIGIT = "digit (must be 1-8)"
    RANK_WIDTH = "rank width (must cover 8 squares)"
    PIECE_CHARACTER = "piece character"
    KING_COUNT = "king count (need exactly one king per side)"
    PAWN_ON_BACK_RANK = "pawn placement (no pawns on ranks 1 and 8)"
    SIDE_TO_MOVE = "side-to-move field"
    CASTLING_FIELD = "castling field"
    CASTLING_RIGHT = "castling right (king/rook placement)"
    EN_PASSANT = "en-passant square"
    HALFMOVE_CLOCK = "halfmove clock (whole number up to 150)"
    FULLMOVE_NUMBER = "fullmove number (whole number from 1)"


class InvalidFenError(ChessError, ValueError):
    """A FEN string rejected by structural validation."""

    def __init__(self, kind: FenErrorKind, value: Any) -> None:
        super().__init__(f"Invalid FEN {kind.value}: {value!r}")
        self.kind = kind
        self.value = value


# ── Moves ────────────────────────────────────────────────────────────────────


class UciErrorKind(Enum):
    """Which part of a UCI move string is wrong."""

    LENGTH = "length (need 4 or 5 characters)"
    SQUARE_NAME = "square name"
    PIECE_TYPE = "promotion piece"


class InvalidUciError(ChessError, ValueError):
    """A UCI move string that cannot be decoded."""

    def __init__(self, kind: UciErrorKind, value: str) -> None:
        super().__init__(f"Invalid UCI {kind.value}: {value!r}")
        self.kind = kind
        self.value = value


class InvalidSanError(ChessError, ValueError):
    """Text that is not shaped like a SAN move."""

    def __init__(self, san: str) -> None:
        super().__init__(f"Invalid SAN: {san!r}")
        self.san = san


class IllegalMoveError(ChessError, ValueError):
    """A well-formed move that is not legal in the current position."""

    def __init__(self, move: Move | str, message: str | None = None) -> None:
        super().__init__(message or f"Illegal move: {move}")
        self.move = move


class AmbiguousMoveError(IllegalMoveError):
    """SAN text matching more than one legal move."""

    def __init__(self, move: str, candidates: Sequence[Move]) -> None:
        listed = ", ".join(str(m) for m in candidates)
        super().__init__(move, f"Ambiguous move: {move} → {listed}")
        self.candidates = tuple(candidates)


# ── Game lifecycle ───────────────────────────────────────────────────────────


class GameOverError(ChessError):
    """A move or claim attempted after the game has concluded."""

    def __init__(self, result: GameResult) -> None:
        super().__init__(f"The game is over ({result!r})")
        self.result = result


class EmptyHistoryError(ChessError):
    """``undo_move`` called with no moves played."""

    def __init__(self) -> None:
        super().__init__("No moves to undo")


class NoDrawClaimError(ChessError):
    """A draw claimed when neither claimable rule applies."""

    def __init__(self) -> None:
        super().__init__(
            "No draw can be claimed (need threefold repetition or fifty-move rule)"
        )
