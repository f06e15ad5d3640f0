"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from enum import IntEnum, auto
from typing import TYPE_CHECKING, Final

from chessrules.enums import Color, PieceType
from chessrules.move_generator import MoveGenerator
from chessrules.result import Draw, DrawType, GameResult, WinType, Wins
from chessrules.types import is_light_square

if TYPE_CHECKING:
    from chessrules.position import Position

FIFTY_MOVE_PLIES: Final = 100
SEVENTY_FIVE_MOVE_PLIES: Final = 150
THREEFOLD_REPETITIONS: Final = 3
FIVEFOLD_REPETITIONS: Final = 5


class Material(IntEnum):
    """Non-king material as far as mating potential is concerned."""

    KNIGHT = auto()
    LIGHT_BISHOP = auto()
    DARK_BISHOP = auto()
    OTHER = auto()


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Product policy:
    # - Claim-based draws: 50-move rule, threefold repetition.
    # - Automatic draws: insufficient material, 75-move rule, fivefold repetition.

    @staticmethod
    def checked_side(position: Position) -> Color | None:
        """The side whose king the other side could capture, if any."""
        gen = MoveGenerator(position)
        if gen.is_king_capturable(Color.BLACK):
            return Color.WHITE
        if gen.is_king_capturable(Color.WHITE):
            return Color.BLACK
        return None

    @staticmethod
    def is_check(position: Position) -> bool:
        return Rules.checked_side(position) is not None

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_check(position):
            return False
        return not MoveGenerator(position).generate_legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_check(position):
            return False
        return not MoveGenerator(position).generate_legal_moves()

    @staticmethod
    def checkmated_side(position: Position) -> Color | None:
        return position.side_to_move if Rules.is_checkmate(position) else None

    @staticmethod
    def stalemated_side(position: Position) -> Color | None:
        return position.side_to_move if Rules.is_stalemate(position) else None

    @staticmethod
    def count_material(position: Position) -> list[Material]:
        """Census of non-king material for both sides, in square order."""
        material: list[Material] = []
        for sq, piece in position.occupied():
            pt = piece.piece_type
            if pt == PieceType.KING:
                continue
            if pt == PieceType.KNIGHT:
                material.append(Material.KNIGHT)
            elif pt == PieceType.BISHOP:
                material.append(
                    Material.LIGHT_BISHOP if is_light_square(sq) else Material.DARK_BISHOP
                )
            else:
                material.append(Material.OTHER)
        return material

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """Bare kings, a lone knight, or bishops all on one color complex."""
        material = Rules.count_material(position)
        if not material:
            return True
        if material == [Material.KNIGHT]:
            return True
        kinds = set(material)
        return kinds in ({Material.LIGHT_BISHOP}, {Material.DARK_BISHOP})

    @staticmethod
    def classify(
        position: Position, halfmove_clock: int, repetition_count: int
    ) -> GameResult | None:
        """Outcome forced by the rules, or ``None`` while the game goes on.

        Checked in order: checkmate, fivefold repetition, seventy-five-move
        rule, stalemate, insufficient material.
        """
        gen = MoveGenerator(position)
        side = position.side_to_move
        has_moves = bool(gen.generate_legal_moves())
        in_check = gen.is_in_check(side)

        if in_check and not has_moves:
            return Wins(side.opposite, WinType.CHECKMATE)
        if repetition_count >= FIVEFOLD_REPETITIONS:
            return Draw(DrawType.FIVEFOLD_REPETITION)
        if halfmove_clock >= SEVENTY_FIVE_MOVE_PLIES:
            return Draw(DrawType.SEVENTY_FIVE_MOVE_RULE)
        if not has_moves:
            return Draw(DrawType.STALEMATE, stalemated=side)
        if Rules.is_insufficient_material(position):
            return Draw(DrawType.INSUFFICIENT_MATERIAL)
        return None
