"""Chess rules engine — positions, legal moves, notation and game outcomes.

Quick start::

    from chessrules import Board

    board = Board()
    board.make_moves_san("e4 e5 Nf3 Nc6")
    print(board.gen_movetext())   # 1. e4 e5 2. Nf3 Nc6
    print(board.to_fen())
    for move in board.legal_moves():
        print(move, board.move_to_san(move))
"""

from chessrules.board import Board
from chessrules.enums import Color, MoveFlag, PieceType
from chessrules.errors import (
    AmbiguousMoveError,
    ChessError,
    EmptyHistoryError,
    FenErrorKind,
    GameOverError,
    IllegalMoveError,
    InvalidFenError,
    InvalidPieceCharacterError,
    InvalidSanError,
    InvalidSquareIndexError,
    InvalidSquareNameError,
    InvalidUciError,
    NoDrawClaimError,
    UciErrorKind,
)
from chessrules.move import Move
from chessrules.move_generator import MoveGenerator
from chessrules.notation import (
    STARTING_FEN,
    Fen,
    format_fen,
    format_movetext,
    move_to_san,
    parse_fen,
    parse_san,
)
from chessrules.piece import Occupant, Piece
from chessrules.position import CastlingRights, Position
from chessrules.result import Draw, DrawType, GameResult, WinType, Wins
from chessrules.rules import Material, Rules
from chessrules.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "Color",
    "MoveFlag",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "CastlingRights",
    "Move",
    "MoveGenerator",
    "Occupant",
    "Piece",
    "Position",
    "Material",
    "Rules",
    # Results
    "Draw",
    "DrawType",
    "GameResult",
    "WinType",
    "Wins",
    # Notation
    "STARTING_FEN",
    "Fen",
    "format_fen",
    "format_movetext",
    "move_to_san",
    "parse_fen",
    "parse_san",
    # Errors
    "AmbiguousMoveError",
    "ChessError",
    "EmptyHistoryError",
    "FenErrorKind",
    "GameOverError",
    "IllegalMoveError",
    "InvalidFenError",
    "InvalidPieceCharacterError",
    "InvalidSanError",
    "InvalidSquareIndexError",
    "InvalidSquareNameError",
    "InvalidUciError",
    "NoDrawClaimError",
    "UciErrorKind",
]
