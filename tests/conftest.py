"""Shared pytest fixtures and helpers used across the test suite."""

from __future__ import annotations

import pytest

from chessrules.board import Board
from chessrules.move_generator import MoveGenerator
from chessrules.notation.fen import parse_fen
from chessrules.position import Position

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"

# Positions that together exercise castling, en passant and (under)promotion
# captures for both colors.
SAMPLE_FENS = [
    "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
    KIWIPETE,
    "n1n5/PPPk4/8/8/8/8/4Kppp/5N1N b - - 0 1",
    "1k6/8/1K6/2Pp4/8/8/8/8 w - d6 0 2",
    "8/8/8/K1Pp3r/8/8/8/7k w - d6 0 1",
    "rnbqkbnr/pp1ppppp/8/8/2pPP3/8/PPP2PPP/RNBQKBNR b KQkq d3 0 3",
]


def position_from(fen: str) -> Position:
    """Position part of a FEN string."""
    return parse_fen(fen).position


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* by functional move application."""
    if depth == 0:
        return 1
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    return sum(perft(position.apply_move(m), depth - 1) for m in moves)


def uci_set(position: Position) -> set[str]:
    """Legal moves of *position* as UCI strings."""
    return {m.uci for m in MoveGenerator(position).generate_legal_moves()}


@pytest.fixture
def board() -> Board:
    """A fresh game from the standard starting position."""
    return Board()
