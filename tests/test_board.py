"""Tests for Board: a game with history, clocks, undo and outcomes."""

import logging
import random

import pytest

from chessrules.board import Board
from chessrules.enums import Color, MoveFlag
from chessrules.errors import (
    EmptyHistoryError,
    GameOverError,
    IllegalMoveError,
    InvalidSanError,
    NoDrawClaimError,
)
from chessrules.move import Move
from chessrules.notation.fen import STARTING_FEN, parse_fen
from chessrules.position import Position
from chessrules.result import Draw, DrawType, WinType, Wins
from chessrules.types import E1, G1, parse_square

from conftest import SAMPLE_FENS


class TestConstruction:
    def test_default_is_start(self, board: Board) -> None:
        assert board.position == Position.initial()
        assert str(board.to_fen()) == STARTING_FEN
        assert board.is_ongoing()
        assert board.moves == []

    def test_from_fen_string(self) -> None:
        board = Board("4k3/8/8/8/8/8/8/4KQ2 b - - 12 40")
        assert board.side_to_move == Color.BLACK
        assert board.halfmove_clock == 12
        assert board.fullmove_number == 40

    def test_from_fen_value(self) -> None:
        fen = parse_fen("4k3/8/8/8/8/8/8/4KQ2 b - - 12 40")
        assert Board(fen).to_fen() == fen

    def test_invalid_fen(self) -> None:
        with pytest.raises(ValueError):
            Board("not a fen")

    def test_concluded_on_arrival(self) -> None:
        board = Board("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert board.game_result() == Draw(DrawType.STALEMATE, stalemated=Color.BLACK)
        assert not board.is_ongoing()


class TestMakeMove:
    def test_legal_moves(self, board: Board) -> None:
        assert len(board.legal_moves()) == 20

    def test_uci(self, board: Board) -> None:
        move = board.make_move_uci("e2e4")
        assert move == Move(parse_square("e2"), parse_square("e4"))
        assert board.side_to_move == Color.BLACK
        assert str(board.to_fen()) == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )

    def test_returns_resolved_flag(self) -> None:
        board = Board("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        move = board.make_move_uci("e1g1")
        assert move == Move(E1, G1, MoveFlag.CASTLE_KINGSIDE)
        assert board.moves == [move]

    def test_illegal_move_leaves_board_untouched(self, board: Board) -> None:
        with pytest.raises(IllegalMoveError):
            board.make_move_uci("e2e5")
        assert board.position == Position.initial()
        assert board.moves == []

    def test_clocks(self, board: Board) -> None:
        board.make_moves_san("e4 e5 Nf3 Nc6 Bc4 Nf6")
        assert board.fullmove_number == 4
        assert board.halfmove_clock == 4

    def test_capture_resets_halfmove_clock(self) -> None:
        board = Board("4k3/8/8/3p4/8/8/8/3RK3 w - - 7 20")
        board.make_move_san("Rxd5")
        assert board.halfmove_clock == 0
        board.make_move_san("Ke7")
        assert board.halfmove_clock == 1
        assert board.fullmove_number == 21

    def test_san_move(self, board: Board) -> None:
        board.make_move_san("Nf3")
        assert board.position[parse_square("f3")] is not None

    def test_make_moves_san_is_atomic(self, board: Board) -> None:
        with pytest.raises(IllegalMoveError):
            board.make_moves_san("e4 e5 Ke3")
        assert board.position == Position.initial()
        assert board.moves == []

    def test_make_moves_san_bad_text(self, board: Board) -> None:
        with pytest.raises(InvalidSanError):
            board.make_moves_san("e4 ??? e5")
        assert board.moves == []

    def test_move_after_game_over(self) -> None:
        board = Board()
        board.make_moves_san("f3 e5 g4 Qh4#")
        assert board.game_result() == Wins(Color.BLACK, WinType.CHECKMATE)
        with pytest.raises(GameOverError):
            board.make_move_uci("a2a3")
        with pytest.raises(GameOverError):
            board.make_move_san("a3")


class TestUndo:
    def test_reverses_clocks(self, board: Board) -> None:
        board.make_moves_san("e4 e5 Nf3 Nc6 Bc4 Nf6")
        board.undo_move()
        assert (board.fullmove_number, board.halfmove_clock) == (3, 3)
        board.undo_move()
        assert (board.fullmove_number, board.halfmove_clock) == (3, 2)
        board.make_moves_san("d4 exd4 Bc4 Nf6 O-O")
        assert (board.fullmove_number, board.halfmove_clock) == (5, 3)
        for _ in range(9):
            board.undo_move()
        assert (board.fullmove_number, board.halfmove_clock) == (1, 0)
        assert board.position == Position.initial()

    def test_returns_move(self, board: Board) -> None:
        move = board.make_move_uci("g1f3")
        assert board.undo_move() == move

    def test_empty_history(self, board: Board) -> None:
        with pytest.raises(EmptyHistoryError):
            board.undo_move()

    @pytest.mark.parametrize(
        ("fen", "moves"),
        [
            # Castling both ways.
            ("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 3 10", "O-O O-O-O"),
            # En passant.
            ("4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1", "e4 dxe3"),
            # Promotion with capture.
            ("3rk3/4P3/8/8/8/8/8/4K3 w - - 0 1", "exd8=N"),
            # Rook capture revoking castling.
            ("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1", "Rxa8+"),
            # Castling with the rook on the b-file.
            ("4k3/8/8/8/8/8/8/1R2K3 w B - 0 1", "O-O-O"),
        ],
    )
    def test_restores_exact_state(self, fen: str, moves: str) -> None:
        board = Board(fen)
        before = board.to_fen()
        applied = board.make_moves_san(moves)
        for _ in applied:
            board.undo_move()
        assert board.to_fen() == before
        assert board.repetition_count() == 1

    @pytest.mark.parametrize("fen", SAMPLE_FENS)
    @pytest.mark.parametrize("seed", range(5))
    def test_long_walk_unwinds_exactly(self, fen: str, seed: int) -> None:
        rng = random.Random(seed)
        board = Board(fen)
        seen = [board.to_fen()]
        for _ in range(40):
            legal = board.legal_moves()
            if not legal or not board.is_ongoing():
                break
            board.make_move(rng.choice(legal))
            seen.append(board.to_fen())
        while board.moves:
            seen.pop()
            board.undo_move()
            assert board.to_fen() == seen[-1]
        assert str(board.to_fen()) == str(parse_fen(fen))
        assert board.repetition_count() == 1

    def test_undo_reopens_finished_game(self) -> None:
        board = Board()
        board.make_moves_san("f3 e5 g4 Qh4#")
        board.undo_move()
        assert board.is_ongoing()


class TestRepetition:
    def test_count(self, board: Board) -> None:
        assert board.repetition_count() == 1
        board.make_moves_san("Nf3 Nf6 Ng1 Ng8")
        assert board.repetition_count() == 2

    def test_threefold_claim(self, board: Board) -> None:
        board.make_moves_san("Nf3 Nf6 Ng1 Ng8 Nf3 Nf6 Ng1 Ng8")
        assert board.is_threefold_repetition()
        assert board.can_claim_draw()
        assert board.is_ongoing()
        assert board.claim_draw() == Draw(DrawType.AGREEMENT)
        assert not board.is_ongoing()

    def test_fivefold_ends_game(self, board: Board) -> None:
        board.make_moves_san(" ".join(["Nf3 Nf6 Ng1 Ng8"] * 4))
        assert board.repetition_count() == 5
        assert board.game_result() == Draw(DrawType.FIVEFOLD_REPETITION)

    def test_undo_decrements_count(self, board: Board) -> None:
        board.make_moves_san("Nf3 Nf6 Ng1 Ng8")
        board.undo_move()
        board.make_move_san("Ng8")
        assert board.repetition_count() == 2

    def test_en_passant_target_is_part_of_key(self) -> None:
        board = Board()
        board.make_moves_san("e4 Nf6 Nf3 Ng8 Ng1")
        # The first position after e4 carried an en-passant target.
        assert board.repetition_count() == 1


class TestDrawRules:
    def test_no_claim_available(self, board: Board) -> None:
        with pytest.raises(NoDrawClaimError):
            board.claim_draw()

    def test_fifty_move_claim(self) -> None:
        board = Board("4k3/8/8/8/8/8/8/4KR2 w - - 99 80")
        assert not board.is_fifty_move_rule()
        board.make_move_san("Rf2")
        assert board.is_fifty_move_rule()
        assert board.claim_draw() == Draw(DrawType.AGREEMENT)

    def test_seventy_five_move_rule(self) -> None:
        board = Board("4k3/8/8/8/8/8/8/4KR2 w - - 149 100")
        board.make_move_san("Rf2")
        assert board.game_result() == Draw(DrawType.SEVENTY_FIVE_MOVE_RULE)

    def test_insufficient_material(self) -> None:
        board = Board("4k3/8/8/8/8/8/3p4/4KN2 w - - 0 1")
        board.make_move_san("Kxd2")
        assert board.game_result() == Draw(DrawType.INSUFFICIENT_MATERIAL)
        assert board.is_insufficient_material()


class TestDeclaredResults:
    def test_resign(self, board: Board) -> None:
        assert board.resign(Color.WHITE) == Wins(Color.BLACK, WinType.RESIGNATION)
        assert board.game_result() == Wins(Color.BLACK, WinType.RESIGNATION)
        with pytest.raises(GameOverError):
            board.make_move_san("e4")

    def test_agree_draw(self, board: Board) -> None:
        board.agree_draw()
        assert board.game_result() == Draw(DrawType.AGREEMENT)
        with pytest.raises(GameOverError):
            board.resign(Color.BLACK)

    def test_claim_after_game_over(self, board: Board) -> None:
        board.resign(Color.BLACK)
        with pytest.raises(GameOverError):
            board.claim_draw()

    def test_undo_clears_declared_result(self, board: Board) -> None:
        board.make_move_san("e4")
        board.resign(Color.BLACK)
        board.undo_move()
        assert board.is_ongoing()
        assert board.moves == []


class TestQueries:
    def test_stalemate_after_queen_move(self) -> None:
        board = Board("7k/4Q3/6Q1/3Q4/6Q1/8/2Q3Q1/K3Q3 w - - 0 1")
        assert board.move_to_san(Move.from_uci("g6e4")) == "Q6e4"
        board.make_move_uci("g6e4")
        assert board.stalemated_side() == Color.BLACK
        assert board.is_stalemate()
        assert board.game_result() == Draw(DrawType.STALEMATE, stalemated=Color.BLACK)

    def test_checkmate_sequence(self) -> None:
        board = Board("6B1/2N1N3/1N3N2/8/1N3N2/2N1N1K1/8/7k w - - 0 1")
        assert board.move_to_san(Move.from_uci("c7d5")) == "Nc7d5"
        assert board.move_to_san(Move.from_uci("g8d5")) == "Bd5+"
        board.make_move_uci("g8d5")
        assert board.is_check()
        assert board.checked_side() == Color.BLACK
        board.make_move_uci("h1g1")
        assert board.move_to_san(Move.from_uci("f4h3")) == "Nh3#"
        board.make_move_uci("f4h3")
        assert board.is_checkmate()
        assert board.checkmated_side() == Color.BLACK
        assert board.game_result() == Wins(Color.WHITE, WinType.CHECKMATE)

    def test_san_to_move(self, board: Board) -> None:
        assert board.san_to_move("e4") == Move(parse_square("e2"), parse_square("e4"))


class TestMovetext:
    def test_empty(self, board: Board) -> None:
        assert board.gen_movetext() == ""

    def test_game(self, board: Board) -> None:
        board.make_moves_san("e4 e5 Nf3 Nc6 Bb5")
        assert board.gen_movetext() == "1. e4 e5 2. Nf3 Nc6 3. Bb5"

    def test_checks_and_castling(self, board: Board) -> None:
        board.make_moves_san("e4 e5 Nf3 Nc6 Bc4 Nf6 O-O Bc5 Bxf7+")
        assert board.gen_movetext() == (
            "1. e4 e5 2. Nf3 Nc6 3. Bc4 Nf6 4. O-O Bc5 5. Bxf7+"
        )

    def test_black_first(self) -> None:
        board = Board("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1")
        board.make_moves_san("c5 Nf3 d6")
        assert board.gen_movetext() == "1... c5 2. Nf3 d6"

    def test_after_undo(self, board: Board) -> None:
        board.make_moves_san("d4 d5 c4")
        board.undo_move()
        assert board.gen_movetext() == "1. d4 d5"


class TestPrettyPrint:
    def test_unicode_white_perspective(self, board: Board) -> None:
        lines = board.pretty_print().splitlines()
        assert lines[0] == "8 | ♜ | ♞ | ♝ | ♛ | ♚ | ♝ | ♞ | ♜ "
        assert lines[-1] == "  | a | b | c | d | e | f | g | h "

    def test_ascii_black_perspective(self, board: Board) -> None:
        lines = board.pretty_print(Color.BLACK, ascii=True).splitlines()
        assert lines[0] == "1 | R | N | B | K | Q | B | N | R "
        assert lines[1] == "-" * 33
        assert lines[-1] == "  | h | g | f | e | d | c | b | a "

    def test_empty_squares(self, board: Board) -> None:
        lines = board.pretty_print(ascii=True).splitlines()
        assert lines[8] == "4 |   |   |   |   |   |   |   |   "


class TestLogging:
    def test_conclusion_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        board = Board()
        with caplog.at_level(logging.INFO, logger="chessrules.board"):
            board.make_moves_san("f3 e5 g4 Qh4#")
        assert "checkmate" in caplog.text

    def test_moves_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        board = Board()
        with caplog.at_level(logging.DEBUG, logger="chessrules.board"):
            board.make_move_uci("e2e4")
            board.undo_move()
        assert "Applied e2e4" in caplog.text
        assert "Undid e2e4" in caplog.text
