"""Numbered SAN movetext."""

from __future__ import annotations

from collections.abc import Sequence

from chessrules.result import GameResult, result_token


def format_movetext(
    sans: Sequence[str],
    fullmove_number: int = 1,
    black_first: bool = False,
    result: GameResult | None = None,
) -> str:
    """Build movetext such as ``1. e4 e5 2. Nf3`` from SAN moves.

    *fullmove_number* numbers the first move.  When *black_first* is set the
    first move is Black's and is written as ``"<n>... <san>"``.  A result
    token is appended only when *result* is given.
    """
    parts: list[str] = []
    number = fullmove_number
    for ply, san in enumerate(sans):
        white_to_move = (ply % 2 == 0) != black_first
        if white_to_move:
            parts.append(f"{number}.")
        elif ply == 0:
            parts.append(f"{number}...")
        parts.append(san)
        if not white_to_move:
            number += 1
    if result is not None:
        parts.append(result_token(result))
    return " ".join(parts)
