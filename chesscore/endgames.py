"""Lookup of specialised endgame functions by material key."""

from __future__ import annotations

from typing import Callable, NamedTuple, Optional

from chesscore.bitboard import Color
from chesscore.board import Board
from chesscore.endgame_eval import (
    evaluate_kbnk,
    evaluate_knnk,
    evaluate_knnkp,
    evaluate_kpk,
    evaluate_kqkp,
    evaluate_kqkr,
    evaluate_krkb,
    evaluate_krkn,
    evaluate_krkp,
)
from chesscore.endgame_scale import (
    scale_kbpkb,
    scale_kbpkn,
    scale_kbppkb,
    scale_krpkb,
    scale_krpkr,
    scale_krppkrp,
)

EndgameFunction = Callable[[Board, int], int]

_PIECE_CHARS = "PNBRQK"

EVALUATION_CODES: tuple[tuple[str, EndgameFunction], ...] = (
    ("KPk", evaluate_kpk),
    ("KNNk", evaluate_knnk),
    ("KNNkp", evaluate_knnkp),
    ("KBNk", evaluate_kbnk),
    ("KRkp", evaluate_krkp),
    ("KRkb", evaluate_krkb),
    ("KRkn", evaluate_krkn),
    ("KQkp", evaluate_kqkp),
    ("KQkr", evaluate_kqkr),
)

SCALING_CODES: tuple[tuple[str, EndgameFunction], ...] = (
    ("KRPkr", scale_krpkr),
    ("KRPkb", scale_krpkb),
    ("KBPkb", scale_kbpkb),
    ("KBPkn", scale_kbpkn),
    ("KBPPkb", scale_kbppkb),
    ("KRPPkrp", scale_krppkrp),
)


class Endgame(NamedTuple):
    """A specialised function and the side it treats as the strong one."""

    function: EndgameFunction
    strong_side: Color


def code_key(code: str, color: int) -> tuple[int, ...]:
    """Material key of an endgame code such as ``"KRPkr"``.

    Upper-case letters are pieces of ``color``, lower-case ones of its opponent;
    the key has the layout of ``Board.material_key``.
    """
    color = Color(color)
    counts = {Color.WHITE: [0] * 6, Color.BLACK: [0] * 6}
    for ch in code:
        if ch.upper() not in _PIECE_CHARS or not ch.isalpha():
            raise ValueError(f"unexpected character in endgame code: {ch!r}")
        side = color if ch.isupper() else color.opponent
        counts[side][_PIECE_CHARS.index(ch.upper())] += 1
    return tuple(counts[Color.WHITE] + counts[Color.BLACK])


def _build(codes: tuple[tuple[str, EndgameFunction], ...]) -> dict:
    table: dict[tuple[int, ...], Endgame] = {}
    for code, function in codes:
        for color in Color:
            table.setdefault(code_key(code, color), Endgame(function, color))
    return table


_EVALUATIONS = _build(EVALUATION_CODES)
_SCALINGS = _build(SCALING_CODES)


def evaluation_for(key: tuple[int, ...]) -> Optional[Endgame]:
    """The specialised evaluation for a material key, or None."""
    return _EVALUATIONS.get(tuple(key))


def scaling_for(key: tuple[int, ...]) -> Optional[Endgame]:
    """The specialised scaling function for a material key, or None."""
    return _SCALINGS.get(tuple(key))