"""Bitboard primitives and precomputed tables for an 8x8 chess board.

Squares are numbered 0 (a1) to 63 (h8); a bitboard is a non-negative
integer whose bit ``s`` is set when square ``s`` belongs to the set.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Iterator


class Color(IntEnum):
    WHITE = 0
    BLACK = 1

    @property
    def opponent(self) -> "Color":
        return Color(self ^ 1)


class PieceType(IntEnum):
    ALL_PIECES = 0
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


WHITE = Color.WHITE
BLACK = Color.BLACK

FILE_A, FILE_B, FILE_C, FILE_D, FILE_E, FILE_F, FILE_G, FILE_H = range(8)
RANK_1, RANK_2, RANK_3, RANK_4, RANK_5, RANK_6, RANK_7, RANK_8 = range(8)

SQ_A1 = 0
SQ_H1 = 7
SQ_A4 = 24
SQ_H5 = 39
SQ_A7 = 48
SQ_G7 = 54
SQ_H7 = 55
SQ_A8 = 56
SQ_H8 = 63

NORTH = 8
EAST = 1
SOUTH = -8
WEST = -1
NORTH_EAST = NORTH + EAST
NORTH_WEST = NORTH + WEST
SOUTH_EAST = SOUTH + EAST
SOUTH_WEST = SOUTH + WEST

ROOK_DIRECTIONS = (NORTH, EAST, SOUTH, WEST)
BISHOP_DIRECTIONS = (NORTH_EAST, SOUTH_EAST, SOUTH_WEST, NORTH_WEST)

ALL_SQUARES = (1 << 64) - 1
DARK_SQUARES = 0xAA55AA55AA55AA55
LIGHT_SQUARES = ALL_SQUARES ^ DARK_SQUARES

FILE_A_BB = 0x0101010101010101
FILE_B_BB = FILE_A_BB << 1
FILE_C_BB = FILE_A_BB << 2
FILE_D_BB = FILE_A_BB << 3
FILE_E_BB = FILE_A_BB << 4
FILE_F_BB = FILE_A_BB << 5
FILE_G_BB = FILE_A_BB << 6
FILE_H_BB = FILE_A_BB << 7

RANK_1_BB = 0xFF
RANK_2_BB = RANK_1_BB << 8
RANK_3_BB = RANK_1_BB << 16
RANK_4_BB = RANK_1_BB << 24
RANK_5_BB = RANK_1_BB << 32
RANK_6_BB = RANK_1_BB << 40
RANK_7_BB = RANK_1_BB << 48
RANK_8_BB = RANK_1_BB << 56

QUEEN_SIDE = FILE_A_BB | FILE_B_BB | FILE_C_BB | FILE_D_BB
CENTER_FILES = FILE_C_BB | FILE_D_BB | FILE_E_BB | FILE_F_BB
KING_SIDE = FILE_E_BB | FILE_F_BB | FILE_G_BB | FILE_H_BB
CENTER = (FILE_D_BB | FILE_E_BB) & (RANK_4_BB | RANK_5_BB)

_NOT_FILE_A = ALL_SQUARES ^ FILE_A_BB
_NOT_FILE_H = ALL_SQUARES ^ FILE_H_BB


def file_of(s: int) -> int:
    return s & 7


def rank_of(s: int) -> int:
    return s >> 3


def make_square(f: int, r: int) -> int:
    return (r << 3) + f


def relative_square(c: int, s: int) -> int:
    """Mirror ``s`` vertically when ``c`` is black."""
    return s ^ (c * 56)


def relative_rank(c: int, s: int) -> int:
    return rank_of(s) ^ (c * 7)


def opposite_colors(s1: int, s2: int) -> bool:
    """True when the two squares have different colours on the board."""
    s = s1 ^ s2
    return bool(((s >> 3) ^ s) & 1)


def pawn_push(c: int) -> int:
    return NORTH if c == WHITE else SOUTH


def _square_is_ok(s: int) -> bool:
    return 0 <= s < 64


def sq_bb(s: int) -> int:
    return 1 << s


def more_than_one(b: int) -> bool:
    return bool(b & (b - 1))


_SHIFTS = {
    NORTH: lambda b: (b << 8) & ALL_SQUARES,
    SOUTH: lambda b: b >> 8,
    NORTH + NORTH: lambda b: (b << 16) & ALL_SQUARES,
    SOUTH + SOUTH: lambda b: b >> 16,
    EAST: lambda b: ((b & _NOT_FILE_H) << 1) & ALL_SQUARES,
    WEST: lambda b: (b & _NOT_FILE_A) >> 1,
    NORTH_EAST: lambda b: ((b & _NOT_FILE_H) << 9) & ALL_SQUARES,
    SOUTH_EAST: lambda b: (b & _NOT_FILE_H) >> 7,
    NORTH_WEST: lambda b: ((b & _NOT_FILE_A) << 7) & ALL_SQUARES,
    SOUTH_WEST: lambda b: (b & _NOT_FILE_A) >> 9,
}


def shift(direction: int, b: int) -> int:
    """Move every square of ``b`` one step along ``direction``; 0 for unknown steps."""
    step = _SHIFTS.get(direction)
    return step(b & ALL_SQUARES) if step else 0


def pawn_attacks_bb(b: int, c: int) -> int:
    """Squares attacked by pawns of colour ``c`` standing on ``b``."""
    if c == WHITE:
        return shift(NORTH_WEST, b) | shift(NORTH_EAST, b)
    return shift(SOUTH_WEST, b) | shift(SOUTH_EAST, b)


def pawn_double_attacks_bb(b: int, c: int) -> int:
    """Squares attacked twice by pawns of colour ``c`` standing on ``b``."""
    if c == WHITE:
        return shift(NORTH_WEST, b) & shift(NORTH_EAST, b)
    return shift(SOUTH_WEST, b) & shift(SOUTH_EAST, b)


def file_bb(f: int) -> int:
    return FILE_A_BB << f


def rank_bb(r: int) -> int:
    return RANK_1_BB << (8 * r)


def adjacent_files_bb(f: int) -> int:
    return shift(EAST, file_bb(f)) | shift(WEST, file_bb(f))


def distance_file(s1: int, s2: int) -> int:
    return abs(file_of(s1) - file_of(s2))


def distance_rank(s1: int, s2: int) -> int:
    return abs(rank_of(s1) - rank_of(s2))


def distance(s1: int, s2: int) -> int:
    """Number of king steps between two squares."""
    return max(distance_file(s1, s2), distance_rank(s1, s2))


def sliding_attack(directions: Iterable[int], sq: int, occupied: int) -> int:
    """Squares reached from ``sq`` along ``directions``, stopping at blockers."""
    attack = 0
    for d in directions:
        s = sq + d
        while _square_is_ok(s) and distance(s, s - d) == 1:
            attack |= sq_bb(s)
            if occupied & sq_bb(s):
                break
            s += d
    return attack


def popcount(b: int) -> int:
    return bin(b).count("1")


def lsb(b: int) -> int:
    """Index of the least significant set bit of a non-empty bitboard."""
    if not b:
        raise ValueError("lsb of an empty bitboard")
    return (b & -b).bit_length() - 1


def msb(b: int) -> int:
    """Index of the most significant set bit of a non-empty bitboard."""
    if not b:
        raise ValueError("msb of an empty bitboard")
    return b.bit_length() - 1


def iter_squares(b: int) -> Iterator[int]:
    """Yield the squares of ``b`` from the lowest to the highest."""
    while b:
        low = b & -b
        yield low.bit_length() - 1
        b ^= low


def frontmost_sq(c: int, b: int) -> int:
    return msb(b) if c == WHITE else lsb(b)


def backmost_sq(c: int, b: int) -> int:
    return lsb(b) if c == WHITE else msb(b)


def _build_forward_ranks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    white = [0] * 8
    black = [0] * 8
    for r in range(7):
        black[r + 1] = black[r] | rank_bb(r)
        white[r] = ALL_SQUARES & ~black[r + 1]
    return tuple(white), tuple(black)


_FORWARD_RANKS = _build_forward_ranks()


def forward_ranks_bb(c: int, r: int) -> int:
    """All squares on ranks in front of ``r`` from the point of view of ``c``."""
    return _FORWARD_RANKS[c][r]


def forward_file_bb(c: int, s: int) -> int:
    return forward_ranks_bb(c, rank_of(s)) & file_bb(file_of(s))


def pawn_attack_span(c: int, s: int) -> int:
    return forward_ranks_bb(c, rank_of(s)) & adjacent_files_bb(file_of(s))


def passed_pawn_span(c: int, s: int) -> int:
    return forward_file_bb(c, s) | pawn_attack_span(c, s)


def _build_distance_rings() -> tuple[tuple[int, ...], ...]:
    rings = []
    for s1 in range(64):
        ring = [0] * 8
        for s2 in range(64):
            if s1 != s2:
                ring[distance(s1, s2)] |= sq_bb(s2)
        rings.append(tuple(ring))
    return tuple(rings)


_DISTANCE_RINGS = _build_distance_rings()


def distance_ring(s: int, d: int) -> int:
    """Squares other than ``s`` at exactly king distance ``d`` from it."""
    return _DISTANCE_RINGS[s][d]


def _step_table(steps: tuple[int, ...], signs: tuple[int, ...]) -> tuple[int, ...]:
    table = []
    for s in range(64):
        b = 0
        for sign in signs:
            for step in steps:
                to = s + sign * step
                if _square_is_ok(to) and distance(s, to) < 3:
                    b |= sq_bb(to)
        table.append(b)
    return tuple(table)


_PAWN_STEPS = (7, 9)
_KNIGHT_STEPS = (6, 10, 15, 17)
_KING_STEPS = (1, 7, 8, 9)

_PAWN_ATTACKS = (_step_table(_PAWN_STEPS, (1,)), _step_table(_PAWN_STEPS, (-1,)))


def _build_pseudo_attacks() -> dict[PieceType, tuple[int, ...]]:
    bishop = tuple(sliding_attack(BISHOP_DIRECTIONS, s, 0) for s in range(64))
    rook = tuple(sliding_attack(ROOK_DIRECTIONS, s, 0) for s in range(64))
    return {
        PieceType.ALL_PIECES: (0,) * 64,
        PieceType.PAWN: (0,) * 64,
        PieceType.KNIGHT: _step_table(_KNIGHT_STEPS, (1, -1)),
        PieceType.BISHOP: bishop,
        PieceType.ROOK: rook,
        PieceType.QUEEN: tuple(b | r for b, r in zip(bishop, rook)),
        PieceType.KING: _step_table(_KING_STEPS, (1, -1)),
    }


_PSEUDO_ATTACKS = _build_pseudo_attacks()


def pseudo_attacks(pt: int, s: int) -> int:
    """Attacks of piece type ``pt`` from ``s`` on an empty board (0 for pawns)."""
    return _PSEUDO_ATTACKS[PieceType(pt)][s]


def pawn_attacks(c: int, s: int) -> int:
    """Squares a pawn of colour ``c`` on ``s`` attacks."""
    return _PAWN_ATTACKS[c][s]


def _build_lines() -> tuple[tuple[tuple[int, ...], ...], tuple[tuple[int, ...], ...]]:
    sliders = (
        (PieceType.BISHOP, BISHOP_DIRECTIONS),
        (PieceType.ROOK, ROOK_DIRECTIONS),
    )
    lines = []
    betweens = []
    for s1 in range(64):
        line_row = []
        between_row = []
        for s2 in range(64):
            line = 0
            between = sq_bb(s2)
            for pt, dirs in sliders:
                if not pseudo_attacks(pt, s1) & sq_bb(s2):
                    continue
                line = (
                    (pseudo_attacks(pt, s1) & pseudo_attacks(pt, s2))
                    | sq_bb(s1)
                    | sq_bb(s2)
                )
                between |= sliding_attack(dirs, s1, sq_bb(s2)) & sliding_attack(
                    dirs, s2, sq_bb(s1)
                )
            line_row.append(line)
            between_row.append(between)
        lines.append(tuple(line_row))
        betweens.append(tuple(between_row))
    return tuple(lines), tuple(betweens)


_LINE_BB, _BETWEEN_BB = _build_lines()


def between_bb(s1: int, s2: int) -> int:
    """Squares strictly between ``s1`` and ``s2`` on a shared line, plus ``s2`` itself."""
    return _BETWEEN_BB[s1][s2]


def line_bb(s1: int, s2: int) -> int:
    """The full line through ``s1`` and ``s2``, or 0 when they are not aligned."""
    return _LINE_BB[s1][s2]


def aligned(s1: int, s2: int, s3: int) -> bool:
    """True when ``s3`` lies on the line determined by ``s1`` and ``s2``."""
    return bool(line_bb(s1, s2) & sq_bb(s3))


_SEPARATOR = "+---+---+---+---+---+---+---+---+\n"


def pretty(b: int) -> str:
    """ASCII drawing of a bitboard, rank 8 at the top."""
    parts = [_SEPARATOR]
    for r in range(7, -1, -1):
        parts.extend(
            "| X " if b & sq_bb(8 * r + f) else "|   " for f in range(8)
        )
        parts.append(f"| {r + 1}\n{_SEPARATOR}")
    parts.append("  a   b   c   d   e   f   g   h\n")
    return "".join(parts)