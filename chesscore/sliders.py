"""Sliding-piece attacks looked up in per-square tables indexed by bit extraction."""

from __future__ import annotations

from typing import Optional, Sequence

from chesscore.bitboard import (
    ALL_SQUARES,
    BISHOP_DIRECTIONS,
    FILE_A_BB,
    FILE_H_BB,
    RANK_1_BB,
    RANK_8_BB,
    ROOK_DIRECTIONS,
    PieceType,
    file_bb,
    file_of,
    popcount,
    pseudo_attacks,
    rank_bb,
    rank_of,
    sliding_attack,
)


def pext(b: int, mask: int) -> int:
    """Gather the bits of ``b`` selected by ``mask`` into the low bits of the result."""
    result = 0
    bit = 1
    while mask:
        low = mask & -mask
        if b & low:
            result |= bit
        bit <<= 1
        mask ^= low
    return result


def _edges(s: int) -> int:
    return ((RANK_1_BB | RANK_8_BB) & ~rank_bb(rank_of(s))) | (
        (FILE_A_BB | FILE_H_BB) & ~file_bb(file_of(s))
    )


class _SliderTable:
    """Attack tables for one kind of slider, filled square by square on demand."""

    def __init__(self, directions: Sequence[int]) -> None:
        self._directions = tuple(directions)
        # Board edges are not part of the relevant occupancy.
        self._masks = tuple(
            sliding_attack(self._directions, s, 0) & ~_edges(s) & ALL_SQUARES
            for s in range(64)
        )
        self._tables: list[Optional[list[int]]] = [None] * 64

    def _fill(self, s: int) -> list[int]:
        mask = self._masks[s]
        table = [0] * (1 << popcount(mask))
        b = 0
        while True:
            table[pext(b, mask)] = sliding_attack(self._directions, s, b)
            b = (b - mask) & mask
            if not b:
                break
        self._tables[s] = table
        return table

    def attacks(self, s: int, occupied: int) -> int:
        if not 0 <= s < 64:
            raise ValueError(f"square out of range: {s}")
        table = self._tables[s]
        if table is None:
            table = self._fill(s)
        return table[pext(occupied, self._masks[s])]


_ROOK = _SliderTable(ROOK_DIRECTIONS)
_BISHOP = _SliderTable(BISHOP_DIRECTIONS)


def bishop_attacks(s: int, occupied: int) -> int:
    return _BISHOP.attacks(s, occupied)


def rook_attacks(s: int, occupied: int) -> int:
    return _ROOK.attacks(s, occupied)


def queen_attacks(s: int, occupied: int) -> int:
    return bishop_attacks(s, occupied) | rook_attacks(s, occupied)


def attacks_bb(pt: int, s: int, occupied: int) -> int:
    """Attacks of a non-pawn piece type from ``s`` given the board occupancy."""
    pt = PieceType(pt)
    if pt == PieceType.PAWN:
        raise ValueError("pawn attacks depend on colour; use pawn_attacks")
    if pt == PieceType.BISHOP:
        return bishop_attacks(s, occupied)
    if pt == PieceType.ROOK:
        return rook_attacks(s, occupied)
    if pt == PieceType.QUEEN:
        return queen_attacks(s, occupied)
    return pseudo_attacks(pt, s)