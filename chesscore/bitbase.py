"""King-and-pawn versus king bitbase.

Every position with a white king, a white pawn on files a-d (ranks 2-7) and
a black king is classified by retrograde iteration; only wins for white are
kept.
"""

from __future__ import annotations

from functools import lru_cache

from chesscore.bitboard import (
    BLACK,
    FILE_D,
    NORTH,
    RANK_2,
    RANK_7,
    WHITE,
    PieceType,
    distance,
    file_of,
    iter_squares,
    make_square,
    pawn_attacks,
    pseudo_attacks,
    rank_of,
    sq_bb,
)

# 24 pawn squares (files a-d, ranks 2-7), two king squares and the side to move.
MAX_INDEX = 2 * 24 * 64 * 64

_INVALID = 0
_UNKNOWN = 1
_DRAW = 2
_WIN = 4

_KING = tuple(pseudo_attacks(PieceType.KING, s) for s in range(64))
_KING_MOVES = tuple(tuple(iter_squares(b)) for b in _KING)
_PAWN_BITS = ~0x1FFF


def _index(us: int, bksq: int, wksq: int, psq: int) -> int:
    return (
        wksq
        | (bksq << 6)
        | (us << 12)
        | (file_of(psq) << 13)
        | ((RANK_7 - rank_of(psq)) << 15)
    )


def _decode(idx: int) -> tuple[int, int, int, int]:
    wksq = idx & 0x3F
    bksq = (idx >> 6) & 0x3F
    us = (idx >> 12) & 0x01
    psq = make_square((idx >> 13) & 0x03, RANK_7 - ((idx >> 15) & 0x07))
    return wksq, bksq, us, psq


def _initial(idx: int) -> int:
    wksq, bksq, us, psq = _decode(idx)

    # Two pieces on one square, or a king that can be captured.
    if (
        distance(wksq, bksq) <= 1
        or wksq == psq
        or bksq == psq
        or (us == WHITE and pawn_attacks(WHITE, psq) & sq_bb(bksq))
    ):
        return _INVALID

    # The pawn promotes without being captured.
    if (
        us == WHITE
        and rank_of(psq) == RANK_7
        and wksq != psq + NORTH
        and (
            distance(bksq, psq + NORTH) > 1
            or _KING[wksq] & sq_bb(psq + NORTH)
        )
    ):
        return _WIN

    # Stalemate, or the black king takes an undefended pawn.
    if us == BLACK and (
        not _KING[bksq] & ~(_KING[wksq] | pawn_attacks(WHITE, psq))
        or _KING[bksq] & sq_bb(psq) & ~_KING[wksq]
    ):
        return _DRAW

    return _UNKNOWN


def _classify(db: bytearray, idx: int) -> int:
    wksq, bksq, us, psq = _decode(idx)
    pawn_bits = idx & _PAWN_BITS
    result = _INVALID

    if us == WHITE:
        good, bad = _WIN, _DRAW
        base = (bksq << 6) | (BLACK << 12) | pawn_bits
        for s in _KING_MOVES[wksq]:
            result |= db[base | s]
        if rank_of(psq) < RANK_7:
            result |= db[_index(BLACK, bksq, wksq, psq + NORTH)]
        if (
            rank_of(psq) == RANK_2
            and psq + NORTH != wksq
            and psq + NORTH != bksq
        ):
            result |= db[_index(BLACK, bksq, wksq, psq + 2 * NORTH)]
    else:
        good, bad = _DRAW, _WIN
        base = wksq | (WHITE << 12) | pawn_bits
        for s in _KING_MOVES[bksq]:
            result |= db[base | (s << 6)]

    if result & good:
        value = good
    elif result & _UNKNOWN:
        value = _UNKNOWN
    else:
        value = bad
    db[idx] = value
    return value


class KPKBitbase:
    """Win/draw table for king and pawn against king, white to win."""

    def __init__(self) -> None:
        db = bytearray(_initial(idx) for idx in range(MAX_INDEX))
        unknown = [idx for idx in range(MAX_INDEX) if db[idx] == _UNKNOWN]

        # Repeat until no unknown position can be resolved any more.
        while True:
            remaining = []
            for idx in unknown:
                if _classify(db, idx) == _UNKNOWN:
                    remaining.append(idx)
            if len(remaining) == len(unknown):
                break
            unknown = remaining

        self._wins = bytes(value == _WIN for value in db)

    def probe(self, wksq: int, wpsq: int, bksq: int, us: int) -> bool:
        """True when white wins with the given kings, pawn and side to move."""
        for sq in (wksq, wpsq, bksq):
            if not 0 <= sq < 64:
                raise ValueError(f"square out of range: {sq}")
        if file_of(wpsq) > FILE_D:
            raise ValueError("the pawn must stand on files a to d")
        if not RANK_2 <= rank_of(wpsq) <= RANK_7:
            raise ValueError("the pawn must stand on ranks 2 to 7")
        if us not in (WHITE, BLACK):
            raise ValueError(f"invalid side to move: {us}")
        return bool(self._wins[_index(int(us), bksq, wksq, wpsq)])


@lru_cache(maxsize=None)
def _shared() -> KPKBitbase:
    return KPKBitbase()


def probe(wksq: int, wpsq: int, bksq: int, us: int) -> bool:
    """Probe the shared bitbase, building it on first use."""
    return _shared().probe(wksq, wpsq, bksq, us)