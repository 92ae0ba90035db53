"""A minimal board: piece placement and side to move, with material helpers."""

from __future__ import annotations

from typing import Mapping, Optional

from chesscore.bitboard import (
    BLACK,
    WHITE,
    Color,
    PieceType,
    lsb,
    make_square,
    pawn_attacks,
    popcount,
    pseudo_attacks,
    sq_bb,
)
from chesscore.sliders import bishop_attacks, rook_attacks

PAWN_VALUE_MG = 126
PAWN_VALUE_EG = 208
KNIGHT_VALUE_MG = 781
KNIGHT_VALUE_EG = 854
BISHOP_VALUE_MG = 825
BISHOP_VALUE_EG = 915
ROOK_VALUE_MG = 1276
ROOK_VALUE_EG = 1380
QUEEN_VALUE_MG = 2538
QUEEN_VALUE_EG = 2682

VALUE_ZERO = 0
VALUE_DRAW = 0
VALUE_KNOWN_WIN = 10000
VALUE_MATE = 32000
MAX_PLY = 246
VALUE_MATE_IN_MAX_PLY = VALUE_MATE - MAX_PLY
VALUE_TB_WIN_IN_MAX_PLY = VALUE_MATE_IN_MAX_PLY - MAX_PLY

SCALE_FACTOR_DRAW = 0
SCALE_FACTOR_NORMAL = 64
SCALE_FACTOR_MAX = 128
SCALE_FACTOR_NONE = 255

_NON_PAWN_VALUES = {
    PieceType.KNIGHT: KNIGHT_VALUE_MG,
    PieceType.BISHOP: BISHOP_VALUE_MG,
    PieceType.ROOK: ROOK_VALUE_MG,
    PieceType.QUEEN: QUEEN_VALUE_MG,
}

_PIECE_CHARS = "PNBRQK"
_PIECE_TYPES = tuple(PieceType(pt) for pt in range(PieceType.PAWN, PieceType.KING + 1))

Piece = tuple[Color, PieceType]


class Board:
    """Pieces on squares 0 (a1) to 63 (h8) and the colour to move."""

    def __init__(
        self,
        placement: Optional[Mapping[int, Piece]] = None,
        side_to_move: int = WHITE,
    ) -> None:
        self._by_color = [0, 0]
        self._by_type = [0] * 7
        self._squares: dict[int, Piece] = {}
        for sq, (color, pt) in (placement or {}).items():
            if not 0 <= sq < 64:
                raise ValueError(f"square out of range: {sq}")
            color, pt = Color(color), PieceType(pt)
            if pt == PieceType.ALL_PIECES:
                raise ValueError("a piece needs a concrete type")
            self._squares[sq] = (color, pt)
            self._by_color[color] |= sq_bb(sq)
            self._by_type[pt] |= sq_bb(sq)
        self.side_to_move = Color(side_to_move)

    @classmethod
    def from_fen(cls, fen: str) -> "Board":
        """Read the placement and side to move of a FEN string."""
        fields = fen.split()
        if not fields:
            raise ValueError("empty FEN")
        rows = fields[0].split("/")
        if len(rows) != 8:
            raise ValueError(f"FEN needs 8 ranks, got {len(rows)}")

        placement: dict[int, Piece] = {}
        for rank, row in zip(range(7, -1, -1), rows):
            file = 0
            for ch in row:
                if ch.isdigit() and "1" <= ch <= "8":
                    file += int(ch)
                elif ch.upper() in _PIECE_CHARS:
                    if file > 7:
                        raise ValueError(f"rank {rank + 1} is too long")
                    color = WHITE if ch.isupper() else BLACK
                    pt = PieceType(_PIECE_CHARS.index(ch.upper()) + 1)
                    placement[make_square(file, rank)] = (color, pt)
                    file += 1
                else:
                    raise ValueError(f"unexpected character in FEN: {ch!r}")
            if file != 8:
                raise ValueError(f"rank {rank + 1} does not cover 8 files")

        side = WHITE
        if len(fields) > 1:
            if fields[1] not in ("w", "b"):
                raise ValueError(f"invalid side to move: {fields[1]!r}")
            side = WHITE if fields[1] == "w" else BLACK
        return cls(placement, side)

    def piece_on(self, sq: int) -> Optional[Piece]:
        """The (colour, type) of the piece on ``sq``, or None."""
        return self._squares.get(sq)

    def occupied(self) -> int:
        return self._by_color[WHITE] | self._by_color[BLACK]

    def pieces(self, *args: int) -> int:
        """Both colours' pieces of the given types; every piece when none are given."""
        if not args:
            return self.occupied()
        b = 0
        for pt in args:
            b |= self._by_type[PieceType(pt)]
        return b

    def pieces_of(self, color: int, *args: int) -> int:
        """Pieces of ``color``, restricted to the given types if any."""
        return self._by_color[Color(color)] & self.pieces(*args)

    def square_of(self, color: int, pt: int) -> int:
        """Square of the lowest piece of that colour and type."""
        b = self.pieces_of(color, pt)
        if not b:
            raise ValueError(
                f"no {PieceType(pt).name.lower()} for {Color(color).name.lower()}"
            )
        return lsb(b)

    def piece_count(self, color: int, pt: int) -> int:
        return popcount(self.pieces_of(color, pt))

    def non_pawn_material(self, color: int) -> int:
        """Midgame value of the knights, bishops, rooks and queens of ``color``."""
        return sum(
            value * self.piece_count(color, pt)
            for pt, value in _NON_PAWN_VALUES.items()
        )

    def material_key(self) -> tuple[int, ...]:
        """Piece counts by colour (white first) and type (pawn to king)."""
        return tuple(
            self.piece_count(color, pt) for color in Color for pt in _PIECE_TYPES
        )

    def attackers_to(self, sq: int, occupied: Optional[int] = None) -> int:
        """Pieces of either colour attacking ``sq`` given the occupancy."""
        if occupied is None:
            occupied = self.occupied()
        return (
            (pawn_attacks(BLACK, sq) & self.pieces_of(WHITE, PieceType.PAWN))
            | (pawn_attacks(WHITE, sq) & self.pieces_of(BLACK, PieceType.PAWN))
            | (pseudo_attacks(PieceType.KNIGHT, sq) & self.pieces(PieceType.KNIGHT))
            | (
                rook_attacks(sq, occupied)
                & self.pieces(PieceType.ROOK, PieceType.QUEEN)
            )
            | (
                bishop_attacks(sq, occupied)
                & self.pieces(PieceType.BISHOP, PieceType.QUEEN)
            )
            | (pseudo_attacks(PieceType.KING, sq) & self.pieces(PieceType.KING))
        )