"""Material configuration analysis: imbalance, game phase and endgame hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from chesscore.bitboard import BLACK, WHITE, Color, PieceType, more_than_one
from chesscore.board import (
    BISHOP_VALUE_MG,
    QUEEN_VALUE_MG,
    ROOK_VALUE_MG,
    SCALE_FACTOR_DRAW,
    SCALE_FACTOR_NONE,
    SCALE_FACTOR_NORMAL,
    Board,
)
from chesscore.endgame_eval import evaluate_kxk
from chesscore.endgame_scale import scale_kbpsk, scale_kpkp, scale_kpsk, scale_kqkrps
from chesscore.endgames import EndgameFunction, evaluation_for, scaling_for

MIDGAME_LIMIT = 15258
ENDGAME_LIMIT = 3915
PHASE_MIDGAME = 128

TABLE_SIZE = 8192

Score = tuple[int, int]

# Polynomial material imbalance parameters, indexed by
# [bishop pair, pawn, knight, bishop, rook, queen].
_QUADRATIC_OURS: tuple[tuple[Score, ...], ...] = (
    ((1419, 1455),),
    ((101, 28), (37, 39)),
    ((57, 64), (249, 187), (-49, -62)),
    ((0, 0), (118, 137), (10, 27), (0, 0)),
    ((-63, -68), (-5, 3), (100, 81), (132, 118), (-246, -244)),
    ((-210, -211), (37, 14), (147, 141), (161, 105), (-158, -174), (-9, -31)),
)

_QUADRATIC_THEIRS: tuple[tuple[Score, ...], ...] = (
    ((0, 0),),
    ((33, 30), (0, 0)),
    ((46, 18), (106, 84), (0, 0)),
    ((75, 35), (59, 44), (60, 15), (0, 0)),
    ((26, 35), (6, 22), (38, 39), (-12, -2), (0, 0)),
    ((97, 93), (100, 163), (-58, -91), (112, 192), (276, 225), (0, 0)),
)


def _div_trunc(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


def imbalance(us: int, piece_count) -> Score:
    """Second-degree polynomial imbalance of ``us`` against the opponent.

    ``piece_count[color]`` lists, in order, whether the side has the bishop
    pair, then its pawns, knights, bishops, rooks and queens.
    """
    ours = piece_count[us]
    theirs = piece_count[1 - us]
    mg = eg = 0
    for pt1, count in enumerate(ours[:6]):
        if not count:
            continue
        v_mg = v_eg = 0
        for pt2 in range(pt1 + 1):
            o_mg, o_eg = _QUADRATIC_OURS[pt1][pt2]
            t_mg, t_eg = _QUADRATIC_THEIRS[pt1][pt2]
            v_mg += o_mg * ours[pt2] + t_mg * theirs[pt2]
            v_eg += o_eg * ours[pt2] + t_eg * theirs[pt2]
        mg += count * v_mg
        eg += count * v_eg
    return mg, eg


@dataclass
class MaterialEntry:
    """What is known about one material configuration."""

    key: tuple[int, ...]
    game_phase: int = 0
    score: Score = (0, 0)
    eval_func: Optional[EndgameFunction] = None
    eval_func_side: Color = Color.WHITE
    scale_funcs: list = field(default_factory=lambda: [None, None])
    factors: list = field(
        default_factory=lambda: [SCALE_FACTOR_NORMAL, SCALE_FACTOR_NORMAL]
    )

    def specialized_eval_exists(self) -> bool:
        return self.eval_func is not None

    def evaluate(self, board: Board) -> int:
        """Run the specialised evaluation for this material."""
        if self.eval_func is None:
            raise ValueError("no specialised evaluation for this material")
        return self.eval_func(board, self.eval_func_side)

    def scale_factor(self, board: Board, color: int) -> int:
        """Scale factor for ``color``, from its scaling function or the default."""
        sf = SCALE_FACTOR_NONE
        func = self.scale_funcs[color]
        if func is not None:
            sf = func(board, Color(color))
        return sf if sf != SCALE_FACTOR_NONE else self.factors[color]


def _is_kxk(board: Board, us: Color) -> bool:
    return (
        not more_than_one(board.pieces_of(us.opponent))
        and board.non_pawn_material(us) >= ROOK_VALUE_MG
    )


def _is_kbpsk(board: Board, us: Color) -> bool:
    return board.non_pawn_material(us) == BISHOP_VALUE_MG and bool(
        board.pieces_of(us, PieceType.PAWN)
    )


def _is_kqkrps(board: Board, us: Color) -> bool:
    them = us.opponent
    return (
        not board.piece_count(us, PieceType.PAWN)
        and board.non_pawn_material(us) == QUEEN_VALUE_MG
        and board.piece_count(them, PieceType.ROOK) == 1
        and bool(board.pieces_of(them, PieceType.PAWN))
    )


def _piece_counts(board: Board, color: Color) -> list[int]:
    bishops = board.piece_count(color, PieceType.BISHOP)
    return [
        int(bishops > 1),
        board.piece_count(color, PieceType.PAWN),
        board.piece_count(color, PieceType.KNIGHT),
        bishops,
        board.piece_count(color, PieceType.ROOK),
        board.piece_count(color, PieceType.QUEEN),
    ]


def _default_factor(npm_us: int, npm_them: int) -> int:
    if npm_us < ROOK_VALUE_MG:
        return SCALE_FACTOR_DRAW
    return 4 if npm_them <= BISHOP_VALUE_MG else 14


def material_entry(board: Board) -> MaterialEntry:
    """Compute the material entry for the board's current material."""
    key = board.material_key()
    entry = MaterialEntry(key=key)

    npm_w = board.non_pawn_material(WHITE)
    npm_b = board.non_pawn_material(BLACK)
    npm = min(max(npm_w + npm_b, ENDGAME_LIMIT), MIDGAME_LIMIT)
    entry.game_phase = ((npm - ENDGAME_LIMIT) * PHASE_MIDGAME) // (
        MIDGAME_LIMIT - ENDGAME_LIMIT
    )

    special = evaluation_for(key)
    if special is not None:
        entry.eval_func = special.function
        entry.eval_func_side = special.strong_side
        return entry

    for color in Color:
        if _is_kxk(board, color):
            entry.eval_func = evaluate_kxk
            entry.eval_func_side = color
            return entry

    scaling = scaling_for(key)
    if scaling is not None:
        entry.scale_funcs[scaling.strong_side] = scaling.function
        return entry

    # Generic scaling functions; these do not end the analysis.
    for color in Color:
        if _is_kbpsk(board, color):
            entry.scale_funcs[color] = scale_kbpsk
        elif _is_kqkrps(board, color):
            entry.scale_funcs[color] = scale_kqkrps

    pawns = board.pieces(PieceType.PAWN)
    if npm_w + npm_b == 0 and pawns:
        if not board.pieces_of(BLACK, PieceType.PAWN):
            entry.scale_funcs[WHITE] = scale_kpsk
        elif not board.pieces_of(WHITE, PieceType.PAWN):
            entry.scale_funcs[BLACK] = scale_kpsk
        elif board.piece_count(WHITE, PieceType.PAWN) + board.piece_count(
            BLACK, PieceType.PAWN
        ) == 2:
            entry.scale_funcs[WHITE] = scale_kpkp
            entry.scale_funcs[BLACK] = scale_kpkp

    # Without pawns a small material edge rarely wins.
    if not board.piece_count(WHITE, PieceType.PAWN) and npm_w - npm_b <= BISHOP_VALUE_MG:
        entry.factors[WHITE] = _default_factor(npm_w, npm_b)
    if not board.piece_count(BLACK, PieceType.PAWN) and npm_b - npm_w <= BISHOP_VALUE_MG:
        entry.factors[BLACK] = _default_factor(npm_b, npm_w)

    counts = [_piece_counts(board, WHITE), _piece_counts(board, BLACK)]
    w_mg, w_eg = imbalance(WHITE, counts)
    b_mg, b_eg = imbalance(BLACK, counts)
    entry.score = (_div_trunc(w_mg - b_mg, 16), _div_trunc(w_eg - b_eg, 16))
    return entry


class MaterialTable:
    """A fixed-size cache of material entries, one per slot, newest wins."""

    def __init__(self) -> None:
        self._slots: list[Optional[MaterialEntry]] = [None] * TABLE_SIZE

    def probe(self, board: Board) -> MaterialEntry:
        """The entry for the board's material, computing it on a miss."""
        key = board.material_key()
        slot = hash(key) % TABLE_SIZE
        entry = self._slots[slot]
        if entry is None or entry.key != key:
            entry = material_entry(board)
            self._slots[slot] = entry
        return entry