"""Specialised evaluation functions for known endgames.

Each function returns a score from the point of view of the side to move.
"""

from __future__ import annotations

from chesscore.bitbase import probe
from chesscore.bitboard import (
    BLACK,
    DARK_SQUARES,
    FILE_B_BB,
    FILE_D_BB,
    FILE_E,
    FILE_E_BB,
    FILE_G_BB,
    LIGHT_SQUARES,
    RANK_1,
    RANK_3,
    RANK_4,
    RANK_7,
    SOUTH,
    SQ_A1,
    WHITE,
    Color,
    PieceType,
    distance,
    file_of,
    forward_file_bb,
    iter_squares,
    lsb,
    make_square,
    opposite_colors,
    pseudo_attacks,
    rank_of,
    relative_rank,
    relative_square,
    sq_bb,
)
from chesscore.board import (
    BISHOP_VALUE_MG,
    KNIGHT_VALUE_MG,
    PAWN_VALUE_EG,
    QUEEN_VALUE_EG,
    QUEEN_VALUE_MG,
    ROOK_VALUE_EG,
    ROOK_VALUE_MG,
    VALUE_DRAW,
    VALUE_KNOWN_WIN,
    VALUE_TB_WIN_IN_MAX_PLY,
    VALUE_ZERO,
    Board,
)

PAWN = PieceType.PAWN
KNIGHT = PieceType.KNIGHT
BISHOP = PieceType.BISHOP
ROOK = PieceType.ROOK
QUEEN = PieceType.QUEEN
KING = PieceType.KING

# Drive a piece towards or away from another piece, indexed by distance.
PUSH_CLOSE = (140, 120, 100, 80, 60, 40, 20, 0)
PUSH_AWAY = (-20, 0, 20, 40, 60, 80, 100, 120)


def _edge_bonus(s: int) -> int:
    f, r = file_of(s), rank_of(s)
    fd, rd = min(f, 7 - f), min(r, 7 - r)
    return 90 - (7 * fd * fd // 2 + 7 * rd * rd // 2)


_PUSH_TO_EDGES = tuple(_edge_bonus(s) for s in range(64))
_PUSH_TO_CORNERS = tuple(420 * abs(7 - rank_of(s) - file_of(s)) for s in range(64))


def push_to_edges(s: int) -> int:
    """Bonus for a defending king on ``s``, larger near the edge."""
    return _PUSH_TO_EDGES[s]


def push_to_corners(s: int) -> int:
    """Bonus for a defending king on ``s``, larger near the a1 and h8 corners."""
    return _PUSH_TO_CORNERS[s]


def _require(board: Board, color: int, npm: int, pawns: int, name: str) -> None:
    if (
        board.non_pawn_material(color) != npm
        or board.piece_count(color, PAWN) != pawns
    ):
        raise ValueError(
            f"{name}: unexpected material for {Color(color).name.lower()}"
        )


def _for_side_to_move(board: Board, strong_side: int, result: int) -> int:
    return result if board.side_to_move == strong_side else -result


def normalize(board: Board, strong_side: int, sq: int) -> int:
    """Map ``sq`` as if the strong side were white with its pawn on files a-d."""
    if board.piece_count(strong_side, PAWN) != 1:
        raise ValueError("normalize needs exactly one pawn for the strong side")
    if file_of(board.square_of(strong_side, PAWN)) >= FILE_E:
        sq ^= 0x07
    if strong_side == BLACK:
        sq ^= 0x38
    return sq


def _lone_king_has_move(board: Board, color: int) -> bool:
    ksq = board.square_of(color, KING)
    enemies = board.pieces_of(Color(color).opponent)
    without_king = board.occupied() ^ sq_bb(ksq)
    own = board.pieces_of(color)
    return any(
        not board.attackers_to(to, without_king) & enemies
        for to in iter_squares(pseudo_attacks(KING, ksq) & ~own)
    )


def evaluate_kxk(board: Board, strong_side: int) -> int:
    """King and plenty of material against a lone king."""
    weak_side = Color(strong_side).opponent
    _require(board, weak_side, VALUE_ZERO, 0, "KXK")

    # A lone king without moves is stalemated.
    if board.side_to_move == weak_side and not _lone_king_has_move(board, weak_side):
        return VALUE_DRAW

    winner = board.square_of(strong_side, KING)
    loser = board.square_of(weak_side, KING)

    result = (
        board.non_pawn_material(strong_side)
        + board.piece_count(strong_side, PAWN) * PAWN_VALUE_EG
        + push_to_edges(loser)
        + PUSH_CLOSE[distance(winner, loser)]
    )

    bishops = board.pieces(BISHOP)
    if (
        board.pieces(QUEEN, ROOK)
        or (bishops and board.pieces(KNIGHT))
        or (bishops & DARK_SQUARES and bishops & LIGHT_SQUARES)
    ):
        result = min(result + VALUE_KNOWN_WIN, VALUE_TB_WIN_IN_MAX_PLY - 1)

    return _for_side_to_move(board, strong_side, result)


def evaluate_kbnk(board: Board, strong_side: int) -> int:
    """Bishop and knight mate: drive the king to a corner of the bishop's colour."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, KNIGHT_VALUE_MG + BISHOP_VALUE_MG, 0, "KBNK")
    _require(board, weak_side, VALUE_ZERO, 0, "KBNK")

    winner = board.square_of(strong_side, KING)
    loser = board.square_of(weak_side, KING)
    bishop_sq = lsb(board.pieces(BISHOP))

    # A light-squared bishop mates on a8/h1: flip to reuse the a1/h8 table.
    if opposite_colors(bishop_sq, SQ_A1):
        winner ^= 0x38
        loser ^= 0x38

    result = (
        VALUE_KNOWN_WIN
        + 3520
        + PUSH_CLOSE[distance(winner, loser)]
        + push_to_corners(loser)
    )
    return _for_side_to_move(board, strong_side, result)


def evaluate_kpk(board: Board, strong_side: int) -> int:
    """King and pawn against king, from the bitbase."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, VALUE_ZERO, 1, "KPK")
    _require(board, weak_side, VALUE_ZERO, 0, "KPK")

    wksq = normalize(board, strong_side, board.square_of(strong_side, KING))
    bksq = normalize(board, strong_side, board.square_of(weak_side, KING))
    psq = normalize(board, strong_side, lsb(board.pieces(PAWN)))

    us = WHITE if board.side_to_move == strong_side else BLACK
    if not probe(wksq, psq, bksq, us):
        return VALUE_DRAW

    result = VALUE_KNOWN_WIN + PAWN_VALUE_EG + rank_of(psq)
    return _for_side_to_move(board, strong_side, result)


def evaluate_krkp(board: Board, strong_side: int) -> int:
    """Rook against pawn; drawish when the pawn is advanced and supported."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, ROOK_VALUE_MG, 0, "KRKP")
    _require(board, weak_side, VALUE_ZERO, 1, "KRKP")

    wksq = relative_square(strong_side, board.square_of(strong_side, KING))
    bksq = relative_square(strong_side, board.square_of(weak_side, KING))
    rsq = relative_square(strong_side, lsb(board.pieces(ROOK)))
    psq = relative_square(strong_side, lsb(board.pieces(PAWN)))

    queening_sq = make_square(file_of(psq), RANK_1)
    weak_to_move = int(board.side_to_move == weak_side)
    strong_to_move = 1 - weak_to_move

    if forward_file_bb(WHITE, wksq) & sq_bb(psq):
        result = ROOK_VALUE_EG - distance(wksq, psq)
    elif distance(bksq, psq) >= 3 + weak_to_move and distance(bksq, rsq) >= 3:
        result = ROOK_VALUE_EG - distance(wksq, psq)
    elif (
        rank_of(bksq) <= RANK_3
        and distance(bksq, psq) == 1
        and rank_of(wksq) >= RANK_4
        and distance(wksq, psq) > 2 + strong_to_move
    ):
        result = 80 - 8 * distance(wksq, psq)
    else:
        result = 200 - 8 * (
            distance(wksq, psq + SOUTH)
            - distance(bksq, psq + SOUTH)
            - distance(psq, queening_sq)
        )

    return _for_side_to_move(board, strong_side, result)


def evaluate_krkb(board: Board, strong_side: int) -> int:
    """Rook against bishop: drawish, a little better with the king near the edge."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, ROOK_VALUE_MG, 0, "KRKB")
    _require(board, weak_side, BISHOP_VALUE_MG, 0, "KRKB")

    result = push_to_edges(board.square_of(weak_side, KING))
    return _for_side_to_move(board, strong_side, result)


def evaluate_krkn(board: Board, strong_side: int) -> int:
    """Rook against knight: better when the defending king and knight are apart."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, ROOK_VALUE_MG, 0, "KRKN")
    _require(board, weak_side, KNIGHT_VALUE_MG, 0, "KRKN")

    bksq = board.square_of(weak_side, KING)
    bnsq = lsb(board.pieces(KNIGHT))
    result = push_to_edges(bksq) + PUSH_AWAY[distance(bksq, bnsq)]
    return _for_side_to_move(board, strong_side, result)


def evaluate_kqkp(board: Board, strong_side: int) -> int:
    """Queen against pawn, with the seventh-rank rook and bishop pawn draws."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, QUEEN_VALUE_MG, 0, "KQKP")
    _require(board, weak_side, VALUE_ZERO, 1, "KQKP")

    winner = board.square_of(strong_side, KING)
    loser = board.square_of(weak_side, KING)
    pawn_sq = lsb(board.pieces(PAWN))

    result = PUSH_CLOSE[distance(winner, loser)]

    if (
        relative_rank(weak_side, pawn_sq) != RANK_7
        or distance(loser, pawn_sq) != 1
        or (FILE_B_BB | FILE_D_BB | FILE_E_BB | FILE_G_BB) & sq_bb(pawn_sq)
    ):
        result += QUEEN_VALUE_EG - PAWN_VALUE_EG

    return _for_side_to_move(board, strong_side, result)


def evaluate_kqkr(board: Board, strong_side: int) -> int:
    """Queen against rook: push the king to the edge and bring the kings together."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, QUEEN_VALUE_MG, 0, "KQKR")
    _require(board, weak_side, ROOK_VALUE_MG, 0, "KQKR")

    winner = board.square_of(strong_side, KING)
    loser = board.square_of(weak_side, KING)

    result = (
        QUEEN_VALUE_EG
        - ROOK_VALUE_EG
        + push_to_edges(loser)
        + PUSH_CLOSE[distance(winner, loser)]
    )
    return _for_side_to_move(board, strong_side, result)


def evaluate_knnkp(board: Board, strong_side: int) -> int:
    """Two knights against pawn: push the defending king to the edge."""
    weak_side = Color(strong_side).opponent
    _require(board, strong_side, 2 * KNIGHT_VALUE_MG, 0, "KNNKP")
    _require(board, weak_side, VALUE_ZERO, 1, "KNNKP")

    result = (
        PAWN_VALUE_EG
        + 2 * push_to_edges(board.square_of(weak_side, KING))
        - 10 * relative_rank(weak_side, board.square_of(weak_side, PAWN))
    )
    return _for_side_to_move(board, strong_side, result)


def evaluate_knnk(board: Board, strong_side: int) -> int:
    """Two knights against a lone king: a draw."""
    return VALUE_DRAW