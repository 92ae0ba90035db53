import pytest

from chesscore.bitboard import BLACK, WHITE
from chesscore.board import SCALE_FACTOR_DRAW, SCALE_FACTOR_NORMAL, Board
from chesscore.endgame_eval import evaluate_krkb, evaluate_kxk
from chesscore.endgame_scale import (
    scale_kbpsk,
    scale_kpkp,
    scale_kpsk,
    scale_krpkr,
)
from chesscore.material import (
    PHASE_MIDGAME,
    MaterialTable,
    imbalance,
    material_entry,
)

START = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def test_imbalance_of_empty_material_is_zero():
    counts = [[0] * 6, [0] * 6]
    assert imbalance(WHITE, counts) == (0, 0)


def test_imbalance_single_queen_uses_table():
    counts = [[0, 0, 0, 0, 0, 1], [0] * 6]
    assert imbalance(WHITE, counts) == (-9, -31)


def test_start_position_is_balanced_midgame():
    entry = material_entry(Board.from_fen(START))
    assert entry.score == (0, 0)
    assert entry.game_phase == PHASE_MIDGAME
    assert not entry.specialized_eval_exists()


def test_mirrored_material_negates_score():
    a = material_entry(Board.from_fen("4k3/8/8/8/8/8/8/RN2K3 w - - 0 1"))
    b = material_entry(Board.from_fen("rn2k3/8/8/8/8/8/8/4K3 w - - 0 1"))
    assert a.score == (-b.score[0], -b.score[1])


def test_bare_kings_are_drawn_endgame():
    entry = material_entry(Board.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1"))
    assert entry.game_phase == 0
    assert entry.factors == [SCALE_FACTOR_DRAW, SCALE_FACTOR_DRAW]


def test_specialised_evaluation_found_by_key():
    board = Board.from_fen("4k3/8/8/8/8/8/3b4/R3K3 w - - 0 1")
    entry = material_entry(board)
    assert entry.eval_func is evaluate_krkb
    assert entry.eval_func_side == WHITE
    assert entry.evaluate(board) == evaluate_krkb(board, WHITE)


def test_kxk_detected_for_black():
    board = Board.from_fen("4k3/8/8/8/8/8/8/q3K3 b - - 0 1")
    entry = material_entry(board)
    assert entry.eval_func is evaluate_kxk
    assert entry.eval_func_side == BLACK


def test_evaluate_without_function_raises():
    board = Board.from_fen(START)
    with pytest.raises(ValueError):
        material_entry(board).evaluate(board)


def test_specific_scaling_function_by_key():
    board = Board.from_fen("4k3/r7/8/8/8/8/P7/R3K3 w - - 0 1")
    entry = material_entry(board)
    assert entry.scale_funcs[WHITE] is scale_krpkr
    assert entry.scale_funcs[BLACK] is None


def test_generic_kbpsk_scaling_and_fallback():
    drawn = Board.from_fen("1k6/8/8/8/8/8/P7/B6K w - - 0 1")
    entry = material_entry(drawn)
    assert entry.scale_funcs[WHITE] is scale_kbpsk
    assert entry.scale_factor(drawn, WHITE) == SCALE_FACTOR_DRAW
    assert entry.scale_factor(drawn, BLACK) == SCALE_FACTOR_DRAW

    far = Board.from_fen("7k/8/8/8/8/8/P7/B6K w - - 0 1")
    assert material_entry(far).scale_factor(far, WHITE) == SCALE_FACTOR_NORMAL


def test_pawns_only_scaling_functions():
    kpsk = material_entry(Board.from_fen("k7/8/8/8/8/P7/P7/7K w - - 0 1"))
    assert kpsk.scale_funcs == [scale_kpsk, None]

    kpkp = material_entry(Board.from_fen("8/8/4k3/3p4/3P4/8/8/4K3 w - - 0 1"))
    assert kpkp.scale_funcs == [scale_kpkp, scale_kpkp]


def test_table_caches_entries_by_material():
    table = MaterialTable()
    start = Board.from_fen(START)
    first = table.probe(start)
    assert table.probe(start) is first

    other = Board.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    entry = table.probe(other)
    assert entry.key == other.material_key()
    assert entry.key != first.key