import pytest

from chesscore.bitboard import BLACK, WHITE
from chesscore.board import Board
from chesscore.endgame_eval import evaluate_kbnk, evaluate_kpk, evaluate_kqkr
from chesscore.endgame_scale import scale_kbpkb, scale_krpkr
from chesscore.endgames import (
    EVALUATION_CODES,
    SCALING_CODES,
    code_key,
    evaluation_for,
    scaling_for,
)


def test_code_key_matches_board_material_key():
    board = Board.from_fen("k7/8/8/8/8/8/P7/K7 w - - 0 1")
    assert code_key("KPk", WHITE) == board.material_key()


def test_code_key_for_black_matches_mirrored_board():
    board = Board.from_fen("k7/p7/8/8/8/8/8/K7 b - - 0 1")
    assert code_key("KPk", BLACK) == board.material_key()


def test_code_key_rejects_unknown_piece():
    with pytest.raises(ValueError):
        code_key("KXk", WHITE)


def test_evaluation_for_kpk():
    board = Board.from_fen("k7/8/8/8/8/8/P7/K7 w - - 0 1")
    assert evaluation_for(board.material_key()) == (evaluate_kpk, WHITE)


@pytest.mark.parametrize(
    "code, function",
    [("KBNk", evaluate_kbnk), ("KQkr", evaluate_kqkr), ("KPk", evaluate_kpk)],
)
@pytest.mark.parametrize("color", [WHITE, BLACK])
def test_evaluation_for_each_side(code, function, color):
    found = evaluation_for(code_key(code, color))
    assert found.function is function
    assert found.strong_side == color


@pytest.mark.parametrize(
    "code, function", [("KRPkr", scale_krpkr), ("KBPkb", scale_kbpkb)]
)
@pytest.mark.parametrize("color", [WHITE, BLACK])
def test_scaling_for_each_side(code, function, color):
    found = scaling_for(code_key(code, color))
    assert found == (function, color)


def test_start_position_has_no_specialised_function():
    board = Board.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1")
    assert evaluation_for(board.material_key()) is None
    assert scaling_for(board.material_key()) is None


def test_evaluation_and_scaling_keys_are_disjoint():
    for code, _ in SCALING_CODES:
        for color in (WHITE, BLACK):
            assert evaluation_for(code_key(code, color)) is None
    for code, _ in EVALUATION_CODES:
        for color in (WHITE, BLACK):
            assert scaling_for(code_key(code, color)) is None


def test_every_code_round_trips():
    for code, function in EVALUATION_CODES:
        assert evaluation_for(code_key(code, WHITE)).function is function
    for code, function in SCALING_CODES:
        assert scaling_for(code_key(code, BLACK)).function is function