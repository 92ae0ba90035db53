import pytest

from chesscore import bitboard as bb
from chesscore.bitboard import BLACK, WHITE, Color, PieceType


def sq(name):
    return bb.make_square(ord(name[0]) - ord("a"), int(name[1]) - 1)


def test_square_round_trip():
    for s in range(64):
        assert bb.make_square(bb.file_of(s), bb.rank_of(s)) == s


def test_relative_square_and_rank():
    for s in range(64):
        assert bb.relative_square(BLACK, bb.relative_square(BLACK, s)) == s
        assert bb.relative_square(WHITE, s) == s
        assert bb.relative_rank(WHITE, s) == bb.rank_of(s)
    assert bb.relative_square(BLACK, sq("a1")) == sq("a8")
    assert bb.relative_rank(BLACK, sq("e2")) == bb.RANK_7


def test_color_opponent():
    assert WHITE.opponent is Color.BLACK
    assert BLACK.opponent is Color.WHITE
    assert bb.pawn_push(WHITE.opponent) == bb.SOUTH
    assert bb.pawn_push(BLACK.opponent) == bb.NORTH
    assert bb.relative_square(WHITE.opponent, sq("a1")) == sq("a8")


def test_pawn_push():
    assert bb.pawn_push(WHITE) == bb.NORTH
    assert bb.pawn_push(BLACK) == bb.SOUTH


def test_file_and_rank_bb_match_source_constants():
    assert bb.file_bb(0) == 0x0101010101010101
    assert bb.rank_bb(0) == 0xFF
    assert bb.file_bb(7) == bb.FILE_H_BB
    assert bb.rank_bb(7) == bb.RANK_8_BB


def test_files_and_ranks_partition_board():
    files = 0
    ranks = 0
    for i in range(8):
        assert files & bb.file_bb(i) == 0
        assert ranks & bb.rank_bb(i) == 0
        files |= bb.file_bb(i)
        ranks |= bb.rank_bb(i)
    assert files == bb.ALL_SQUARES
    assert ranks == bb.ALL_SQUARES


def test_sq_bb_lsb_msb():
    for s in range(64):
        assert bb.lsb(bb.sq_bb(s)) == s
        assert bb.msb(bb.sq_bb(s)) == s
        assert bb.popcount(bb.sq_bb(s)) == 1
    b = bb.sq_bb(sq("c3")) | bb.sq_bb(sq("f6"))
    assert bb.lsb(b) == sq("c3")
    assert bb.msb(b) == sq("f6")


@pytest.mark.parametrize("func", [bb.lsb, bb.msb])
def test_scan_of_empty_raises(func):
    with pytest.raises(ValueError):
        func(0)


def test_iter_squares_reconstructs():
    b = bb.DARK_SQUARES
    squares = list(bb.iter_squares(b))
    assert squares == sorted(squares)
    assert len(squares) == bb.popcount(b)
    total = 0
    for s in squares:
        total |= bb.sq_bb(s)
    assert total == b
    assert list(bb.iter_squares(0)) == []


def test_more_than_one():
    assert not bb.more_than_one(0)
    assert not bb.more_than_one(bb.sq_bb(sq("d4")))
    assert bb.more_than_one(bb.sq_bb(sq("d4")) | bb.sq_bb(sq("a1")))


def test_shift_edges_and_ranks():
    assert bb.shift(bb.EAST, bb.file_bb(7)) == 0
    assert bb.shift(bb.WEST, bb.file_bb(0)) == 0
    assert bb.shift(bb.NORTH, bb.rank_bb(7)) == 0
    assert bb.shift(bb.SOUTH, bb.rank_bb(0)) == 0
    for r in range(7):
        assert bb.shift(bb.NORTH, bb.rank_bb(r)) == bb.rank_bb(r + 1)
        assert bb.shift(bb.SOUTH, bb.rank_bb(r + 1)) == bb.rank_bb(r)
    assert bb.shift(bb.NORTH + bb.NORTH, bb.rank_bb(1)) == bb.rank_bb(3)
    assert bb.shift(bb.NORTH_EAST, bb.sq_bb(sq("d4"))) == bb.sq_bb(sq("e5"))
    assert bb.shift(bb.SOUTH_WEST, bb.sq_bb(sq("d4"))) == bb.sq_bb(sq("c3"))
    assert bb.shift(3, bb.ALL_SQUARES) == 0


def test_pawn_attacks_consistent_with_bitboard_form():
    for c in (WHITE, BLACK):
        for s in range(64):
            assert bb.pawn_attacks(c, s) == bb.pawn_attacks_bb(bb.sq_bb(s), c)
    assert bb.pawn_attacks(WHITE, sq("e4")) == bb.sq_bb(sq("d5")) | bb.sq_bb(sq("f5"))
    assert bb.pawn_attacks(BLACK, sq("a5")) == bb.sq_bb(sq("b4"))


def test_pawn_double_attacks():
    assert bb.pawn_double_attacks_bb(bb.sq_bb(sq("e2")), WHITE) == 0
    pawns = bb.sq_bb(sq("c2")) | bb.sq_bb(sq("e2"))
    assert bb.pawn_double_attacks_bb(pawns, WHITE) == bb.sq_bb(sq("d3"))
    pawns = bb.sq_bb(sq("c7")) | bb.sq_bb(sq("e7"))
    assert bb.pawn_double_attacks_bb(pawns, BLACK) == bb.sq_bb(sq("d6"))


def test_adjacent_files():
    assert bb.adjacent_files_bb(0) == bb.file_bb(1)
    assert bb.adjacent_files_bb(7) == bb.file_bb(6)
    assert bb.adjacent_files_bb(3) == bb.file_bb(2) | bb.file_bb(4)


def test_between_worked_example():
    expected = bb.sq_bb(sq("d5")) | bb.sq_bb(sq("e6")) | bb.sq_bb(sq("f7"))
    assert bb.between_bb(sq("c4"), sq("f7")) == expected


def test_between_not_aligned_is_target_only():
    assert bb.between_bb(sq("a1"), sq("b3")) == bb.sq_bb(sq("b3"))
    assert bb.between_bb(sq("e4"), sq("e4")) == bb.sq_bb(sq("e4"))


def test_between_is_within_line():
    for s1 in range(64):
        for s2 in range(64):
            line = bb.line_bb(s1, s2)
            if line:
                assert bb.between_bb(s1, s2) & ~line == 0


def test_line_bb():
    diagonal = 0
    for i in range(8):
        diagonal |= bb.sq_bb(bb.make_square(i, i))
    assert bb.line_bb(sq("a1"), sq("h8")) == diagonal
    assert bb.line_bb(sq("c3"), sq("f6")) == diagonal
    assert bb.line_bb(sq("a1"), sq("b3")) == 0
    assert bb.line_bb(sq("e2"), sq("e7")) == bb.file_bb(4)


def test_aligned():
    assert bb.aligned(sq("a1"), sq("c3"), sq("h8"))
    assert not bb.aligned(sq("a1"), sq("c3"), sq("h7"))
    assert bb.aligned(sq("b2"), sq("b7"), sq("b1"))


def test_forward_ranks_worked_example():
    assert bb.forward_ranks_bb(BLACK, bb.RANK_3) == bb.rank_bb(0) | bb.rank_bb(1)


def test_forward_ranks_partition():
    for r in range(8):
        total = bb.forward_ranks_bb(WHITE, r) | bb.forward_ranks_bb(BLACK, r) | bb.rank_bb(r)
        assert total == bb.ALL_SQUARES
        assert bb.forward_ranks_bb(WHITE, r) & bb.forward_ranks_bb(BLACK, r) == 0


def test_spans():
    e2 = sq("e2")
    assert bb.forward_file_bb(WHITE, e2) == bb.file_bb(4) & ~(bb.rank_bb(0) | bb.rank_bb(1))
    for c in (WHITE, BLACK):
        for s in range(64):
            assert bb.passed_pawn_span(c, s) == bb.forward_file_bb(c, s) | bb.pawn_attack_span(c, s)
            assert bb.pawn_attack_span(c, s) & bb.file_bb(bb.file_of(s)) == 0


def test_distance_symmetry_and_rings():
    for s1 in range(64):
        union = bb.sq_bb(s1)
        for d in range(8):
            ring = bb.distance_ring(s1, d)
            assert union & ring == 0
            union |= ring
            for s2 in bb.iter_squares(ring):
                assert bb.distance(s1, s2) == d
                assert bb.distance(s2, s1) == d
        assert union == bb.ALL_SQUARES
        assert bb.distance_ring(s1, 0) == 0


def test_file_and_rank_distance():
    assert bb.distance_file(sq("a1"), sq("h8")) == bb.FILE_H
    assert bb.distance_rank(sq("a1"), sq("h8")) == bb.RANK_8
    assert bb.distance_file(sq("c2"), sq("c7")) == 0
    assert bb.distance(sq("c2"), sq("c7")) == bb.distance_rank(sq("c2"), sq("c7"))


def test_pseudo_attacks_from_corner():
    assert bb.pseudo_attacks(PieceType.KNIGHT, sq("a1")) == bb.sq_bb(sq("b3")) | bb.sq_bb(sq("c2"))
    assert bb.pseudo_attacks(PieceType.KING, sq("a1")) == (
        bb.sq_bb(sq("a2")) | bb.sq_bb(sq("b1")) | bb.sq_bb(sq("b2"))
    )
    assert bb.pseudo_attacks(PieceType.ROOK, sq("a1")) == (bb.file_bb(0) | bb.rank_bb(0)) & ~bb.sq_bb(sq("a1"))
    assert bb.pseudo_attacks(PieceType.PAWN, sq("e4")) == 0


def test_pseudo_queen_is_union():
    for s in range(64):
        assert bb.pseudo_attacks(PieceType.QUEEN, s) == (
            bb.pseudo_attacks(PieceType.BISHOP, s) | bb.pseudo_attacks(PieceType.ROOK, s)
        )
        assert bb.pseudo_attacks(PieceType.KING, s) == bb.distance_ring(s, 1)


def test_sliding_attack_stops_at_blocker():
    occupied = bb.sq_bb(sq("a3"))
    attack = bb.sliding_attack(bb.ROOK_DIRECTIONS, sq("a1"), occupied)
    expected = (
        bb.sq_bb(sq("a2"))
        | bb.sq_bb(sq("a3"))
        | (bb.rank_bb(0) & ~bb.sq_bb(sq("a1")))
    )
    assert attack == expected
    assert attack & bb.sq_bb(sq("a4")) == 0


def test_opposite_colors_matches_dark_squares():
    for s1 in range(64):
        for s2 in range(64):
            same = bool(bb.DARK_SQUARES & bb.sq_bb(s1)) == bool(bb.DARK_SQUARES & bb.sq_bb(s2))
            assert bb.opposite_colors(s1, s2) == (not same)


def test_frontmost_backmost():
    b = bb.sq_bb(sq("b2")) | bb.sq_bb(sq("g6"))
    assert bb.frontmost_sq(WHITE, b) == sq("g6")
    assert bb.frontmost_sq(BLACK, b) == sq("b2")
    assert bb.backmost_sq(WHITE, b) == sq("b2")
    assert bb.backmost_sq(BLACK, b) == sq("g6")


def test_pretty_layout():
    text = bb.pretty(bb.sq_bb(sq("a1")) | bb.sq_bb(sq("h8")))
    lines = text.splitlines()
    assert lines[0] == "+---+---+---+---+---+---+---+---+"
    assert lines[-1] == "  a   b   c   d   e   f   g   h"
    assert lines[1].endswith("| X | 8")
    assert lines[15].startswith("| X |   ")
    assert text.count("X") == 2
    assert bb.pretty(0).count("X") == 0