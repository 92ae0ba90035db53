# chesscore

Chess evaluation building blocks in pure Python, with no runtime
dependencies.

Squares are integers from 0 (a1) to 63 (h8), counted file first. A
bitboard is a Python integer whose bit *n* stands for square *n*. Scores
are in internal units: pawn = 126 in the middlegame and 208 in the
endgame.

## Modules

- **`chesscore.bitboard`**: `Color` and `PieceType` enums, square helpers
  (`file_of`, `rank_of`, `make_square`, `relative_square`,
  `relative_rank`, `opposite_colors`, `pawn_push`), and masks
  (`file_bb`, `rank_bb`, `adjacent_files_bb`, `forward_ranks_bb`,
  `forward_file_bb`, `pawn_attack_span`, `passed_pawn_span`,
  `between_bb`, `line_bb`, `aligned`, `distance_ring`). It also has
  distances (`distance`, `distance_file`, `distance_rank`), `shift`,
  `pawn_attacks_bb`, `pawn_double_attacks_bb`, `pseudo_attacks`,
  `pawn_attacks`, `sliding_attack`, bit helpers (`popcount`, `lsb`, `msb`,
  `iter_squares`, `frontmost_sq`, `backmost_sq`, `more_than_one`), and
  `pretty`, which returns an ASCII drawing of a bitboard.
- **`chesscore.sliders`**: `bishop_attacks`, `rook_attacks`,
  `queen_attacks` and `attacks_bb(pt, s, occupied)`. These read
  per-square tables indexed with `pext`, and each square's table is built
  on first use. `attacks_bb` raises `ValueError` for pawns.
- **`chesscore.bitbase`**: the king and pawn against king bitbase.
  `KPKBitbase().probe(wksq, wpsq, bksq, us)` returns True when white wins.
  The pawn must stand on files a–d and ranks 2–7; anything else raises
  `ValueError`. The module-level `probe` builds one shared table on first
  call. Building the table takes a while in pure Python.
- **`chesscore.board`**: `Board`, which holds piece placement and the side
  to move. `Board.from_fen` reads only the first two FEN fields. The
  class offers `piece_on`, `occupied`, `pieces`, `pieces_of`,
  `square_of`, `piece_count`, `non_pawn_material`, `material_key` and
  `attackers_to`. The module also holds the piece values, value
  constants and scale-factor constants.
- **`chesscore.endgame_eval`**: specialised evaluations. These are
  `evaluate_kxk`, `evaluate_kbnk`, `evaluate_kpk`, `evaluate_krkp`,
  `evaluate_krkb`, `evaluate_krkn`, `evaluate_kqkp`, `evaluate_kqkr`,
  `evaluate_knnkp` and `evaluate_knnk`, plus the helpers
  `push_to_edges`, `push_to_corners` and `normalize`. Each evaluation
  takes `(board, strong_side)` and returns a score from the side to
  move's point of view. Each raises `ValueError` when the material does
  not fit.
- **`chesscore.endgame_scale`**: scale factors for the strong side's
  endgame score. These are `scale_kbpsk`, `scale_kqkrps`, `scale_krpkr`,
  `scale_krpkb`, `scale_krppkrp`, `scale_kpsk`, `scale_kbpkb`,
  `scale_kbppkb`, `scale_kbpkn` and `scale_kpkp`. Each returns
  `SCALE_FACTOR_DRAW`, `SCALE_FACTOR_NONE` or a specific factor.
- **`chesscore.endgames`**: `code_key(code, color)` turns a code such as
  `"KRPkr"` into a material key. `evaluation_for(key)` and
  `scaling_for(key)` return an `Endgame` (function and strong side), or
  `None`.
- **`chesscore.material`**: `imbalance(us, piece_count)` is the quadratic
  material imbalance. `material_entry(board)` computes a `MaterialEntry`,
  which holds the game phase, the imbalance score, the specialised
  evaluation or scaling functions, and default scale factors.
  `MaterialEntry` has `specialized_eval_exists`, `evaluate` and
  `scale_factor`. `MaterialTable().probe(board)` caches entries in 8192
  slots.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from chesscore.board import Board
from chesscore.bitboard import Color, popcount
from chesscore.sliders import queen_attacks
from chesscore.material import MaterialTable

board = Board.from_fen("8/8/8/8/8/4k3/4P3/4K3 w - - 0 1")

# Squares a queen on d4 would attack on this board
print(popcount(queen_attacks(27, board.occupied())))

table = MaterialTable()
entry = table.probe(board)
if entry.specialized_eval_exists():
    print(entry.evaluate(board))   # KPK: decided by the bitbase
print(entry.scale_factor(board, Color.WHITE))
```

## What it does not do

This is a library of evaluation pieces, not a playing program. It has
no move generation, no search and no general positional evaluation, and
it provides no command or engine protocol. `Board` does not track
castling rights, en passant, move counters or move history, and it
cannot make moves.