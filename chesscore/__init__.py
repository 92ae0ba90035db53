"""Bitboards, sliding attacks, a KPK bitbase, a minimal board, endgame evaluation and scaling, and material tables for chess."""

__version__ = "0.1.0"

__all__ = [
    "bitboard",
    "sliders",
    "bitbase",
    "board",
    "endgame_eval",
    "endgame_scale",
    "endgames",
    "material",
]