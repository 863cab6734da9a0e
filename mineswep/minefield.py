from __future__ import annotations

import random
from typing import FrozenSet, Iterable

from .errors import MineFieldGenerationFailure


def _check_counts(tile_count: int, mine_count: int) -> None:
    if tile_count <= 0:
        raise MineFieldGenerationFailure("invalid_tile_count")
    if not (0 < mine_count < tile_count):
        raise MineFieldGenerationFailure("invalid_mine_count")


def generate(tile_count: int, mine_count: int, rng_seed: int | None = None) -> FrozenSet[int]:
    """Pick ``mine_count`` distinct tiles out of ``range(tile_count)`` uniformly."""
    _check_counts(tile_count, mine_count)
    rng = random.Random(rng_seed)
    mines = frozenset(rng.sample(range(tile_count), mine_count))
    if len(mines) != mine_count:
        raise MineFieldGenerationFailure("mine_count_not_reached")
    return mines


def validate(mines: Iterable[int], tile_count: int, mine_count: int) -> FrozenSet[int]:
    _check_counts(tile_count, mine_count)
    layout = list(mines)
    result = frozenset(layout)
    if len(result) != len(layout):
        raise MineFieldGenerationFailure("duplicate_mines")
    if len(result) != mine_count:
        raise MineFieldGenerationFailure("mine_count_mismatch")
    if any(not (0 <= m < tile_count) for m in result):
        raise MineFieldGenerationFailure("mine_out_of_bounds")
    return result
