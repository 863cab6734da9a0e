from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .errors import InvalidProfile


class Difficulty(str, Enum):
    EASY = "easy"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyProfile:
    name: str
    columns: int
    rows: int
    mine_count: int

    def __post_init__(self) -> None:
        if self.columns < 2 or self.rows < 2:
            raise InvalidProfile("board_too_small")
        if not (0 < self.mine_count < self.columns * self.rows):
            raise InvalidProfile("invalid_mine_count")

    @property
    def tile_count(self) -> int:
        return self.columns * self.rows

    @property
    def safe_tile_count(self) -> int:
        return self.tile_count - self.mine_count


PRESETS: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(Difficulty.EASY.value, columns=7, rows=10, mine_count=8),
    Difficulty.HARD: DifficultyProfile(Difficulty.HARD.value, columns=18, rows=27, mine_count=99),
}


def get_profile(name: str | Difficulty) -> DifficultyProfile:
    if isinstance(name, Difficulty):
        return PRESETS[name]
    try:
        return PRESETS[Difficulty(str(name).strip().lower())]
    except ValueError:
        raise InvalidProfile("unknown_difficulty") from None


def custom_profile(columns: int, rows: int, mine_count: int) -> DifficultyProfile:
    return DifficultyProfile("custom", columns=columns, rows=rows, mine_count=mine_count)
