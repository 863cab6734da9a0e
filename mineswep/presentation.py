from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .difficulty import Difficulty, DifficultyProfile, get_profile
from .game_engine import GameState
from .topology import index, mine_counts


@dataclass
class PresentationState:
    """UI-side selections kept outside the engine: chosen difficulty and the settings popover."""

    difficulty: Difficulty = Difficulty.EASY
    settings_open: bool = False

    def open_settings(self) -> None:
        self.settings_open = True

    def close_settings(self) -> None:
        self.settings_open = False

    def select_difficulty(self, name: str | Difficulty) -> DifficultyProfile:
        profile = get_profile(name)
        self.difficulty = Difficulty(profile.name)
        self.settings_open = False
        return profile

    @property
    def profile(self) -> DifficultyProfile:
        return get_profile(self.difficulty)


def to_client_view(s: GameState) -> List[List[str]]:
    columns, rows = s.profile.columns, s.profile.rows
    counts = mine_counts(s.mines, columns, rows)
    board: List[List[str]] = []
    for r in range(rows):
        row: List[str] = []
        for c in range(columns):
            i = index(r, c, columns)
            if i in s.mines and (s.is_over or i in s.revealed):
                cell = "M"
            elif i in s.revealed:
                cell = str(counts[i])
            else:
                cell = "F" if i in s.flagged else "H"
            row.append(cell)
        board.append(row)
    return board
