from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from . import minefield
from .difficulty import DifficultyProfile
from .errors import IllegalOperation
from .topology import check_index, neighbors, touching_mine_count


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    LOST = "lost"
    WON = "won"


@dataclass(frozen=True)
class GameState:
    profile: DifficultyProfile
    mines: FrozenSet[int]
    revealed: FrozenSet[int] = field(default_factory=frozenset)
    flagged: FrozenSet[int] = field(default_factory=frozenset)
    outcome: Outcome = Outcome.IN_PROGRESS
    moves_count: int = 0
    rng_seed: int | None = None

    @property
    def is_over(self) -> bool:
        return self.outcome != Outcome.IN_PROGRESS

    def touching(self, idx: int) -> int:
        return touching_mine_count(idx, self.mines, self.profile.columns, self.profile.rows)


def new_game(
    profile: DifficultyProfile,
    rng_seed: int | None = None,
    mines: Optional[Iterable[int]] = None,
) -> GameState:
    if mines is None:
        layout = minefield.generate(profile.tile_count, profile.mine_count, rng_seed)
    else:
        layout = minefield.validate(mines, profile.tile_count, profile.mine_count)
    return GameState(profile=profile, mines=layout, rng_seed=rng_seed)


def is_win(s: GameState) -> bool:
    return len(s.revealed) == s.profile.safe_tile_count


def _result(s: GameState, hit_mine: bool = False, cleared: int = 0) -> Dict[str, Any]:
    return {
        "hit_mine": hit_mine,
        "cleared_cells": cleared,
        "status_after": s.outcome.value,
        "revealed_total": len(s.revealed),
        "flags_total": len(s.flagged),
    }


def _check_playable(s: GameState, idx: int) -> None:
    if s.is_over:
        raise IllegalOperation("game_over")
    check_index(idx, s.profile.columns, s.profile.rows)
    if idx in s.revealed:
        raise IllegalOperation("already_revealed")


def apply_reveal(s: GameState, idx: int) -> Tuple[GameState, Dict[str, Any]]:
    """Reveal ``idx``, cascading through zero-count tiles.

    Raises ``IllegalOperation`` when the game is over or the tile is
    revealed or flagged, ``InvalidTileIndex`` when off the board. On error
    the passed state is untouched.
    """
    _check_playable(s, idx)
    if idx in s.flagged:
        raise IllegalOperation("tile_flagged")
    if idx in s.mines:
        ns = replace(s, revealed=s.revealed | {idx}, outcome=Outcome.LOST, moves_count=s.moves_count + 1)
        return ns, _result(ns, hit_mine=True, cleared=1)

    columns, rows = s.profile.columns, s.profile.rows
    rev = set(s.revealed)
    cleared = 0
    q = deque([idx])
    while q:
        i = q.popleft()
        if i in rev:
            continue
        rev.add(i)
        cleared += 1
        if touching_mine_count(i, s.mines, columns, rows) == 0:
            for n in neighbors(i, columns, rows):
                if n not in rev and n not in s.flagged:
                    q.append(n)
    ns = replace(s, revealed=frozenset(rev), moves_count=s.moves_count + 1)
    if is_win(ns):
        ns = replace(ns, outcome=Outcome.WON)
    return ns, _result(ns, cleared=cleared)


def apply_flag(s: GameState, idx: int) -> Tuple[GameState, Dict[str, Any]]:
    _check_playable(s, idx)
    flags = s.flagged - {idx} if idx in s.flagged else s.flagged | {idx}
    ns = replace(s, flagged=flags, moves_count=s.moves_count + 1)
    return ns, _result(ns)


def apply_reset(
    s: GameState,
    profile: Optional[DifficultyProfile] = None,
    rng_seed: int | None = None,
) -> GameState:
    """Start over, optionally on another difficulty. Nothing carries over."""
    return new_game(profile or s.profile, rng_seed=rng_seed)


def snapshot(s: GameState) -> Dict[str, Any]:
    p = s.profile
    return {
        "status": s.outcome.value,
        "difficulty": p.name,
        "columns": p.columns,
        "rows": p.rows,
        "tile_count": p.tile_count,
        "num_mines": p.mine_count,
        "revealed": sorted(s.revealed),
        "flagged": sorted(s.flagged),
        "touching": {str(i): s.touching(i) for i in sorted(s.revealed) if i not in s.mines},
        "mines": sorted(s.mines) if s.is_over else None,
        "moves_count": s.moves_count,
        "revealed_total": len(s.revealed),
        "flags_total": len(s.flagged),
        "safe_remaining": p.safe_tile_count - len(s.revealed - s.mines),
    }
