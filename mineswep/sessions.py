from __future__ import annotations

import threading
import uuid
from typing import Any, Dict, Iterable, Optional, Tuple

from .difficulty import DifficultyProfile
from .game_engine import (
    GameState,
    new_game as engine_new_game,
    apply_reveal as engine_reveal,
    apply_flag as engine_flag,
    apply_reset as engine_reset,
    snapshot,
)
from .presentation import to_client_view


class InMemorySessions:
    """Game handles mapped to engine states, kept for the life of the process.

    One lock serializes every call so a threaded host can share the store.
    At most ``max_games`` handles are kept; when full, the oldest finished
    game is evicted first, then the oldest game overall.
    """

    def __init__(self, rng_seed: Optional[int] = None, max_games: int = 1000) -> None:
        if max_games < 1:
            raise ValueError("invalid_max_games")
        self.games: Dict[str, GameState] = {}
        self.rng_seed = rng_seed
        self.max_games = max_games
        self._lock = threading.Lock()

    def _get(self, game_id: str) -> GameState:
        game = self.games.get(game_id)
        if game is None:
            raise KeyError("game_not_found")
        return game

    def _evict(self) -> None:
        while len(self.games) >= self.max_games:
            # dicts keep insertion order, so the first match is the oldest
            victim = next((gid for gid, s in self.games.items() if s.is_over), None)
            if victim is None:
                victim = next(iter(self.games))
            del self.games[victim]

    def new_game(
        self,
        profile: DifficultyProfile,
        rng_seed: Optional[int] = None,
        mines: Optional[Iterable[int]] = None,
    ) -> Tuple[str, GameState]:
        seed = self.rng_seed if rng_seed is None else rng_seed
        state = engine_new_game(profile, rng_seed=seed, mines=mines)
        game_id = uuid.uuid4().hex
        with self._lock:
            self._evict()
            self.games[game_id] = state
        return game_id, state

    def get_state(self, game_id: str) -> GameState:
        with self._lock:
            return self._get(game_id)

    def reveal(self, game_id: str, idx: int) -> Tuple[GameState, Dict[str, Any]]:
        with self._lock:
            new_state, result = engine_reveal(self._get(game_id), idx)
            self.games[game_id] = new_state
        return new_state, result

    def toggle_flag(self, game_id: str, idx: int) -> Tuple[GameState, Dict[str, Any]]:
        with self._lock:
            new_state, result = engine_flag(self._get(game_id), idx)
            self.games[game_id] = new_state
        return new_state, result

    def reset(
        self,
        game_id: str,
        profile: Optional[DifficultyProfile] = None,
        rng_seed: Optional[int] = None,
    ) -> GameState:
        seed = self.rng_seed if rng_seed is None else rng_seed
        with self._lock:
            new_state = engine_reset(self._get(game_id), profile=profile, rng_seed=seed)
            self.games[game_id] = new_state
        return new_state

    def discard(self, game_id: str) -> None:
        with self._lock:
            self._get(game_id)
            del self.games[game_id]

    def to_client(self, state: GameState) -> Dict[str, Any]:
        return snapshot(state) | {"board": to_client_view(state)}
