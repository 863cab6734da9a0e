import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from dotenv import load_dotenv
import uvicorn

from mineswep.difficulty import PRESETS, custom_profile, get_profile
from mineswep.errors import IllegalOperation, InvalidProfile, MineFieldGenerationFailure
from mineswep.sessions import InMemorySessions

load_dotenv(dotenv_path=Path('.env.local'))

API_BASE = "/api/mineswep"

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class Settings:
    default_difficulty: str = "easy"
    rng_seed: Optional[int] = None
    cors_origins: Tuple[str, ...] = ("*",)
    max_games: int = 1000
    host: str = "127.0.0.1"
    port: int = 8000


def _int_env(name: str, code: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{code}: {name}={raw!r} is not an integer") from None


def check_settings(settings: Settings) -> Settings:
    try:
        get_profile(settings.default_difficulty)
    except InvalidProfile:
        raise ValueError(
            f"invalid_default_difficulty: MINESWEP_DEFAULT_DIFFICULTY={settings.default_difficulty!r}"
        ) from None
    if settings.max_games < 1:
        raise ValueError(f"invalid_max_games: MINESWEP_MAX_GAMES={settings.max_games}")
    return settings


def load_settings() -> Settings:
    origins = os.getenv("MINESWEP_CORS_ORIGINS", "*")
    max_games = _int_env("MINESWEP_MAX_GAMES", "invalid_max_games")
    port = _int_env("MINESWEP_PORT", "invalid_port")
    return check_settings(Settings(
        default_difficulty=os.getenv("MINESWEP_DEFAULT_DIFFICULTY", "easy").strip().lower(),
        rng_seed=_int_env("MINESWEP_RNG_SEED", "invalid_rng_seed"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        max_games=1000 if max_games is None else max_games,
        host=os.getenv("MINESWEP_HOST", "127.0.0.1").strip(),
        port=8000 if port is None else port,
    ))


class NewGameBody(BaseModel):
    difficulty: Optional[str] = None
    columns: Optional[int] = Field(None, ge=2, le=60)
    rows: Optional[int] = Field(None, ge=2, le=60)
    mine_count: Optional[int] = Field(None, ge=1)
    rng_seed: Optional[int] = None


class MoveBody(BaseModel):
    index: int = Field(..., ge=0)


class ResetBody(BaseModel):
    difficulty: Optional[str] = None


def _error(e: ValueError) -> HTTPException:
    if isinstance(e, IllegalOperation):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, MineFieldGenerationFailure):
        return HTTPException(status_code=503, detail=str(e))
    # InvalidTileIndex, InvalidProfile and plain validation errors
    return HTTPException(status_code=400, detail=str(e))


def create_app(sessions=None, settings: Optional[Settings] = None) -> FastAPI:
    settings = check_settings(settings) if settings else load_settings()
    app = FastAPI(title="Mineswep Service", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    app.state.settings = settings
    app.state.sessions = sessions or InMemorySessions(rng_seed=settings.rng_seed, max_games=settings.max_games)

    @app.on_event("startup")
    async def _log_settings():
        logger.info(
            f"[mineswep] Sessions={app.state.sessions.__class__.__name__} "
            f"DEFAULT_DIFFICULTY={settings.default_difficulty} "
            f"RNG_SEED={'-' if settings.rng_seed is None else settings.rng_seed} "
            f"MAX_GAMES={settings.max_games}"
        )

    def respond(game_id: str, state) -> dict:
        return app.state.sessions.to_client(state) | {"game_id": game_id}

    def get_game(game_id: str):
        try:
            return app.state.sessions.get_state(game_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")

    @app.get(f"{API_BASE}/difficulties")
    def list_difficulties():
        return [
            {
                "name": p.name,
                "columns": p.columns,
                "rows": p.rows,
                "num_mines": p.mine_count,
                "tile_count": p.tile_count,
            }
            for p in PRESETS.values()
        ]

    @app.post(f"{API_BASE}/games")
    def start_game(body: NewGameBody):
        custom = (body.columns, body.rows, body.mine_count)
        try:
            if body.difficulty and any(v is not None for v in custom):
                raise InvalidProfile("ambiguous_profile")
            if body.difficulty:
                profile = get_profile(body.difficulty)
            elif all(v is not None for v in custom):
                profile = custom_profile(*custom)
            elif any(v is not None for v in custom):
                raise InvalidProfile("incomplete_custom_profile")
            else:
                profile = get_profile(settings.default_difficulty)
            game_id, state = app.state.sessions.new_game(profile, rng_seed=body.rng_seed)
        except ValueError as e:
            logger.warning(f"[mineswep] start_game rejected reason={e}")
            raise _error(e)
        logger.info(
            f"[mineswep] game created game_id={game_id} difficulty={profile.name} "
            f"size={profile.columns}x{profile.rows} mines={profile.mine_count}"
        )
        return respond(game_id, state)

    @app.get(f"{API_BASE}/games/{{game_id}}")
    def get_state(game_id: str):
        return respond(game_id, get_game(game_id))

    @app.post(f"{API_BASE}/games/{{game_id}}/reveal")
    def reveal(game_id: str, body: MoveBody):
        get_game(game_id)
        try:
            state, result = app.state.sessions.reveal(game_id, body.index)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")
        except ValueError as e:
            raise _error(e)
        if state.is_over:
            logger.info(
                f"[mineswep] game finished game_id={game_id} status={state.outcome.value} "
                f"moves={state.moves_count}"
            )
        resp = respond(game_id, state)
        resp["last_move"] = {
            "index": body.index,
            "hit_mine": result["hit_mine"],
            "cleared_cells": result["cleared_cells"],
        }
        return resp

    @app.post(f"{API_BASE}/games/{{game_id}}/flag")
    def flag(game_id: str, body: MoveBody):
        get_game(game_id)
        try:
            state, _result = app.state.sessions.toggle_flag(game_id, body.index)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")
        except ValueError as e:
            raise _error(e)
        return respond(game_id, state)

    @app.post(f"{API_BASE}/games/{{game_id}}/reset")
    def reset(game_id: str, body: Optional[ResetBody] = None):
        get_game(game_id)
        try:
            profile = get_profile(body.difficulty) if body and body.difficulty else None
            state = app.state.sessions.reset(game_id, profile=profile)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")
        except ValueError as e:
            raise _error(e)
        return respond(game_id, state)

    @app.delete(f"{API_BASE}/games/{{game_id}}")
    def discard(game_id: str):
        try:
            app.state.sessions.discard(game_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="no game")
        return {"game_id": game_id, "discarded": True}

    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
