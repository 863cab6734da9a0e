import pytest
from fastapi.testclient import TestClient

from app.main import API_BASE, Settings, create_app, load_settings

ENV_VARS = (
    "MINESWEP_DEFAULT_DIFFICULTY",
    "MINESWEP_RNG_SEED",
    "MINESWEP_CORS_ORIGINS",
    "MINESWEP_MAX_GAMES",
    "MINESWEP_HOST",
    "MINESWEP_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings()
    assert s == Settings()
    assert s.default_difficulty == "easy"
    assert s.rng_seed is None
    assert s.cors_origins == ("*",)
    assert s.max_games == 1000


def test_values_from_env(monkeypatch):
    monkeypatch.setenv("MINESWEP_DEFAULT_DIFFICULTY", " Hard ")
    monkeypatch.setenv("MINESWEP_RNG_SEED", " 42 ")
    monkeypatch.setenv("MINESWEP_CORS_ORIGINS", "a, b,")
    monkeypatch.setenv("MINESWEP_MAX_GAMES", "5")
    monkeypatch.setenv("MINESWEP_PORT", "9000")
    s = load_settings()
    assert s.default_difficulty == "hard"
    assert s.rng_seed == 42
    assert s.cors_origins == ("a", "b")
    assert s.max_games == 5
    assert s.port == 9000


def test_bad_rng_seed_names_variable(monkeypatch):
    monkeypatch.setenv("MINESWEP_RNG_SEED", "abc")
    with pytest.raises(ValueError) as exc:
        load_settings()
    assert "invalid_rng_seed" in str(exc.value)
    assert "MINESWEP_RNG_SEED" in str(exc.value)


def test_bad_default_difficulty_fails_at_startup(monkeypatch):
    monkeypatch.setenv("MINESWEP_DEFAULT_DIFFICULTY", "nightmare")
    with pytest.raises(ValueError) as exc:
        load_settings()
    assert "invalid_default_difficulty" in str(exc.value)
    with pytest.raises(ValueError):
        create_app(settings=Settings(default_difficulty="nightmare"))


def test_bad_max_games(monkeypatch):
    monkeypatch.setenv("MINESWEP_MAX_GAMES", "0")
    with pytest.raises(ValueError) as exc:
        load_settings()
    assert "invalid_max_games" in str(exc.value)


def test_env_settings_drive_the_app(monkeypatch):
    monkeypatch.setenv("MINESWEP_DEFAULT_DIFFICULTY", "hard")
    monkeypatch.setenv("MINESWEP_RNG_SEED", "7")
    c1 = TestClient(create_app(settings=load_settings()))
    c2 = TestClient(create_app(settings=load_settings()))
    s1 = c1.post(f"{API_BASE}/games", json={}).json()
    s2 = c2.post(f"{API_BASE}/games", json={}).json()
    assert s1["difficulty"] == "hard"
    # same seed, same board: revealing the same tile gives the same outcome
    r1 = c1.post(f"{API_BASE}/games/{s1['game_id']}/reveal", json={"index": 0}).json()
    r2 = c2.post(f"{API_BASE}/games/{s2['game_id']}/reveal", json={"index": 0}).json()
    assert r1["revealed"] == r2["revealed"]
    assert r1["status"] == r2["status"]
