# tests/conftest.py
import copy
import os

# --- Test mode: idempotency fallback keys, default league, throwaway app DB ---
os.environ["TESTING"] = "1"
os.environ["SLEEPER_LEAGUE_ID"] = "L2024"
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

# Make sure models are imported so Base has all tables
from sleeper_dash import models, schemas  # noqa: E402,F401
from sleeper_dash.db import Base, get_db  # noqa: E402
from sleeper_dash.main import app  # noqa: E402
from sleeper_dash.services.recap_llm import GeneratedRecap, get_recap_writer  # noqa: E402
from sleeper_dash.services.sleeper import SleeperAPIError, SleeperClient, get_sleeper_client  # noqa: E402
from sleeper_dash.utils.idempotency import reset_idempotency_store  # noqa: E402

TEST_DATABASE_URL = "sqlite+pysqlite://"


# ---------------------------------------------------------------------------
# Sleeper fixture data: a 4-team league, 2024 in season (2 weeks scored),
# 2023 complete with a decided bracket.
# ---------------------------------------------------------------------------
USERS = [
    {"user_id": "u1", "display_name": "alice", "avatar": "av1", "metadata": {"team_name": "Alpha Dogs"}},
    {"user_id": "u2", "display_name": "bob", "avatar": None, "metadata": {}},
    {"user_id": "u3", "display_name": "carol", "avatar": "av3", "metadata": {"team_name": "Cobras"}},
    {"user_id": "u4", "display_name": "dave", "avatar": None, "metadata": None},
]

ROSTERS = [
    {"roster_id": 1, "owner_id": "u1", "settings": {"wins": 2, "losses": 0, "fpts": 230, "fpts_decimal": 50, "fpts_against": 195}},
    {"roster_id": 2, "owner_id": "u2", "settings": {"wins": 1, "losses": 1, "fpts": 240, "fpts_against": 200, "fpts_against_decimal": 50}},
    {"roster_id": 3, "owner_id": "u3", "metadata": {"avatar": "https://img.test/cobra.png"}, "settings": {"wins": 0, "losses": 2, "fpts": 185, "fpts_against": 240, "fpts_against_decimal": 25}},
    {"roster_id": 4, "owner_id": "u4", "settings": {"wins": 1, "losses": 1, "fpts": 210, "fpts_decimal": 25, "fpts_against": 230}},
]

WEEK_1 = [
    {"roster_id": 1, "matchup_id": 1, "points": 120.5},
    {"roster_id": 2, "matchup_id": 1, "points": 100.0},
    {"roster_id": 3, "matchup_id": 2, "points": 90.0},
    {"roster_id": 4, "matchup_id": 2, "points": 130.25},
]

WEEK_2 = [
    {"roster_id": 1, "matchup_id": 1, "points": 110.0, "starters": ["p1", "p2", "0"], "starters_points": [30.5, 12.0, 0]},
    {"roster_id": 3, "matchup_id": 1, "points": 95.0, "starters": ["p3"], "starters_points": [22.0]},
    {"roster_id": 2, "matchup_id": 2, "points": 140.0},
    {"roster_id": 4, "matchup_id": 2, "points": 80.0},
]


def _league(league_id, season, status, previous=None, **settings):
    base = {"leg": 3, "last_scored_leg": 2, "playoff_week_start": 15, "playoff_teams": 4}
    base.update(settings)
    return {
        "league_id": league_id,
        "name": "Dynasty Degenerates",
        "season": season,
        "status": status,
        "avatar": "leagueav",
        "previous_league_id": previous,
        "settings": base,
    }


def build_sleeper_routes():
    routes = {
        "/state/nfl": {"season": "2024", "week": 3, "season_type": "regular", "leg": 3},
        "/league/L2024": _league("L2024", "2024", "in_season", previous="L2023"),
        "/league/L2023": _league("L2023", "2023", "complete"),
        "/players/nfl": {
            "p1": {"full_name": "Josh Allen"},
            "p2": {"first_name": "Ja'Marr", "last_name": "Chase"},
            "p3": {"full_name": "Saquon Barkley"},
        },
        "/league/L2024/transactions/2": [
            {
                "transaction_id": "t1",
                "type": "trade",
                "status": "complete",
                "roster_ids": [1, 3],
                "adds": {"p1": 1, "p3": 3},
                "drops": {"p3": 1, "p1": 3},
            },
            {"transaction_id": "t2", "type": "free_agent", "status": "complete", "roster_ids": [2], "adds": {"p9": 2}},
        ],
        "/league/L2024/matchups/3": [],
        "/league/L2023/winners_bracket": [
            {"r": 1, "m": 1, "t1": 1, "t2": 2, "w": 2, "l": 1, "p": 1},
            {"r": 1, "m": 2, "t1": 3, "t2": 4, "w": 4, "l": 3, "p": 3},
        ],
        "/league/L2023/losers_bracket": [],
    }
    for league_id in ("L2024", "L2023"):
        routes[f"/league/{league_id}/rosters"] = ROSTERS
        routes[f"/league/{league_id}/users"] = USERS
        routes[f"/league/{league_id}/matchups/1"] = WEEK_1
        routes[f"/league/{league_id}/matchups/2"] = WEEK_2
    return routes


class FakeSleeperClient(SleeperClient):
    """Serves canned payloads by path; everything above `_get` is the real client."""

    def __init__(self, routes):
        super().__init__(base_url="http://sleeper.test")
        self.routes = routes
        self.calls = []

    def _get(self, path):
        self.calls.append(path)
        if path not in self.routes:
            raise SleeperAPIError(f"Sleeper API {path} responded with 404 (not found)", path, 404)
        value = self.routes[path]
        if isinstance(value, Exception):
            raise value
        return copy.deepcopy(value)


class FakeRecapWriter:
    def __init__(self):
        self.calls = []
        self.error = None

    def generate(self, week, season, matchups, personality_notes, packs):
        self.calls.append(
            {"week": week, "season": season, "matchups": matchups, "notes": personality_notes, "packs": packs}
        )
        if self.error is not None:
            raise self.error
        return GeneratedRecap(
            week_summary=f"Week {week} was a bloodbath.",
            matchup_summaries=[
                schemas.MatchupSummary(matchup_id=m.matchup_id, summary=f"AI take on matchup {m.matchup_id}")
                for m in matchups
            ],
        )


@pytest.fixture()
def engine():
    # fresh in-memory DB per test
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def sleeper_routes():
    return build_sleeper_routes()


@pytest.fixture()
def fake_sleeper(sleeper_routes):
    return FakeSleeperClient(sleeper_routes)


@pytest.fixture()
def recap_writer():
    return FakeRecapWriter()


@pytest.fixture()
def client(db_session, fake_sleeper, recap_writer):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    app.dependency_overrides[get_sleeper_client] = lambda: fake_sleeper
    app.dependency_overrides[get_recap_writer] = lambda: recap_writer
    reset_idempotency_store()

    from starlette.testclient import TestClient

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
    reset_idempotency_store()
