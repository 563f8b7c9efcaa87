# sleeper_dash/services/sleeper.py
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Any, Dict, List

import requests

from .. import schemas
from ..config import MATCHUP_FETCH_WORKERS, PLAYERS_CACHE_TTL_SECONDS, SLEEPER_BASE_URL, SLEEPER_TIMEOUT

logger = logging.getLogger("sleeper_dash.sleeper")


class SleeperAPIError(RuntimeError):
    """Upstream call failed. `status` is the HTTP status, or None for transport errors."""

    def __init__(self, message: str, path: str, status: int | None = None):
        super().__init__(message)
        self.path = path
        self.status = status


class SleeperClient:
    """
    Thin read-only wrapper over the public Sleeper REST API.
    Every payload is parsed into the pydantic models in `schemas`.
    """

    def __init__(
        self,
        base_url: str = SLEEPER_BASE_URL,
        timeout: float = SLEEPER_TIMEOUT,
        session: requests.Session | None = None,
        max_workers: int = MATCHUP_FETCH_WORKERS,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.max_workers = max(1, max_workers)

        self._players: Dict[str, Dict[str, Any]] | None = None
        self._players_fetched_at = 0.0
        self._players_lock = threading.Lock()

    # ---------- low level ----------
    def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        started = time.perf_counter()
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise SleeperAPIError(f"Sleeper API {path} request failed: {exc}", path) from exc

        logger.debug("GET %s -> %s (%.1f ms)", path, r.status_code, (time.perf_counter() - started) * 1000.0)
        if r.status_code == 404:
            raise SleeperAPIError(f"Sleeper API {path} responded with 404 (not found)", path, 404)
        if not r.ok:
            raise SleeperAPIError(f"Sleeper API {path} responded with {r.status_code}", path, r.status_code)
        try:
            return r.json()
        except ValueError as exc:
            raise SleeperAPIError(f"Sleeper API {path} returned invalid JSON", path, r.status_code) from exc

    def _get_list(self, path: str) -> List[Any]:
        # Sleeper answers `null` for weeks/brackets that do not exist yet
        return self._get(path) or []

    # ---------- league ----------
    def get_league(self, league_id: str) -> schemas.SleeperLeague:
        data = self._get(f"/league/{league_id}")
        if not data:
            raise SleeperAPIError(f"League {league_id} not found", f"/league/{league_id}", 404)
        return schemas.SleeperLeague.model_validate(data)

    def get_rosters(self, league_id: str) -> List[schemas.SleeperRoster]:
        return [schemas.SleeperRoster.model_validate(r) for r in self._get_list(f"/league/{league_id}/rosters")]

    def get_users(self, league_id: str) -> List[schemas.SleeperUser]:
        return [schemas.SleeperUser.model_validate(u) for u in self._get_list(f"/league/{league_id}/users")]

    def get_matchups(self, league_id: str, week: int) -> List[schemas.SleeperMatchup]:
        return [
            schemas.SleeperMatchup.model_validate(m)
            for m in self._get_list(f"/league/{league_id}/matchups/{week}")
        ]

    def get_matchups_through(self, league_id: str, through_week: int) -> List[List[schemas.SleeperMatchup]]:
        """Weeks 1..through_week, fetched concurrently; index 0 is week 1."""
        if through_week <= 0:
            return []
        weeks = range(1, through_week + 1)
        with ThreadPoolExecutor(max_workers=min(self.max_workers, through_week)) as pool:
            return list(pool.map(lambda w: self.get_matchups(league_id, w), weeks))

    def get_winners_bracket(self, league_id: str) -> List[schemas.SleeperBracketMatch]:
        return [
            schemas.SleeperBracketMatch.model_validate(m)
            for m in self._get_list(f"/league/{league_id}/winners_bracket")
        ]

    def get_losers_bracket(self, league_id: str) -> List[schemas.SleeperBracketMatch]:
        return [
            schemas.SleeperBracketMatch.model_validate(m)
            for m in self._get_list(f"/league/{league_id}/losers_bracket")
        ]

    def get_transactions(self, league_id: str, week: int) -> List[schemas.SleeperTransaction]:
        return [
            schemas.SleeperTransaction.model_validate(t)
            for t in self._get_list(f"/league/{league_id}/transactions/{week}")
        ]

    # ---------- global ----------
    def get_nfl_state(self) -> schemas.NflState:
        return schemas.NflState.model_validate(self._get("/state/nfl") or {})

    def get_players(self) -> Dict[str, Dict[str, Any]]:
        """
        Full NFL player catalog (several MB). Cached in-process for a day; when a
        refresh fails the stale copy is served instead.
        """
        with self._players_lock:
            now = time.monotonic()
            if self._players is not None and now - self._players_fetched_at < PLAYERS_CACHE_TTL_SECONDS:
                return self._players
            try:
                players = self._get("/players/nfl") or {}
            except SleeperAPIError:
                if self._players is not None:
                    logger.warning("player catalog refresh failed; serving cached copy")
                    return self._players
                raise
            self._players = players
            self._players_fetched_at = now
            return players


@lru_cache(maxsize=1)
def get_sleeper_client() -> SleeperClient:
    """FastAPI dependency: one shared client (and player cache) per process."""
    return SleeperClient()
