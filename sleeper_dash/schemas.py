# sleeper_dash/schemas.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# -----------------------
# Shared / Enums
# -----------------------
class ExpectedScope(str, Enum):
    SEASON_TO_DATE = "season_to_date"
    SELECTED_WEEK = "selected_week"


class RecapState(str, Enum):
    NOT_GENERATED = "NOT_GENERATED"
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class LeagueStatus(str, Enum):
    PRE_DRAFT = "pre_draft"
    DRAFTING = "drafting"
    IN_SEASON = "in_season"
    COMPLETE = "complete"


# Sleeper payloads keep their snake_case keys and any field we do not model.
class _SleeperModel(BaseModel):
    model_config = ConfigDict(extra="allow")


# Our own API speaks camelCase, like the dashboard UI expects.
class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------
# Sleeper API payloads
# -----------------------
class LeagueSettings(_SleeperModel):
    leg: int | None = None  # current matchup week
    playoff_week_start: int | None = None
    last_scored_leg: int | None = None
    playoff_teams: int | None = None


class SleeperLeague(_SleeperModel):
    league_id: str
    name: str = ""
    season: str = ""
    status: str = LeagueStatus.IN_SEASON.value
    total_rosters: int | None = None
    avatar: str | None = None
    previous_league_id: str | None = None
    settings: LeagueSettings = Field(default_factory=LeagueSettings)


class RosterSettings(_SleeperModel):
    wins: int | None = 0
    losses: int | None = 0
    ties: int | None = 0
    fpts: float | None = 0
    fpts_decimal: float | None = None
    fpts_against: float | None = None
    fpts_against_decimal: float | None = None


class SleeperRoster(_SleeperModel):
    roster_id: int
    owner_id: str | None = None
    metadata: dict[str, Any] | None = None
    settings: RosterSettings = Field(default_factory=RosterSettings)
    players: list[str] | None = None
    starters: list[str] | None = None


class SleeperUser(_SleeperModel):
    user_id: str
    display_name: str | None = None
    avatar: str | None = None
    metadata: dict[str, Any] | None = None


class SleeperMatchup(_SleeperModel):
    """One roster's score for one week; `matchup_id` pairs it with its opponent."""

    roster_id: int | None = None
    matchup_id: int | None = None
    points: float | None = None
    starters: list[str] | None = None
    starters_points: list[float] | None = None
    players_points: dict[str, float] | None = None


class SleeperBracketMatch(_SleeperModel):
    m: int | None = None  # match number within the bracket
    r: int | None = None  # round
    p: int | None = None  # placement slot, only on placement-deciding matches
    w: int | None = None  # winner roster_id
    l: int | None = None  # noqa: E741  loser roster_id
    t1: int | None = None
    t2: int | None = None
    t1_from: dict[str, int] | None = None
    t2_from: dict[str, int] | None = None


class SleeperTransaction(_SleeperModel):
    transaction_id: str | None = None
    type: str | None = None
    status: str | None = None
    roster_ids: list[int] = Field(default_factory=list)
    adds: dict[str, int] | None = None
    drops: dict[str, int] | None = None


class NflState(_SleeperModel):
    season: str | None = None
    week: int | None = None
    season_type: str | None = None
    leg: int | None = None


# -----------------------
# Rankings core
# -----------------------
class AccumulatedStats(BaseModel):
    roster_id: int
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0

    model_config = ConfigDict(frozen=True)


class ExpectedRecordLine(_ApiModel):
    wins: float = 0.0
    losses: float = 0.0
    ties: float = 0.0


class RosterExpectation(_ApiModel):
    expected_record: ExpectedRecordLine = Field(default_factory=ExpectedRecordLine)
    actual_wins: int = 0
    delta_vs_expected: float = 0.0
    all_play_win_pct: float = 0.0


class LeagueMember(_ApiModel):
    roster_id: int
    user_id: str
    display_name: str
    team_name: str
    avatar: str | None = None  # fully resolved URL


class ManagerRanking(LeagueMember):
    rank: int
    power_score: float
    wins: int
    losses: int
    ties: int
    points_for: float
    points_against: float
    # None means "not computed for this view"
    expected_record: ExpectedRecordLine | None = None
    delta_vs_expected: float | None = None
    all_play_win_pct: float | None = None


class RankingsResponse(_ApiModel):
    rankings: list[ManagerRanking]
    week: int
    season: str
    league_name: str
    expected_scope: ExpectedScope
    expected_scope_label: str
    expected_available: bool
    expected_reason: str | None = None


class LuckRow(_ApiModel):
    roster_id: int
    display_name: str
    team_name: str
    expected_wins: float
    actual_wins: int
    luck_index: float


class LuckResponse(_ApiModel):
    week: int
    expected_scope: ExpectedScope
    available: bool
    reason: str | None = None
    managers: list[LuckRow]


# -----------------------
# League context
# -----------------------
class LeagueInfo(_ApiModel):
    league_id: str
    name: str
    season: str
    current_week: int
    total_weeks: int
    playoff_week_start: int | None = None
    status: str
    avatar: str | None = None


class LeagueContextOut(_ApiModel):
    league: LeagueInfo
    members: list[LeagueMember]
    available_seasons: list[str]


# -----------------------
# Manager notes
# -----------------------
class ManagerNoteOut(_ApiModel):
    league_id: str
    season: str
    user_id: str
    notes: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ManagerNoteIn(_ApiModel):
    league_id: str | None = None
    season: str | None = None
    user_id: str | None = None
    notes: str | None = None


# -----------------------
# Weekly recap
# -----------------------
class RecapTag(_ApiModel):
    type: str
    emoji: str
    label: str


class RecapSide(_ApiModel):
    roster_id: int
    user_id: str
    display_name: str
    team_name: str
    avatar: str | None = None
    score: float


class RecapMatchup(_ApiModel):
    matchup_id: int
    a: RecapSide
    b: RecapSide
    winner_roster_id: int | None = None  # None = tie
    margin: float
    tags: list[RecapTag] = Field(default_factory=list)
    summary: str = ""


class RecapHighlight(_ApiModel):
    type: str
    emoji: str
    label: str
    matchup_id: int
    winner_name: str
    winner_score: float
    loser_name: str
    loser_score: float
    value_label: str


class MatchupSummary(_ApiModel):
    matchup_id: int
    summary: str


class TradeNote(_ApiModel):
    acquired_players: list[str] = Field(default_factory=list)
    dropped_players: list[str] = Field(default_factory=list)


class ManagerContextPack(_ApiModel):
    roster_id: int
    personality_notes: str = ""
    weekly_score: float = 0.0
    starter_count: int = 0
    top_starter_name: str = "unknown"
    top_starter_score: float = 0.0
    bottom_starter_name: str = "unknown"
    bottom_starter_score: float = 0.0
    trades: list[TradeNote] = Field(default_factory=list)


class WeeklyRecapResponse(_ApiModel):
    league_id: str
    season: str
    week: int
    matchups: list[RecapMatchup]
    highlights: list[RecapHighlight]
    recap_state: RecapState
    week_summary: str = ""


class AdminRecapResponse(_ApiModel):
    state: RecapState
    week_summary: str = ""
    matchup_summaries: list[MatchupSummary] = Field(default_factory=list)
    personality_notes: str = ""
    generated_at: datetime | None = None
    published_at: datetime | None = None


class GenerateRecapIn(_ApiModel):
    week: int | None = None
    league_id: str | None = None
    season: str | None = None
    personality_notes: str | None = None


class PublishRecapIn(_ApiModel):
    week: int | None = None
    league_id: str | None = None
    season: str | None = None


class RecapActionOut(_ApiModel):
    ok: bool = True
    state: RecapState
