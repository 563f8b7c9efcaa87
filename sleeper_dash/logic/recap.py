# sleeper_dash/logic/recap.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from .. import schemas
from ..utils.num import round_half_up, to_float
from .identity import manager_member, users_by_id
from .stats import group_pairs

# Tag thresholds (fantasy points)
BLOWOUT_MARGIN = 40.0
NAIL_BITER_MARGIN = 5.0
SHOOTOUT_COMBINED = 300.0
SLUGFEST_COMBINED = 160.0


def _tag(type_: str, emoji: str, label: str) -> schemas.RecapTag:
    return schemas.RecapTag(type=type_, emoji=emoji, label=label)


def _tags_for(a: float, b: float, week_high: float) -> List[schemas.RecapTag]:
    margin = abs(a - b)
    combined = a + b
    tags: List[schemas.RecapTag] = []
    if margin == 0:
        tags.append(_tag("tie", "🤝", "Dead Heat"))
    elif margin >= BLOWOUT_MARGIN:
        tags.append(_tag("blowout", "💥", "Blowout"))
    elif margin < NAIL_BITER_MARGIN:
        tags.append(_tag("nail_biter", "😬", "Nail-Biter"))
    if combined >= SHOOTOUT_COMBINED:
        tags.append(_tag("shootout", "🔥", "Shootout"))
    elif combined < SLUGFEST_COMBINED:
        tags.append(_tag("slugfest", "🐢", "Slugfest"))
    if week_high > 0 and max(a, b) == week_high:
        tags.append(_tag("top_score", "👑", "Top Score"))
    return tags


def _default_summary(m: schemas.RecapMatchup) -> str:
    if m.winner_roster_id is None:
        return f"{m.a.team_name} and {m.b.team_name} tied at {m.a.score:.2f}."
    win, lose = (m.a, m.b) if m.winner_roster_id == m.a.roster_id else (m.b, m.a)
    return f"{win.team_name} beat {lose.team_name} {win.score:.2f}-{lose.score:.2f} (margin {m.margin:.2f})."


def build_recap_matchups(
    rosters: Sequence[schemas.SleeperRoster],
    users: Sequence[schemas.SleeperUser],
    week_matchups: Sequence[schemas.SleeperMatchup],
) -> List[schemas.RecapMatchup]:
    """
    One recap card per head-to-head pairing in the week, ordered by matchup_id.
    Missing scores read as 0.
    """
    by_user = users_by_id(users)
    by_roster = {r.roster_id: r for r in rosters}

    pairs = [p for p in group_pairs(week_matchups) if p[0].roster_id is not None and p[1].roster_id is not None]
    week_high = max((to_float(m.points) for p in pairs for m in p), default=0.0)

    def side(m: schemas.SleeperMatchup) -> schemas.RecapSide:
        roster = by_roster.get(m.roster_id)
        user = by_user.get(roster.owner_id or "") if roster else None
        member = manager_member(m.roster_id, roster, user)
        return schemas.RecapSide(**member.model_dump(), score=round_half_up(to_float(m.points), 2))

    out: List[schemas.RecapMatchup] = []
    for a, b in sorted(pairs, key=lambda p: p[0].matchup_id):
        sa, sb = side(a), side(b)
        if sa.score > sb.score:
            winner = sa.roster_id
        elif sb.score > sa.score:
            winner = sb.roster_id
        else:
            winner = None
        card = schemas.RecapMatchup(
            matchup_id=a.matchup_id,
            a=sa,
            b=sb,
            winner_roster_id=winner,
            margin=round_half_up(abs(sa.score - sb.score), 2),
            tags=_tags_for(sa.score, sb.score, week_high),
        )
        card.summary = _default_summary(card)
        out.append(card)
    return out


def _winner_loser(m: schemas.RecapMatchup):
    if m.winner_roster_id == m.b.roster_id:
        return m.b, m.a
    return m.a, m.b


def build_highlights(matchups: Sequence[schemas.RecapMatchup]) -> List[schemas.RecapHighlight]:
    """
    Headline strip: biggest blowout, closest game (decided games only) and top scorer.
    Empty when the week has no matchups.
    """
    if not matchups:
        return []

    out: List[schemas.RecapHighlight] = []

    def add(type_: str, emoji: str, label: str, m: schemas.RecapMatchup, value_label: str) -> None:
        win, lose = _winner_loser(m)
        out.append(
            schemas.RecapHighlight(
                type=type_,
                emoji=emoji,
                label=label,
                matchup_id=m.matchup_id,
                winner_name=win.team_name,
                winner_score=win.score,
                loser_name=lose.team_name,
                loser_score=lose.score,
                value_label=value_label,
            )
        )

    decided = [m for m in matchups if m.winner_roster_id is not None]
    if decided:
        blow = max(decided, key=lambda m: m.margin)
        add("blowout", "💥", "Biggest Blowout", blow, f"by {blow.margin:.2f}")
        close = min(decided, key=lambda m: m.margin)
        if close.matchup_id != blow.matchup_id:
            add("closest", "😬", "Closest Game", close, f"by {close.margin:.2f}")

    top = max(matchups, key=lambda m: max(m.a.score, m.b.score))
    top_score = max(top.a.score, top.b.score)
    add("top_score", "👑", "Top Score", top, f"{top_score:.2f} pts")
    return out


def _player_name(players: Mapping[str, Mapping[str, Any]], player_id: str) -> str:
    p = players.get(player_id) or {}
    full = p.get("full_name")
    if full:
        return str(full)
    name = " ".join(str(x) for x in (p.get("first_name"), p.get("last_name")) if x)
    return name or player_id


def _trades_for(
    roster_id: int,
    transactions: Sequence[schemas.SleeperTransaction],
    players: Mapping[str, Mapping[str, Any]],
) -> List[schemas.TradeNote]:
    notes: List[schemas.TradeNote] = []
    for tx in transactions:
        if tx.type != "trade" or tx.status != "complete" or roster_id not in tx.roster_ids:
            continue
        acquired = [_player_name(players, pid) for pid, rid in (tx.adds or {}).items() if rid == roster_id]
        dropped = [_player_name(players, pid) for pid, rid in (tx.drops or {}).items() if rid == roster_id]
        notes.append(schemas.TradeNote(acquired_players=acquired, dropped_players=dropped))
    return notes


def build_manager_context_packs(
    rosters: Sequence[schemas.SleeperRoster],
    week_matchups: Sequence[schemas.SleeperMatchup],
    notes_by_user_id: Mapping[str, str],
    players: Mapping[str, Mapping[str, Any]],
    transactions: Sequence[schemas.SleeperTransaction] = (),
) -> Dict[int, schemas.ManagerContextPack]:
    """
    Per-roster fuel for the recap writer: commissioner notes, the week's score,
    best and worst starter, and any trades completed that week.
    """
    by_roster = {r.roster_id: r for r in rosters}
    packs: Dict[int, schemas.ManagerContextPack] = {}

    for m in week_matchups:
        if m.roster_id is None:
            continue
        roster = by_roster.get(m.roster_id)
        owner_id = (roster.owner_id if roster else None) or ""

        starters = [s for s in (m.starters or []) if s and s != "0"]
        points = list(m.starters_points or [])
        scored = [(pid, to_float(points[i]) if i < len(points) else 0.0) for i, pid in enumerate(m.starters or [])]
        scored = [(pid, pts) for pid, pts in scored if pid and pid != "0"]

        pack = schemas.ManagerContextPack(
            roster_id=m.roster_id,
            personality_notes=notes_by_user_id.get(owner_id, ""),
            weekly_score=round_half_up(to_float(m.points), 2),
            starter_count=len(starters),
            trades=_trades_for(m.roster_id, transactions, players),
        )
        if scored:
            top_id, top_pts = max(scored, key=lambda x: x[1])
            bot_id, bot_pts = min(scored, key=lambda x: x[1])
            pack.top_starter_name = _player_name(players, top_id)
            pack.top_starter_score = top_pts
            pack.bottom_starter_name = _player_name(players, bot_id)
            pack.bottom_starter_score = bot_pts
        packs[m.roster_id] = pack

    return packs
