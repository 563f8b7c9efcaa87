# sleeper_dash/logic/identity.py
from __future__ import annotations

from typing import Iterable

from .. import schemas
from ..config import SLEEPER_CDN_BASE


def resolve_avatar_url(raw: str | None) -> str | None:
    """
    Roster/team avatars come as full URLs; user avatars are bare ids on the CDN.
    """
    if not raw:
        return None
    if raw.startswith("http"):
        return raw
    return f"{SLEEPER_CDN_BASE}/avatars/thumbs/{raw}"


def _meta(obj, key: str) -> str | None:
    md = getattr(obj, "metadata", None) if obj is not None else None
    if not md:
        return None
    value = md.get(key)
    return value if isinstance(value, str) and value else None


def users_by_id(users: Iterable[schemas.SleeperUser]) -> dict[str, schemas.SleeperUser]:
    return {u.user_id: u for u in users}


def manager_member(
    roster_id: int,
    roster: schemas.SleeperRoster | None,
    user: schemas.SleeperUser | None,
) -> schemas.LeagueMember:
    """
    Display identity for one roster. Name falls back to "Team {roster_id}";
    avatar prefers the roster's own art over the owner's.
    """
    owner_id = (roster.owner_id if roster else None) or ""
    fallback = f"Team {roster_id}"
    display_name = (user.display_name if user else None) or fallback
    team_name = _meta(user, "team_name") or (user.display_name if user else None) or fallback

    avatar = resolve_avatar_url(
        _meta(roster, "avatar")
        or _meta(roster, "team_logo")
        or _meta(user, "avatar")
        or _meta(user, "team_logo")
        or (user.avatar if user else None)
    )
    return schemas.LeagueMember(
        roster_id=roster_id,
        user_id=owner_id,
        display_name=display_name,
        team_name=team_name,
        avatar=avatar,
    )


def build_league_members(
    rosters: list[schemas.SleeperRoster], users: list[schemas.SleeperUser]
) -> list[schemas.LeagueMember]:
    by_user = users_by_id(users)
    return [manager_member(r.roster_id, r, by_user.get(r.owner_id or "")) for r in rosters]
