# sleeper_dash/services/recap_llm.py
from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from openai import OpenAI, OpenAIError

from .. import schemas
from ..config import RECAP_MAX_TOKENS, RECAP_MODEL

logger = logging.getLogger("sleeper_dash.recap_llm")


class RecapGenerationError(RuntimeError):
    pass


@dataclass
class GeneratedRecap:
    week_summary: str
    matchup_summaries: List[schemas.MatchupSummary] = field(default_factory=list)


def resolve_style_examples() -> str:
    """Commissioner voice samples: RECAP_STYLE_EXAMPLES, else base64 RECAP_STYLE_EXAMPLES_B64."""
    direct = (os.getenv("RECAP_STYLE_EXAMPLES") or "").strip()
    if direct:
        return direct
    encoded = (os.getenv("RECAP_STYLE_EXAMPLES_B64") or "").strip()
    if not encoded:
        return ""
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8").strip()
    except (binascii.Error, UnicodeDecodeError):
        logger.warning("RECAP_STYLE_EXAMPLES_B64 is not valid base64 text; ignoring")
        return ""


def _side_name(side: schemas.RecapSide) -> str:
    return side.team_name or side.display_name


def _context_line(label: str, pack: schemas.ManagerContextPack | None) -> str:
    if pack is None:
        return f"{label} context: unavailable"
    trades = "; ".join(
        f"(+ {', '.join(t.acquired_players) or 'none'} | - {', '.join(t.dropped_players) or 'none'})"
        for t in pack.trades
    )
    return (
        f'{label} context: notes="{pack.personality_notes or "none"}"; '
        f"weeklyScore={pack.weekly_score}; starterCount={pack.starter_count}; "
        f"topStarter={pack.top_starter_name} ({pack.top_starter_score:.2f}); "
        f"bottomStarter={pack.bottom_starter_name} ({pack.bottom_starter_score:.2f}); "
        f"trades={trades or 'none'}"
    )


def build_prompt(
    week: int,
    season: str,
    matchups: Sequence[schemas.RecapMatchup],
    personality_notes: str,
    packs: Mapping[int, schemas.ManagerContextPack],
    style_examples: str = "",
) -> str:
    lines = []
    for m in matchups:
        if m.winner_roster_id == m.a.roster_id:
            winner = _side_name(m.a)
        elif m.winner_roster_id == m.b.roster_id:
            winner = _side_name(m.b)
        else:
            winner = "Tie"
        tags = ", ".join(t.label for t in m.tags) or "none"
        lines.append(
            f"- Matchup {m.matchup_id}: {_side_name(m.a)} ({m.a.score}) vs {_side_name(m.b)} ({m.b.score})"
            f" | Winner: {winner} | Margin: {abs(m.a.score - m.b.score):.2f} | Tags: {tags}\n"
            f"  {_context_line('A', packs.get(m.a.roster_id))}\n"
            f"  {_context_line('B', packs.get(m.b.roster_id))}"
        )

    parts = [f"You are an R-rated fantasy football roast writer. Write a recap for Week {week} of the {season} season.", ""]
    if personality_notes:
        parts.append(f"Personality/style notes from the commissioner: {personality_notes}")
    if style_examples:
        parts.append(
            "Private commissioner examples to mirror in voice and cadence "
            "(do not copy lines verbatim; adapt the tone):\n" + style_examples
        )
    parts += [
        "Here are the matchups:",
        "\n".join(lines),
        "",
        "Respond with a JSON object containing:",
        '1. "weekSummary": One to two paragraphs (4-10 sentences total) covering major storylines, '
        "biggest beatdowns, and close calls with specific scores/margins.",
        '2. "matchupSummaries": An array of objects, each with "matchupId" (number) and "summary" '
        "(string, one to two paragraphs, 3-8 sentences, about that specific matchup). Cover every matchup.",
        "",
        "Style rules:",
        "- Target an R-rated locker-room roast tone: vulgar, ruthless, and funny.",
        "- Roast losers aggressively; praise winners with swagger and attitude.",
        "- Use manager notes and context details as fuel. Keep it specific, not generic.",
        "- Reference managers by their fantasy team names.",
        "- Mention real player names from starter/trade context when available, and never invent player names.",
        "- Do not use hashtags.",
        "- Do not include slurs targeting protected classes, sexual content involving minors, or threats of violence.",
    ]
    return "\n".join(parts)


def parse_recap_content(content: str | None) -> GeneratedRecap:
    """Validate the model's JSON answer. Summaries missing an id or text are dropped."""
    if not content:
        raise RecapGenerationError("Empty response from OpenAI")
    try:
        parsed: Dict[str, Any] = json.loads(content)
    except json.JSONDecodeError as exc:
        raise RecapGenerationError("OpenAI response was not valid JSON") from exc

    week_summary = parsed.get("weekSummary") if isinstance(parsed, dict) else None
    raw = parsed.get("matchupSummaries") if isinstance(parsed, dict) else None
    if not week_summary or not isinstance(week_summary, str) or not isinstance(raw, list):
        raise RecapGenerationError("Invalid response shape from OpenAI")

    summaries = [
        schemas.MatchupSummary(matchup_id=s["matchupId"], summary=s["summary"])
        for s in raw
        if isinstance(s, dict)
        and isinstance(s.get("matchupId"), int)
        and not isinstance(s.get("matchupId"), bool)
        and isinstance(s.get("summary"), str)
    ]
    return GeneratedRecap(week_summary=week_summary, matchup_summaries=summaries)


class RecapWriter:
    """Writes the weekly recap with the OpenAI chat completions API (JSON mode)."""

    def __init__(self, client: OpenAI | None = None, model: str = RECAP_MODEL):
        self._client = client
        self.model = model

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            try:
                self._client = OpenAI()  # reads OPENAI_API_KEY
            except OpenAIError as exc:
                raise RecapGenerationError(f"OpenAI client unavailable: {exc}") from exc
        return self._client

    def generate(
        self,
        week: int,
        season: str,
        matchups: Sequence[schemas.RecapMatchup],
        personality_notes: str,
        packs: Mapping[int, schemas.ManagerContextPack],
    ) -> GeneratedRecap:
        prompt = build_prompt(week, season, matchups, personality_notes, packs, resolve_style_examples())
        logger.info("generating recap season=%s week=%s matchups=%d model=%s", season, week, len(matchups), self.model)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=1,
                presence_penalty=0.5,
                frequency_penalty=0.2,
                max_tokens=RECAP_MAX_TOKENS,
            )
        except OpenAIError as exc:
            raise RecapGenerationError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        return parse_recap_content(content)


def get_recap_writer() -> RecapWriter:
    """FastAPI dependency; overridden in tests."""
    return RecapWriter()
