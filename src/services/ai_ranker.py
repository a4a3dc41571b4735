"""Optional AI ranking tier.

:class:`LLMConcertRanker` sends a bounded summary of the listener's top
artists and the candidate events to a language model and turns the
model's JSON answer into ``ai_match`` recommendations.  The model's
output is treated as untrusted:

    - a failed model call of any kind yields nothing
    - anything that is not a JSON array of objects yields nothing
    - entries at or below the confidence floor are dropped
    - entries whose ``concertName`` is not exactly the name of a known
      event are dropped (models paraphrase and invent titles)

:class:`NullConcertRanker` is injected when no LLM is configured, so the
rest of the pipeline never checks whether AI is enabled.
"""

from __future__ import annotations

import json
import re
from typing import Any

from src.interfaces.concert_ranker import IConcertRanker
from src.interfaces.llm_provider import ILLMProvider
from src.models.event import Event
from src.models.recommendation import Recommendation, RecommendationType
from src.models.taste import ArtistProfile
from src.utils.errors import LLMError
from src.utils.logging import get_logger

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

_SYSTEM_PROMPT = "You are a music expert. Return only valid JSON, no other text."

_DEFAULT_REASON = "Picked for you based on your listening history."


def render_event_line(event: Event) -> str:
    """Render one candidate event the way it appears in the prompt."""
    return f"{event.name} ({', '.join(event.artists)}) — {event.venue}, {event.date.isoformat()}"


class LLMConcertRanker(IConcertRanker):
    """Ranks candidate events with a language model.

    Parameters
    ----------
    llm_provider:
        Completion backend (OpenAI-compatible or Anthropic).
    prompt_artists:
        Maximum number of top-artist names placed in the prompt.
    prompt_events:
        Maximum number of candidate events placed in the prompt.
    max_results:
        Number of picks requested from the model; extra entries are ignored.
    min_confidence:
        Entries with ``confidence`` at or below this value are discarded.
    """

    def __init__(
        self,
        llm_provider: ILLMProvider,
        prompt_artists: int = 10,
        prompt_events: int = 20,
        max_results: int = 5,
        min_confidence: float = 0.6,
    ) -> None:
        self._llm = llm_provider
        self._prompt_artists = prompt_artists
        self._prompt_events = prompt_events
        self._max_results = max_results
        self._min_confidence = min_confidence
        self._logger = get_logger(__name__)

    def is_enabled(self) -> bool:
        return True

    def build_user_prompt(self, top_artists: list[ArtistProfile], events: list[Event]) -> str:
        artist_names = ", ".join(a.name for a in top_artists[: self._prompt_artists])
        concert_list = "\n".join(render_event_line(e) for e in events[: self._prompt_events])

        return (
            f"User's favorite artists: {artist_names}\n\n"
            f"Available concerts:\n{concert_list}\n\n"
            f"Find the top {self._max_results} concerts this user would most likely "
            "enjoy based on:\n"
            "- Musical genre similarity\n"
            "- Artist influences and connections\n"
            "- Similar fanbase overlap\n"
            "- Musical style compatibility\n\n"
            "Return ONLY a JSON array with this exact format:\n"
            "[\n"
            "  {\n"
            '    "concertName": "exact concert name from list",\n'
            '    "reason": "brief explanation why they\'d like it",\n'
            '    "confidence": 0.85\n'
            "  }\n"
            "]"
        )

    async def rank(
        self,
        top_artists: list[ArtistProfile],
        events: list[Event],
    ) -> list[Recommendation]:
        if not top_artists or not events:
            return []

        try:
            response = await self._llm.complete(
                system_prompt=_SYSTEM_PROMPT,
                user_prompt=self.build_user_prompt(top_artists, events),
                temperature=0.3,
                max_tokens=1000,
            )
        except LLMError as exc:
            self._logger.warning(
                "ai_ranking_failed",
                provider=self._llm.get_provider_name(),
                error=str(exc),
            )
            return []
        except Exception as exc:
            self._logger.warning(
                "ai_ranking_failed",
                provider=self._llm.get_provider_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return []

        entries = self._parse_json_array(response)[: self._max_results]
        recommendations = self._resolve(entries, events)

        self._logger.info(
            "ai_ranking_complete",
            provider=self._llm.get_provider_name(),
            returned=len(entries),
            accepted=len(recommendations),
        )
        return recommendations

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _parse_json_array(self, response: str) -> list[Any]:
        """Return the model's JSON array, or an empty list when it is not one."""
        text = response.strip()
        fence_match = _JSON_FENCE_RE.search(text)
        if fence_match:
            text = fence_match.group(1).strip()

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            self._logger.warning(
                "ai_response_parse_failed",
                error=str(exc),
                response_preview=response[:200],
            )
            return []

        if not isinstance(parsed, list):
            self._logger.warning("ai_response_not_array", type=type(parsed).__name__)
            return []
        return parsed

    def _resolve(self, entries: list[Any], events: list[Event]) -> list[Recommendation]:
        by_name: dict[str, Event] = {}
        for event in events:
            by_name.setdefault(event.name, event)

        accepted: list[Recommendation] = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue

            confidence = entry.get("confidence")
            # bool is an int subclass; true/false is not a confidence.
            if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
                continue
            if confidence <= self._min_confidence or confidence > 1.0:
                continue

            concert_name = entry.get("concertName")
            event = by_name.get(concert_name) if isinstance(concert_name, str) else None
            if event is None:
                self._logger.debug("ai_match_unresolved", concert_name=concert_name)
                continue

            reason = entry.get("reason")
            accepted.append(
                Recommendation(
                    type=RecommendationType.AI_MATCH,
                    event=event,
                    reason=reason if isinstance(reason, str) and reason.strip() else _DEFAULT_REASON,
                    confidence=float(confidence),
                )
            )
        return accepted


class NullConcertRanker(IConcertRanker):
    """Stand-in used when no language model is configured; ranks nothing."""

    async def rank(
        self,
        top_artists: list[ArtistProfile],
        events: list[Event],
    ) -> list[Recommendation]:
        return []

    def is_enabled(self) -> bool:
        return False
