"""Merges the three matching tiers into the final recommendation list."""

from __future__ import annotations

from src.models.recommendation import Recommendation

MAX_RECOMMENDATIONS = 10


def merge_recommendations(
    direct: list[Recommendation],
    ai: list[Recommendation],
    similarity: list[Recommendation],
    limit: int = MAX_RECOMMENDATIONS,
) -> list[Recommendation]:
    """Combine the tiers into one ranked, capped list.

    Tiers are concatenated direct, then AI, then similarity.  Only the
    first recommendation per event name survives, so a direct match
    always beats an AI or similarity match for the same event.  The
    survivors are sorted by confidence, highest first; ``sorted`` is
    stable, so equal confidences keep their tier order.
    """
    seen: set[str] = set()
    unique: list[Recommendation] = []
    for rec in [*direct, *ai, *similarity]:
        if rec.event.name in seen:
            continue
        seen.add(rec.event.name)
        unique.append(rec)

    ranked = sorted(unique, key=lambda rec: rec.confidence, reverse=True)
    return ranked[:limit]
