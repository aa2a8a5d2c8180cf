"""Composite scoring, deduplication and positional labeling of itineraries."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Sequence

from ...errors import InvalidOptions, InvalidPriority
from ...models.domain import PRIORITIES, Itinerary, ScoringWeights

BASE_WEIGHTS = ScoringWeights(time=0.45, cost=0.25, co2=0.20, reliability=0.10)
PRIORITY_BONUS = 0.25
# Puts the unit-less reliability shortfall on the same footing as seconds/currency/grams.
RELIABILITY_SCALE = 1000.0
DEDUP_BUCKET_SIZE = 60.0

LABELS: tuple[str, ...] = ("Recommended", "Fastest", "Cheapest", "Lowest CO₂", "Fewest transfers")
DEFAULT_LABEL = "Recommended"


def build_weights(priority: str) -> ScoringWeights:
    """Base weights plus a flat bonus on the priority dimension.

    The weights are left un-normalized: they sum to 1.25 once a priority is applied.
    """
    if priority not in PRIORITIES:
        raise InvalidPriority(f"Unknown priority '{priority}'. Expected one of: {', '.join(PRIORITIES)}.")
    return replace(BASE_WEIGHTS, **{priority: getattr(BASE_WEIGHTS, priority) + PRIORITY_BONUS})


def raw_score(itinerary: Itinerary, weights: ScoringWeights) -> float:
    return (
        weights.time * itinerary.total_duration_seconds
        + weights.cost * itinerary.total_cost_units
        + weights.co2 * itinerary.total_co2_grams
        + weights.reliability * (1 - itinerary.reliability_score) * RELIABILITY_SCALE
    )


def score_itineraries(itineraries: Sequence[Itinerary], weights: ScoringWeights) -> list[Itinerary]:
    return [replace(it, raw_score=raw_score(it, weights)) for it in itineraries]


def _bucket(score: float) -> int:
    # Half-minutes round up, so 2.5 lands in bucket 3.
    return math.floor(score / DEDUP_BUCKET_SIZE + 0.5)


def deduplicate(scored: Sequence[Itinerary]) -> list[Itinerary]:
    """Keep the lowest-scoring itinerary per scoring-minute bucket.

    Buckets keep first-seen order; on equal scores the earlier itinerary wins.
    """
    best: dict[int, Itinerary] = {}
    for itinerary in scored:
        if itinerary.raw_score is None:
            raise ValueError(f"Itinerary {itinerary.id} has not been scored.")
        key = _bucket(itinerary.raw_score)
        current = best.get(key)
        if current is None or itinerary.raw_score < current.raw_score:
            best[key] = itinerary
    return list(best.values())


def label_for_position(position: int) -> str:
    return LABELS[position] if position < len(LABELS) else DEFAULT_LABEL


def rank_and_label(
    itineraries: Sequence[Itinerary],
    priority: str = "time",
    top_k: int = 5,
) -> list[Itinerary]:
    if top_k <= 0:
        raise InvalidOptions(f"top_k must be a positive integer, got {top_k}.")
    weights = build_weights(priority)

    survivors = deduplicate(score_itineraries(itineraries, weights))
    # sorted() is stable, so equal scores keep input order.
    ranked = sorted(survivors, key=lambda it: it.raw_score)[:top_k]
    # Labels follow rank position only; they are not per-dimension winners.
    return [replace(it, label=label_for_position(i)) for i, it in enumerate(ranked)]
