"""Itinerary stitching, costing and ranking."""

from .candidates import CandidateBatch, CandidateGenerator
from .costs import CostEstimate, estimate
from .ranking import build_weights, rank_and_label
from .service import PlanningOptions, plan, plan_itineraries

__all__ = [
    "CandidateBatch",
    "CandidateGenerator",
    "CostEstimate",
    "estimate",
    "build_weights",
    "rank_and_label",
    "PlanningOptions",
    "plan",
    "plan_itineraries",
]
