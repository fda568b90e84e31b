"""Request and response schemas for the analytics API.

Responses use the same camelCase aliases the web client sends, so a
recommendation list returned by ``/wellness`` can be posted back to
``/recommendations/filter`` unchanged.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import Field

from menowell.models.base import MenoWellBase


# ---------- Requests ----------


class WellnessAnalysisRequest(MenoWellBase):
    # Raw records; validated one by one so every bad record is reported
    check_ins: list[dict[str, Any]] = Field(default_factory=list, max_length=1000)
    include_contextual: bool | None = None  # None = use server setting
    today: dt.date | None = None
    current_hour: int | None = Field(default=None, ge=0, le=23)


# ---------- Responses ----------


class CorrelationResponse(MenoWellBase):
    metric1: str
    metric2: str
    correlation: float
    significance: str
    description: str


class PredictiveInsightResponse(MenoWellBase):
    type: str
    probability: float
    date: str
    confidence: str
    reasoning: str
    recommendations: list[str] = Field(default_factory=list)


class PatternInsightResponse(MenoWellBase):
    pattern: str
    frequency: float
    strength: float
    description: str
    action_items: list[str] = Field(default_factory=list)


class RecommendationResponse(MenoWellBase):
    id: str
    type: str
    priority: str
    title: str
    description: str
    reasoning: str
    action_steps: list[str] = Field(default_factory=list)
    estimated_benefit: str = ""
    timeframe: str = ""


class WellnessAnalysisResponse(MenoWellBase):
    unlocked: bool
    check_in_count: int
    check_ins_required: int
    correlations: list[CorrelationResponse] = Field(default_factory=list)
    predictions: list[PredictiveInsightResponse] = Field(default_factory=list)
    patterns: list[PatternInsightResponse] = Field(default_factory=list)
    recommendations: list[RecommendationResponse] = Field(default_factory=list)


class RecommendationFilterRequest(MenoWellBase):
    recommendations: list[RecommendationResponse]
    types: list[str] = Field(default_factory=list)
    priorities: list[str] = Field(default_factory=list)
    search: str = ""
    completed_ids: list[str] = Field(default_factory=list)
    show_completed: bool = False
