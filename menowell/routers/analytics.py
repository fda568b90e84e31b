"""Analytics endpoints: wellness analysis and recommendation filtering.

The caller supplies the check-in history; nothing is read from or written
to storage here.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException

from menowell.analytics.content_loader import get_content_library
from menowell.analytics.engine import AnalyticsInputError
from menowell.analytics.pipeline import (
    MIN_CHECK_INS_FOR_ANALYTICS,
    analyze_wellness,
    parse_check_ins,
)
from menowell.analytics.recommendations import filter_recommendations
from menowell.config import get_settings
from menowell.models.analytics import (
    RecommendationFilterRequest,
    RecommendationResponse,
    WellnessAnalysisRequest,
    WellnessAnalysisResponse,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])
logger = logging.getLogger("menowell.analytics.api")


@router.post("/wellness", response_model=WellnessAnalysisResponse)
async def analyze(body: WellnessAnalysisRequest) -> Any:
    settings = get_settings()
    include_contextual = (
        body.include_contextual
        if body.include_contextual is not None
        else settings.include_contextual_recommendations
    )

    try:
        check_ins = parse_check_ins(body.check_ins)
        # Storage returns newest first; the engines expect oldest first
        check_ins.sort(key=lambda c: c.date)
        analysis = analyze_wellness(
            check_ins,
            get_content_library().items,
            today=body.today,
            include_contextual=include_contextual,
            current_hour=body.current_hour,
        )
    except AnalyticsInputError as exc:
        logger.warning("Rejected analytics request: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return WellnessAnalysisResponse.model_validate(
        {**asdict(analysis), "check_ins_required": MIN_CHECK_INS_FOR_ANALYTICS}
    )


@router.post(
    "/recommendations/filter", response_model=list[RecommendationResponse]
)
async def filter_endpoint(body: RecommendationFilterRequest) -> Any:
    return filter_recommendations(
        body.recommendations,
        types=body.types,
        priorities=body.priorities,
        search=body.search,
        completed_ids=body.completed_ids,
        show_completed=body.show_completed,
    )
