"""End-to-end wellness analysis: check-ins in, ranked recommendations out.

Runs the analytics engine and feeds its three outputs into the
recommendation engine.  Below ``MIN_CHECK_INS_FOR_ANALYTICS`` check-ins the
analytics dashboard stays locked: correlations, predictions and patterns are
skipped, but recommendations are still generated from whatever history
exists.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import ValidationError

from menowell.analytics.engine import (
    AnalyticsInputError,
    CorrelationResult,
    PatternInsight,
    PredictiveInsight,
    analyze_correlations,
    detect_patterns,
    generate_predictive_insights,
)
from menowell.analytics.recommendations import (
    PersonalizedRecommendation,
    generate_contextual_recommendations,
    generate_recommendations,
)
from menowell.models.base import utc_now
from menowell.models.checkins import CheckIn, ContentItem

logger = logging.getLogger("menowell.analytics.pipeline")

MIN_CHECK_INS_FOR_ANALYTICS = 7


@dataclass
class WellnessAnalysis:
    """Everything the analytics dashboard and recommendations view show.

    Attributes:
        check_in_count:  Number of check-ins analysed.
        unlocked:        True once the analytics dashboard has enough history.
        correlations:    Empty while locked.
        predictions:     Empty while locked.
        patterns:        Empty while locked.
        recommendations: Ranked list, followed by contextual items if requested.
    """

    check_in_count: int
    unlocked: bool = False
    correlations: list[CorrelationResult] = field(default_factory=list)
    predictions: list[PredictiveInsight] = field(default_factory=list)
    patterns: list[PatternInsight] = field(default_factory=list)
    recommendations: list[PersonalizedRecommendation] = field(default_factory=list)


def parse_check_ins(records: Iterable[dict[str, Any]]) -> list[CheckIn]:
    """Validate raw check-in dicts (snake_case or camelCase keys).

    Raises:
        AnalyticsInputError: Listing every invalid record, e.g. an
            unparseable date, a rating outside 1–10, or an unknown body
            temperature category.
    """
    check_ins: list[CheckIn] = []
    errors: list[str] = []
    for index, record in enumerate(records):
        try:
            check_ins.append(CheckIn.model_validate(record))
        except ValidationError as exc:
            for err in exc.errors():
                loc = ".".join(str(part) for part in err["loc"])
                errors.append(f"check_ins[{index}].{loc}: {err['msg']}")

    if errors:
        raise AnalyticsInputError(
            f"{len(errors)} invalid check-in field(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )
    return check_ins


def analyze_wellness(
    check_ins: Sequence[CheckIn],
    content_library: Sequence[ContentItem],
    *,
    today: date | None = None,
    rng: random.Random | None = None,
    include_contextual: bool = False,
    current_hour: int | None = None,
) -> WellnessAnalysis:
    """Run correlations, predictions, patterns, then recommendations.

    Args:
        check_ins:          Check-in history, oldest first.
        content_library:    Content catalog passed through to recommendations.
        today:              Reference date for predictions (defaults to UTC today).
        rng:                Random source for hot flash timing.
        include_contextual: Append time-of-day recommendations after the ranked list.
        current_hour:       The user's local hour, used for contextual
                            recommendations (defaults to the current UTC hour).

    Returns:
        WellnessAnalysis.  With no check-ins every list is empty.
    """
    analysis = WellnessAnalysis(check_in_count=len(check_ins))
    if not check_ins:
        return analysis

    if len(check_ins) >= MIN_CHECK_INS_FOR_ANALYTICS:
        analysis.unlocked = True
        analysis.correlations = analyze_correlations(check_ins)
        analysis.predictions = generate_predictive_insights(check_ins, today=today)
        analysis.patterns = detect_patterns(check_ins, rng=rng)
    else:
        logger.info(
            "Analytics locked: %d/%d check-ins completed",
            len(check_ins), MIN_CHECK_INS_FOR_ANALYTICS,
        )

    analysis.recommendations = generate_recommendations(
        check_ins,
        analysis.predictions,
        analysis.correlations,
        analysis.patterns,
        content_library,
    )

    if include_contextual:
        hour = current_hour if current_hour is not None else utc_now().hour
        analysis.recommendations.extend(generate_contextual_recommendations(hour))

    return analysis
