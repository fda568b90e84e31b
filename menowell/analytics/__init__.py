"""MenoWell analytics and recommendation core.

Pure, stateless computation over a user's daily check-in history.

Modules:
    engine          — Correlations, predictive insights, pattern detection
    recommendations — Ranked personalized recommendations
    pipeline        — End-to-end analysis with the 7 check-in unlock gate
    content_loader  — Load/validate/hot-reload content_library.yaml
"""

from menowell.analytics.engine import (
    AnalyticsInputError,
    CorrelationResult,
    PatternInsight,
    PredictiveInsight,
    analyze_correlations,
    detect_patterns,
    generate_predictive_insights,
    pearson_correlation,
)
from menowell.analytics.pipeline import WellnessAnalysis, analyze_wellness, parse_check_ins
from menowell.analytics.recommendations import (
    PersonalizedRecommendation,
    filter_recommendations,
    generate_recommendations,
)

__all__ = [
    "AnalyticsInputError",
    "CorrelationResult",
    "PredictiveInsight",
    "PatternInsight",
    "PersonalizedRecommendation",
    "WellnessAnalysis",
    "analyze_correlations",
    "generate_predictive_insights",
    "detect_patterns",
    "pearson_correlation",
    "generate_recommendations",
    "filter_recommendations",
    "analyze_wellness",
    "parse_check_ins",
]
