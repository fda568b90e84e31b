"""Personalized recommendation engine.

Turns check-in history plus the analytics engine's outputs into a ranked
list of recommendations.  Four generators run in a fixed order (content,
lifestyle, intervention, medical) and append to one list, which is then
stably sorted by priority.  Recommendations that share a priority keep the
order their generator produced them in.

Every recommendation template has a fixed ``id`` so the same situation
always yields the same id.  UI state (dismissed, followed) is keyed on it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from menowell.analytics.engine import (
    RECENT_WINDOW,
    CorrelationResult,
    PatternInsight,
    PredictiveInsight,
    validate_history,
)
from menowell.models.checkins import CheckIn, ContentItem

logger = logging.getLogger("menowell.analytics.recommendations")

PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}

# Window for the medical escalation checks
MEDICAL_WINDOW = 14


@dataclass
class PersonalizedRecommendation:
    """A single actionable recommendation.

    Attributes:
        id:                Stable template id (e.g. 'content-energy-boost').
        type:              'content', 'lifestyle', 'intervention', or 'medical'.
        priority:          'high', 'medium', or 'low'.
        title:             Short display title.
        description:       One-line summary.
        reasoning:         Why the user is seeing this.
        action_steps:      Ordered steps to follow.
        estimated_benefit: Expected outcome.
        timeframe:         When and how often.
    """

    id: str
    type: str
    priority: str
    title: str
    description: str
    reasoning: str
    action_steps: list[str] = field(default_factory=list)
    estimated_benefit: str = ""
    timeframe: str = ""


@dataclass
class CurrentState:
    """Rolling averages over the most recent check-ins."""

    avg_mood: float
    avg_energy: float
    avg_sleep: float
    avg_stress: float

    @classmethod
    def from_check_ins(cls, check_ins: Sequence[CheckIn]) -> CurrentState:
        recent = check_ins[-RECENT_WINDOW:]
        n = len(recent)
        return cls(
            avg_mood=sum(c.mood for c in recent) / n,
            avg_energy=sum(c.energy for c in recent) / n,
            avg_sleep=sum(c.sleep for c in recent) / n,
            avg_stress=sum(c.stress for c in recent) / n,
        )


def priority_rank(recommendation: PersonalizedRecommendation) -> int:
    return PRIORITY_RANK.get(recommendation.priority, 0)


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


def _content_recommendations(
    state: CurrentState,
    content_library: Sequence[ContentItem],
) -> list[PersonalizedRecommendation]:
    # TODO: match content_library items by category/tags instead of the
    # hardcoded reading lists below.
    recommendations = []

    if state.avg_mood < 5:
        recommendations.append(
            PersonalizedRecommendation(
                id="content-emotional-support",
                type="content",
                priority="high",
                title="Emotional Support Content",
                description="Explore content specifically designed to boost mood and emotional wellbeing",
                reasoning="Your recent mood scores suggest you could benefit from targeted emotional support",
                action_steps=[
                    'Start with "Understanding Emotional Changes in Menopause"',
                    "Try the self-compassion audio exercises",
                    "Read about mood stabilization techniques",
                ],
                estimated_benefit="Improved mood within 1-2 weeks",
                timeframe="Start today, 15-20 minutes daily",
            )
        )

    if state.avg_energy < 5:
        recommendations.append(
            PersonalizedRecommendation(
                id="content-energy-boost",
                type="content",
                priority="medium",
                title="Energy Enhancement Resources",
                description="Learn evidence-based strategies to naturally boost your energy levels",
                reasoning="Your energy levels have been consistently low",
                action_steps=[
                    "Review nutrition content for energy-boosting foods",
                    "Learn about hormone-energy connections",
                    "Explore gentle exercise recommendations",
                ],
                estimated_benefit="Noticeable energy improvement in 1-3 weeks",
                timeframe="10-15 minutes daily reading/listening",
            )
        )

    return recommendations


def _lifestyle_recommendations(
    state: CurrentState,
    correlations: Sequence[CorrelationResult],
) -> list[PersonalizedRecommendation]:
    recommendations = []

    sleep_correlation = next(
        (
            c for c in correlations
            if "sleep" in (c.metric1, c.metric2) and c.significance == "high"
        ),
        None,
    )

    if state.avg_sleep < 6 and sleep_correlation is not None:
        other_metric = (
            sleep_correlation.metric2
            if sleep_correlation.metric1 == "sleep"
            else sleep_correlation.metric1
        )
        recommendations.append(
            PersonalizedRecommendation(
                id="lifestyle-sleep-optimization",
                type="lifestyle",
                priority="high",
                title="Sleep Optimization Protocol",
                description="Implement a comprehensive sleep improvement strategy",
                reasoning=f"Poor sleep is strongly correlated with {other_metric} issues",
                action_steps=[
                    "Set consistent bedtime (within 30 minutes each night)",
                    "Create 30-minute wind-down routine",
                    "Optimize bedroom temperature (65-68°F)",
                    "Limit caffeine after 2 PM",
                    "Track sleep quality in daily check-ins",
                ],
                estimated_benefit="Improved overall wellbeing within 2-3 weeks",
                timeframe="Start tonight, maintain consistently",
            )
        )

    if state.avg_stress > 7:
        recommendations.append(
            PersonalizedRecommendation(
                id="lifestyle-stress-management",
                type="lifestyle",
                priority="high",
                title="Comprehensive Stress Reduction Plan",
                description="Multi-faceted approach to managing elevated stress levels",
                reasoning="Your stress levels are consistently high, which impacts multiple aspects of health",
                action_steps=[
                    "Practice 10-minute daily meditation",
                    "Implement 4-7-8 breathing technique during stressful moments",
                    "Schedule 15 minutes of outdoor time daily",
                    "Create boundaries around work/personal time",
                    "Use progressive muscle relaxation before bed",
                ],
                estimated_benefit="Reduced stress and improved sleep within 1-2 weeks",
                timeframe="Daily practice, 20-30 minutes total",
            )
        )

    return recommendations


def _intervention_recommendations(
    state: CurrentState,
    insights: Sequence[PredictiveInsight],
) -> list[PersonalizedRecommendation]:
    recommendations = []

    hot_flash_insight = next(
        (i for i in insights if i.type == "hot-flash" and i.probability > 0.6),
        None,
    )
    if hot_flash_insight is not None:
        recommendations.append(
            PersonalizedRecommendation(
                id="intervention-hot-flash-prep",
                type="intervention",
                priority="medium",
                title="Hot Flash Prevention Strategy",
                description="Proactive measures to reduce hot flash intensity and frequency",
                reasoning=hot_flash_insight.reasoning,
                action_steps=[
                    "Keep cooling towel and water bottle ready",
                    "Wear breathable, layered clothing",
                    "Practice stress-reduction techniques",
                    "Avoid known triggers (spicy foods, alcohol)",
                    "Have self-worth toolkit ready for emotional support",
                ],
                estimated_benefit="Reduced hot flash intensity and better coping",
                timeframe="Implement immediately, use as needed",
            )
        )

    if state.avg_mood < 5 or state.avg_stress > 7:
        recommendations.append(
            PersonalizedRecommendation(
                id="intervention-selfworth-timing",
                type="intervention",
                priority="high",
                title="Optimal Self-Worth Toolkit Usage",
                description="Use audio practices when they'll have maximum impact",
                reasoning="Current mood/stress patterns indicate optimal timing for intervention",
                action_steps=[
                    "Use morning affirmation audio upon waking",
                    "Practice self-compassion exercise during stress peaks",
                    "Listen to confidence-building content before challenging situations",
                    "Use relaxation audio before sleep",
                ],
                estimated_benefit="Improved emotional resilience and self-confidence",
                timeframe="Use 2-3 times daily during difficult periods",
            )
        )

    return recommendations


def longest_high_stress_streak(check_ins: Iterable[CheckIn]) -> int:
    """Length of the longest run of consecutive check-ins with stress > 7."""
    longest = current = 0
    for check_in in check_ins:
        if check_in.stress > 7:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _medical_recommendations(
    check_ins: Sequence[CheckIn],
) -> list[PersonalizedRecommendation]:
    recommendations = []

    window = check_ins[-MEDICAL_WINDOW:]
    severe_sleep_days = sum(1 for c in window if c.sleep < 3)
    severe_mood_days = sum(1 for c in window if c.mood < 3)
    stress_streak = longest_high_stress_streak(window)

    logger.debug(
        "Medical window: severe_sleep=%d severe_mood=%d stress_streak=%d",
        severe_sleep_days, severe_mood_days, stress_streak,
    )

    if severe_sleep_days > 7:
        recommendations.append(
            PersonalizedRecommendation(
                id="medical-sleep-consultation",
                type="medical",
                priority="high",
                title="Sleep Specialist Consultation",
                description="Consider professional evaluation for persistent sleep issues",
                reasoning="Severe sleep difficulties for over a week may require medical intervention",
                action_steps=[
                    "Document sleep patterns and symptoms",
                    "Schedule appointment with healthcare provider",
                    "Discuss hormone therapy options if appropriate",
                    "Consider sleep study if recommended",
                ],
                estimated_benefit="Professional treatment plan for better sleep",
                timeframe="Schedule within 1-2 weeks",
            )
        )

    if severe_mood_days > 5 or stress_streak > 7:
        recommendations.append(
            PersonalizedRecommendation(
                id="medical-mental-health",
                type="medical",
                priority="high",
                title="Mental Health Support",
                description="Professional support for persistent mood challenges",
                reasoning="Extended periods of low mood or high stress may benefit from professional support",
                action_steps=[
                    "Consider therapy or counseling",
                    "Discuss with healthcare provider about hormone impacts on mood",
                    "Explore support groups for menopause",
                    "Document mood patterns and triggers",
                ],
                estimated_benefit="Professional strategies for mood management",
                timeframe="Reach out within 1 week",
            )
        )

    return recommendations


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def generate_recommendations(
    check_ins: Sequence[CheckIn],
    insights: Sequence[PredictiveInsight],
    correlations: Sequence[CorrelationResult],
    patterns: Sequence[PatternInsight],
    content_library: Sequence[ContentItem],
) -> list[PersonalizedRecommendation]:
    """Build the ranked recommendation list.

    Args:
        check_ins:       Check-in history, oldest first.
        insights:        Output of ``generate_predictive_insights``.
        correlations:    Output of ``analyze_correlations``.
        patterns:        Output of ``detect_patterns``.  Reserved; no current
                         template reads it.
        content_library: Content catalog.  Reserved; content recommendations
                         use fixed templates for now.

    Returns:
        Recommendations sorted high → medium → low, empty when there are no
        check-ins.
    """
    if not check_ins:
        return []

    validate_history(check_ins)
    state = CurrentState.from_check_ins(check_ins)

    recommendations: list[PersonalizedRecommendation] = []
    recommendations.extend(_content_recommendations(state, content_library))
    recommendations.extend(_lifestyle_recommendations(state, correlations))
    recommendations.extend(_intervention_recommendations(state, insights))
    recommendations.extend(_medical_recommendations(check_ins))

    logger.info(
        "Generated %d recommendations from %d check-ins",
        len(recommendations), len(check_ins),
    )

    # sorted() is stable: equal priorities keep generator order
    return sorted(recommendations, key=priority_rank, reverse=True)


def generate_contextual_recommendations(current_hour: int) -> list[PersonalizedRecommendation]:
    """Time-of-day and general wellbeing suggestions, independent of history.

    Args:
        current_hour: Local hour of day (0–23).

    Returns:
        Recommendations in display order.  They are not ranked.
    """
    recommendations = []

    if current_hour < 12:
        recommendations.append(
            PersonalizedRecommendation(
                id="morning-routine",
                type="lifestyle",
                priority="medium",
                title="Optimize Your Morning Routine",
                description="Start your day with intention to support better menopause symptoms management",
                reasoning="Morning routines set the tone for hormone regulation throughout the day",
                action_steps=[
                    "Drink a glass of water upon waking",
                    "Practice 5 minutes of deep breathing",
                    "Eat a protein-rich breakfast",
                    "Take morning supplements if prescribed",
                ],
                estimated_benefit="Improved energy and mood stability",
                timeframe="Start today, benefits within 1 week",
            )
        )

    recommendations.append(
        PersonalizedRecommendation(
            id="seasonal-adjustment",
            type="lifestyle",
            priority="low",
            title="Seasonal Wellness Adjustment",
            description="Adapt your routine for current seasonal changes affecting menopause symptoms",
            reasoning="Seasonal changes can impact hormone fluctuations and symptom severity",
            action_steps=[
                "Adjust room temperature for comfort",
                "Modify clothing layers strategy",
                "Consider light therapy if needed",
                "Update hydration goals for season",
            ],
            estimated_benefit="Better adaptation to seasonal symptom changes",
            timeframe="Implement over next few days",
        )
    )

    recommendations.append(
        PersonalizedRecommendation(
            id="social-connection",
            type="lifestyle",
            priority="medium",
            title="Strengthen Social Connections",
            description="Maintain supportive relationships that positively impact mental health during menopause",
            reasoning="Social support is crucial for managing menopause-related mood changes",
            action_steps=[
                "Schedule regular check-ins with friends/family",
                "Join a menopause support group",
                "Plan social activities you enjoy",
                "Share your experience with trusted individuals",
            ],
            estimated_benefit="Improved emotional well-being and reduced isolation",
            timeframe="Start this week, ongoing benefits",
        )
    )

    return recommendations


def filter_recommendations(
    recommendations: Iterable[PersonalizedRecommendation],
    types: Iterable[str] = (),
    priorities: Iterable[str] = (),
    search: str = "",
    completed_ids: Iterable[str] = (),
    show_completed: bool = False,
) -> list[PersonalizedRecommendation]:
    """Filter recommendations the way the recommendations view does.

    Empty ``types`` / ``priorities`` match everything.  ``search`` is a
    case-insensitive substring match on title or description.  Ids in
    ``completed_ids`` are hidden unless ``show_completed`` is set.
    """
    type_set = set(types)
    priority_set = set(priorities)
    completed = set(completed_ids)
    needle = search.lower()

    filtered = []
    for rec in recommendations:
        if type_set and rec.type not in type_set:
            continue
        if priority_set and rec.priority not in priority_set:
            continue
        if needle and needle not in rec.title.lower() and needle not in rec.description.lower():
            continue
        if not show_completed and rec.id in completed:
            continue
        filtered.append(rec)
    return filtered
