"""Analytics engine for daily wellness check-ins.

Derives three independent analyses from a user's check-in history:

- Pairwise Pearson correlations between a fixed set of metric pairs
- Short-horizon predictive insights (hot flash, energy dip, sleep quality)
- Recurring patterns (weekly mood cycle, hot flash timing, sleep → energy cascade)

Every function is pure: no I/O, no shared state.  Histories are processed in
the order given, so callers must pass check-ins oldest first.  Too little
history is not an error; it yields an empty list.

All numeric thresholds below are part of the output contract.  Changing any
of them changes which insights a user sees.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta

from menowell.models.base import utc_today
from menowell.models.checkins import (
    RATING_FIELDS,
    RATING_MAX,
    RATING_MIN,
    BodyTemperature,
    CheckIn,
    HotFlashPeriod,
    TrackerReading,
)

logger = logging.getLogger("menowell.analytics.engine")

# Minimum history sizes
MIN_CHECK_INS_FOR_CORRELATIONS = 7
MIN_CHECK_INS_FOR_PREDICTIONS = 14
MIN_CHECK_INS_FOR_PATTERNS = 14

# Rolling window used for "current state" averages
RECENT_WINDOW = 7

# Correlation significance bands on |r|
HIGH_SIGNIFICANCE = 0.7
MEDIUM_SIGNIFICANCE = 0.4

WEEKDAY_NAMES = [
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
]

_SYMPTOMATIC_TEMPERATURES = (BodyTemperature.hot_flash, BodyTemperature.night_sweats)


class AnalyticsInputError(ValueError):
    """Raised when check-in data or metric series are malformed."""


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class CorrelationResult:
    """Pearson correlation between two check-in metrics.

    Attributes:
        metric1:      First metric name (e.g. 'sleep').
        metric2:      Second metric name (e.g. 'mood').
        correlation:  Pearson r in [-1, 1].
        significance: 'high', 'medium', or 'low' from fixed |r| cutoffs.
        description:  Human-readable summary for display.
    """

    metric1: str
    metric2: str
    correlation: float
    significance: str
    description: str


@dataclass
class PredictiveInsight:
    """A short-horizon risk signal.

    Attributes:
        type:            'hot-flash', 'energy-dip', 'sleep-quality', or 'stress-spike'.
        probability:     Fixed probability for this signal type (0.0–1.0).
        date:            ISO date the signal applies to.
        confidence:      'high', 'medium', or 'low'.
        reasoning:       Why this signal fired.
        recommendations: What to do about it.
    """

    type: str
    probability: float
    date: str
    confidence: str
    reasoning: str
    recommendations: list[str] = field(default_factory=list)


@dataclass
class PatternInsight:
    """A recurring structure detected across the whole history.

    Attributes:
        pattern:      Display name of the pattern.
        frequency:    Cycle length or occurrence rate, depending on the pattern.
        strength:     Pattern strength.  Usually 0.0–1.0, but the weekly mood
                      pattern reports its raw variability and hot flash timing
                      reports ``frequency * 2`` without clamping.
        description:  Human-readable summary.
        action_items: Suggested follow-ups.
    """

    pattern: str
    frequency: float
    strength: float
    description: str
    action_items: list[str] = field(default_factory=list)


@dataclass
class WeeklyPattern:
    """Per-weekday averages of one metric."""

    variability: float
    cycle_length: int
    pattern: str  # 'peak' or 'dip'
    peak_day: str
    low_day: str
    day_averages: dict[int, float] = field(default_factory=dict)


@dataclass
class TemperaturePattern:
    frequency: float
    intensity: float
    timing: str


@dataclass
class CascadePattern:
    strength: float
    frequency: float
    cascades: int = 0


# ---------------------------------------------------------------------------
# Statistics helpers
# ---------------------------------------------------------------------------


def _is_finite_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Compute the Pearson correlation coefficient between two series.

    Uses the raw-sums form
    ``r = (nΣxy − ΣxΣy) / sqrt((nΣx² − (Σx)²)(nΣy² − (Σy)²))``.
    If either series has no variance the result is 0.0.

    Args:
        x: First series.
        y: Second series, same length as ``x``.

    Returns:
        Pearson r between -1.0 and 1.0.

    Raises:
        AnalyticsInputError: If the series are empty, differ in length, or
            contain non-finite values.
    """
    if len(x) != len(y):
        raise AnalyticsInputError(
            f"Series length mismatch: {len(x)} vs {len(y)}"
        )
    if not x:
        raise AnalyticsInputError("Cannot correlate empty series")
    for value in (*x, *y):
        if not _is_finite_number(value):
            raise AnalyticsInputError(f"Non-finite value in series: {value!r}")

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_xx = sum(xi * xi for xi in x)
    sum_yy = sum(yi * yi for yi in y)

    numerator = n * sum_xy - sum_x * sum_y
    variance_product = (n * sum_xx - sum_x * sum_x) * (n * sum_yy - sum_y * sum_y)
    if variance_product <= 0:
        return 0.0

    r = numerator / math.sqrt(variance_product)
    # Float error can push perfect relationships a hair past ±1
    return max(-1.0, min(1.0, r))


def significance_band(r: float) -> str:
    """Map a correlation coefficient to its significance band."""
    magnitude = abs(r)
    if magnitude > HIGH_SIGNIFICANCE:
        return "high"
    if magnitude > MEDIUM_SIGNIFICANCE:
        return "medium"
    return "low"


def validate_history(check_ins: Sequence[CheckIn]) -> None:
    """Reject records whose ratings are not finite numbers on the 1–10 scale.

    Pydantic already enforces this for validated models; this catches
    records built with ``model_construct`` or mutated after validation.
    """
    for index, check_in in enumerate(check_ins):
        if not isinstance(getattr(check_in, "date", None), date):
            raise AnalyticsInputError(
                f"Check-in #{index} has an invalid date: {getattr(check_in, 'date', None)!r}"
            )
        for metric in RATING_FIELDS:
            value = getattr(check_in, metric, None)
            if not _is_finite_number(value) or not (RATING_MIN <= value <= RATING_MAX):
                raise AnalyticsInputError(
                    f"Check-in #{index} ({check_in.date}) has invalid {metric}: {value!r}"
                )


def _average(check_ins: Sequence[CheckIn], metric: str) -> float:
    return sum(getattr(c, metric) for c in check_ins) / len(check_ins)


def _weekday_index(d: date) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return (d.weekday() + 1) % 7


# ---------------------------------------------------------------------------
# Correlations
# ---------------------------------------------------------------------------

# (metric1, metric2, description selector).  The pairs and their wording are
# fixed; this is deliberately not an all-pairs matrix.
_CORRELATION_PAIRS: list[tuple[str, str, Callable[[float], str]]] = [
    (
        "sleep",
        "mood",
        lambda r: (
            "Better sleep strongly correlates with improved mood"
            if r > 0.4
            else "Sleep and mood show weak correlation"
        ),
    ),
    (
        "energy",
        "stress",
        lambda r: (
            "Higher stress significantly reduces energy levels"
            if r < -0.4
            else "Stress and energy show moderate relationship"
        ),
    ),
    (
        "libido",
        "energy",
        lambda r: (
            "Energy levels strongly influence libido"
            if r > 0.4
            else "Libido and energy show variable relationship"
        ),
    ),
]


def analyze_correlations(check_ins: Sequence[CheckIn]) -> list[CorrelationResult]:
    """Correlate sleep↔mood, energy↔stress and libido↔energy.

    Args:
        check_ins: Check-in history.

    Returns:
        Exactly three CorrelationResult objects, or an empty list when fewer
        than 7 check-ins are available.
    """
    if len(check_ins) < MIN_CHECK_INS_FOR_CORRELATIONS:
        logger.info(
            "Insufficient check-ins for correlations: %d (need %d)",
            len(check_ins), MIN_CHECK_INS_FOR_CORRELATIONS,
        )
        return []

    validate_history(check_ins)

    results: list[CorrelationResult] = []
    for metric1, metric2, describe in _CORRELATION_PAIRS:
        r = pearson_correlation(
            [getattr(c, metric1) for c in check_ins],
            [getattr(c, metric2) for c in check_ins],
        )
        results.append(
            CorrelationResult(
                metric1=metric1,
                metric2=metric2,
                correlation=r,
                significance=significance_band(r),
                description=describe(r),
            )
        )
        logger.debug("Correlation %s/%s: r=%.3f", metric1, metric2, r)

    return results


# ---------------------------------------------------------------------------
# Predictive insights
# ---------------------------------------------------------------------------


def generate_predictive_insights(
    check_ins: Sequence[CheckIn],
    tracker_data: Sequence[TrackerReading] | None = None,
    today: date | None = None,
) -> list[PredictiveInsight]:
    """Emit short-horizon risk signals from the last 7 check-ins.

    Signals are independent and may co-occur.  They are returned in check
    order: hot flash, energy dip, sleep quality.

    Args:
        check_ins:    Check-in history, oldest first.
        tracker_data: Device tracker readings.  Accepted but not yet used.
        today:        Reference date for target dates.  Defaults to today (UTC).

    Returns:
        List of PredictiveInsight, empty when fewer than 14 check-ins exist.
    """
    if len(check_ins) < MIN_CHECK_INS_FOR_PREDICTIONS:
        logger.info(
            "Insufficient check-ins for predictions: %d (need %d)",
            len(check_ins), MIN_CHECK_INS_FOR_PREDICTIONS,
        )
        return []

    validate_history(check_ins)

    today = today or utc_today()
    tomorrow = today + timedelta(days=1)

    recent = check_ins[-RECENT_WINDOW:]
    avg_stress = _average(recent, "stress")
    avg_sleep = _average(recent, "sleep")
    avg_energy = _average(recent, "energy")

    # Hot flash frequency spans the whole history, not just the window
    hot_flash_days = sum(
        1 for c in check_ins if c.body_temperature == BodyTemperature.hot_flash
    )
    hot_flash_freq = hot_flash_days / len(check_ins)

    logger.debug(
        "Recent averages: stress=%.2f sleep=%.2f energy=%.2f hot_flash_freq=%.2f",
        avg_stress, avg_sleep, avg_energy, hot_flash_freq,
    )

    insights: list[PredictiveInsight] = []

    if avg_stress > 7 and avg_sleep < 5 and hot_flash_freq > 0.3:
        insights.append(
            PredictiveInsight(
                type="hot-flash",
                probability=0.75,
                date=tomorrow.isoformat(),
                confidence="high",
                reasoning="High stress and poor sleep increase hot flash likelihood",
                recommendations=[
                    "Practice evening relaxation techniques",
                    "Keep bedroom cool tonight",
                    "Avoid caffeine after 2 PM",
                    "Try deep breathing exercises",
                ],
            )
        )

    if avg_energy < 4 and avg_sleep < 6:
        insights.append(
            PredictiveInsight(
                type="energy-dip",
                probability=0.8,
                date=tomorrow.isoformat(),
                confidence="high",
                reasoning="Poor sleep pattern indicates likely energy challenges",
                recommendations=[
                    "Plan lighter activities tomorrow",
                    "Prioritize protein-rich breakfast",
                    "Schedule afternoon rest break",
                    "Stay hydrated throughout day",
                ],
            )
        )

    if avg_stress > 6:
        insights.append(
            PredictiveInsight(
                type="sleep-quality",
                probability=0.65,
                date=today.isoformat(),
                confidence="medium",
                reasoning="Elevated stress levels may impact tonight's sleep",
                recommendations=[
                    "Start wind-down routine 1 hour early",
                    "Try meditation or journaling",
                    "Limit screen time before bed",
                    "Consider herbal tea",
                ],
            )
        )

    return insights


# ---------------------------------------------------------------------------
# Pattern detection
# ---------------------------------------------------------------------------


def analyze_weekly_pattern(check_ins: Sequence[CheckIn], metric: str) -> WeeklyPattern:
    """Average a metric per weekday and find the best and worst days.

    Ties for the best or worst day resolve to the earliest weekday
    (Sunday first).

    Args:
        check_ins: Non-empty check-in history.
        metric:    'mood', 'energy', or 'stress'.

    Returns:
        WeeklyPattern with variability = best average − worst average.
    """
    buckets: dict[int, list[int]] = {}
    for check_in in check_ins:
        buckets.setdefault(_weekday_index(check_in.date), []).append(
            getattr(check_in, metric)
        )

    day_averages = {
        day: sum(values) / len(values) for day, values in sorted(buckets.items())
    }

    max_day = min_day = next(iter(day_averages))
    for day, avg in day_averages.items():
        if avg > day_averages[max_day]:
            max_day = day
        if avg < day_averages[min_day]:
            min_day = day

    max_avg = day_averages[max_day]
    min_avg = day_averages[min_day]

    return WeeklyPattern(
        variability=max_avg - min_avg,
        cycle_length=7,
        pattern="peak" if max_avg > (min_avg + max_avg) / 2 else "dip",
        peak_day=WEEKDAY_NAMES[max_day],
        low_day=WEEKDAY_NAMES[min_day],
        day_averages=day_averages,
    )


def _is_morning_episode(check_in: CheckIn, rng: random.Random) -> bool:
    """Classify one symptomatic day as a morning episode.

    Uses the logged period when present.  Otherwise falls back to a random
    draw, since check-ins carry no time of day.
    """
    if check_in.hot_flash_period is not None:
        return check_in.hot_flash_period == HotFlashPeriod.morning
    return rng.random() > 0.7


def analyze_temperature_pattern(
    check_ins: Sequence[CheckIn], rng: random.Random
) -> TemperaturePattern:
    """Measure how often hot flashes or night sweats occur and when."""
    symptomatic = [
        c for c in check_ins if c.body_temperature in _SYMPTOMATIC_TEMPERATURES
    ]
    frequency = len(symptomatic) / len(check_ins)

    morning_count = sum(1 for c in symptomatic if _is_morning_episode(c, rng))
    timing = (
        "in the morning" if morning_count > len(symptomatic) / 2 else "in the evening"
    )

    return TemperaturePattern(
        frequency=frequency,
        intensity=frequency * 2,
        timing=timing,
    )


def analyze_sleep_energy_cascade(check_ins: Sequence[CheckIn]) -> CascadePattern:
    """Count nights of poor sleep followed by a low-energy day.

    A cascade is ``sleep < 5`` on day i and ``energy < 5`` on day i+1.
    """
    comparisons = len(check_ins) - 1
    cascades = sum(
        1
        for current, following in zip(check_ins, check_ins[1:])
        if current.sleep < 5 and following.energy < 5
    )
    return CascadePattern(
        strength=cascades / comparisons if comparisons > 0 else 0.0,
        frequency=cascades / len(check_ins),
        cascades=cascades,
    )


def detect_patterns(
    check_ins: Sequence[CheckIn],
    rng: random.Random | None = None,
) -> list[PatternInsight]:
    """Detect weekly mood, hot flash timing, and sleep → energy patterns.

    Args:
        check_ins: Check-in history, oldest first.
        rng:       Random source for the hot flash timing fallback.  Pass a
                   seeded ``random.Random`` for reproducible output.

    Returns:
        List of PatternInsight, empty when fewer than 14 check-ins exist.
    """
    if len(check_ins) < MIN_CHECK_INS_FOR_PATTERNS:
        logger.info(
            "Insufficient check-ins for pattern detection: %d (need %d)",
            len(check_ins), MIN_CHECK_INS_FOR_PATTERNS,
        )
        return []

    validate_history(check_ins)
    rng = rng or random.Random()

    patterns: list[PatternInsight] = []

    weekly = analyze_weekly_pattern(check_ins, "mood")
    logger.debug("Weekly mood variability: %.2f", weekly.variability)
    if weekly.variability > 2:
        patterns.append(
            PatternInsight(
                pattern="Weekly Mood Fluctuation",
                frequency=weekly.cycle_length,
                strength=weekly.variability,
                description=f"Mood tends to {weekly.pattern} on {weekly.peak_day}s",
                action_items=[
                    f"Plan self-care activities for {weekly.low_day}s",
                    "Track potential triggers on difficult days",
                    "Schedule important tasks on higher-mood days",
                ],
            )
        )

    temperature = analyze_temperature_pattern(check_ins, rng)
    if temperature.frequency > 0.2:
        patterns.append(
            PatternInsight(
                pattern="Hot Flash Timing",
                frequency=temperature.frequency,
                strength=temperature.intensity,
                description=f"Hot flashes occur most often {temperature.timing}",
                action_items=[
                    "Prepare cooling strategies for identified trigger times",
                    "Track environmental factors during peak times",
                    "Consider timing of meals and activities",
                ],
            )
        )

    cascade = analyze_sleep_energy_cascade(check_ins)
    if cascade.strength > 0.6:
        patterns.append(
            PatternInsight(
                pattern="Sleep-Energy Cascade",
                frequency=cascade.frequency,
                strength=cascade.strength,
                description="Poor sleep consistently leads to low energy the following day",
                action_items=[
                    "Prioritize sleep hygiene as primary energy strategy",
                    "Plan lighter schedules after poor sleep nights",
                    "Implement consistent bedtime routine",
                ],
            )
        )

    return patterns
