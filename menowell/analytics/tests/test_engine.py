"""Tests for the analytics engine: correlations, predictive insights, patterns."""

from __future__ import annotations

from datetime import date

import pytest

from menowell.analytics.engine import (
    AnalyticsInputError,
    analyze_correlations,
    analyze_sleep_energy_cascade,
    analyze_weekly_pattern,
    detect_patterns,
    generate_predictive_insights,
    pearson_correlation,
    significance_band,
)
from menowell.analytics.tests.conftest import (
    START_DATE,
    TEST_TODAY,
    FixedRandom,
    build_history,
    make_check_in,
)
from menowell.models.checkins import BodyTemperature, CheckIn, HotFlashPeriod, TrackerReading


# ---------------------------------------------------------------------------
# Pearson correlation
# ---------------------------------------------------------------------------


class TestPearsonCorrelation:
    def test_perfect_positive(self) -> None:
        assert pearson_correlation([1, 2, 3, 4, 5], [2, 4, 6, 8, 10]) == pytest.approx(1.0)

    def test_perfect_negative(self) -> None:
        assert pearson_correlation([1, 2, 3, 4, 5], [5, 4, 3, 2, 1]) == pytest.approx(-1.0)

    def test_symmetric(self) -> None:
        x = [3, 7, 2, 9, 4, 6, 5]
        y = [4, 8, 1, 7, 6, 5, 3]
        assert pearson_correlation(x, y) == pytest.approx(pearson_correlation(y, x))

    def test_bounded(self) -> None:
        r = pearson_correlation([3, 7, 2, 9, 4, 6, 5], [4, 8, 1, 7, 6, 5, 3])
        assert -1.0 <= r <= 1.0

    def test_constant_series_returns_zero(self) -> None:
        assert pearson_correlation([5, 5, 5, 5], [1, 2, 3, 4]) == 0.0
        assert pearson_correlation([1, 2, 3, 4], [5, 5, 5, 5]) == 0.0

    def test_length_mismatch_rejected(self) -> None:
        with pytest.raises(AnalyticsInputError, match="length mismatch"):
            pearson_correlation([1, 2, 3], [1, 2])

    def test_empty_rejected(self) -> None:
        with pytest.raises(AnalyticsInputError):
            pearson_correlation([], [])

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(AnalyticsInputError, match="Non-finite"):
            pearson_correlation([1, 2, float("nan")], [1, 2, 3])
        with pytest.raises(AnalyticsInputError):
            pearson_correlation([1, 2, 3], [1, float("inf"), 3])


class TestSignificanceBand:
    @pytest.mark.parametrize(
        "r, expected",
        [
            (0.95, "high"),
            (0.71, "high"),
            (0.7, "medium"),
            (0.41, "medium"),
            (0.4, "low"),
            (0.0, "low"),
            (-0.8, "high"),
            (-0.5, "medium"),
        ],
    )
    def test_bands(self, r: float, expected: str) -> None:
        assert significance_band(r) == expected


# ---------------------------------------------------------------------------
# Correlations
# ---------------------------------------------------------------------------


class TestAnalyzeCorrelations:
    def test_fewer_than_seven_returns_empty(self) -> None:
        for n in range(7):
            assert analyze_correlations(build_history(n)) == []

    def test_fixed_pairs_in_order(self) -> None:
        results = analyze_correlations(build_history(7))
        assert [(r.metric1, r.metric2) for r in results] == [
            ("sleep", "mood"),
            ("energy", "stress"),
            ("libido", "energy"),
        ]

    def test_perfect_sleep_mood_relationship(self) -> None:
        history = build_history(7, sleep=[1, 2, 3, 4, 5, 6, 7], mood=[2, 3, 4, 5, 6, 7, 8])
        sleep_mood = analyze_correlations(history)[0]
        assert sleep_mood.correlation == pytest.approx(1.0)
        assert sleep_mood.significance == "high"
        assert sleep_mood.description == "Better sleep strongly correlates with improved mood"

    def test_stress_reducing_energy(self) -> None:
        history = build_history(7, energy=[1, 2, 3, 4, 5, 6, 7], stress=[7, 6, 5, 4, 3, 2, 1])
        energy_stress = analyze_correlations(history)[1]
        assert energy_stress.correlation == pytest.approx(-1.0)
        assert energy_stress.significance == "high"
        assert energy_stress.description == "Higher stress significantly reduces energy levels"

    def test_flat_metrics_give_weak_descriptions(self) -> None:
        results = analyze_correlations(build_history(7))
        assert all(r.correlation == 0.0 for r in results)
        assert all(r.significance == "low" for r in results)
        assert [r.description for r in results] == [
            "Sleep and mood show weak correlation",
            "Stress and energy show moderate relationship",
            "Libido and energy show variable relationship",
        ]

    def test_libido_energy_strong(self) -> None:
        history = build_history(8, libido=[1, 2, 3, 4, 5, 6, 7, 8], energy=[1, 2, 3, 4, 5, 6, 7, 8])
        libido_energy = analyze_correlations(history)[2]
        assert libido_energy.description == "Energy levels strongly influence libido"

    def test_invalid_rating_rejected(self) -> None:
        history = build_history(6)
        history.append(
            CheckIn.model_construct(
                date=date(2024, 1, 7),
                mood=float("nan"),
                energy=5,
                libido=5,
                sleep=5,
                stress=5,
                body_temperature=BodyTemperature.normal,
            )
        )
        with pytest.raises(AnalyticsInputError, match="invalid mood"):
            analyze_correlations(history)

    def test_invalid_date_rejected(self) -> None:
        history = build_history(6)
        history.append(
            CheckIn.model_construct(
                date="x",
                mood=5,
                energy=5,
                libido=5,
                sleep=5,
                stress=5,
                body_temperature=BodyTemperature.normal,
            )
        )
        with pytest.raises(AnalyticsInputError, match="invalid date: 'x'"):
            analyze_correlations(history)


# ---------------------------------------------------------------------------
# Predictive insights
# ---------------------------------------------------------------------------


def _hot_flash_history() -> list[CheckIn]:
    """15 days: 6 hot flashes overall (40%), last week stress 8 / sleep 4."""
    temps = [BodyTemperature.hot_flash] * 6 + [BodyTemperature.normal] * 9
    stress = [4] * 8 + [8] * 7
    sleep = [7] * 8 + [4] * 7
    return build_history(15, body_temperature=temps, stress=stress, sleep=sleep, energy=5)


class TestPredictiveInsights:
    def test_fewer_than_fourteen_returns_empty(self) -> None:
        history = build_history(13, stress=9, sleep=2, energy=2)
        assert generate_predictive_insights(history, today=TEST_TODAY) == []

    def test_stable_history_has_no_insights(self, two_weeks_stable: list[CheckIn]) -> None:
        assert generate_predictive_insights(two_weeks_stable, today=TEST_TODAY) == []

    def test_hot_flash_insight(self) -> None:
        insights = generate_predictive_insights(_hot_flash_history(), today=TEST_TODAY)
        hot_flash = [i for i in insights if i.type == "hot-flash"]
        assert len(hot_flash) == 1
        assert hot_flash[0].probability == 0.75
        assert hot_flash[0].confidence == "high"
        assert hot_flash[0].date == "2024-03-02"
        assert len(hot_flash[0].recommendations) == 4

    def test_insights_emitted_in_check_order(self) -> None:
        insights = generate_predictive_insights(_hot_flash_history(), today=TEST_TODAY)
        # stress 8 also triggers the sleep-quality signal; energy 5 does not dip
        assert [i.type for i in insights] == ["hot-flash", "sleep-quality"]
        assert insights[1].date == "2024-03-01"
        assert insights[1].probability == 0.65
        assert insights[1].confidence == "medium"

    def test_hot_flash_frequency_must_exceed_thirty_percent(self) -> None:
        temps = [BodyTemperature.hot_flash] * 6 + [BodyTemperature.normal] * 14
        history = build_history(20, body_temperature=temps, stress=8, sleep=4, energy=5)
        types = [i.type for i in generate_predictive_insights(history, today=TEST_TODAY)]
        assert "hot-flash" not in types

    def test_night_sweats_do_not_count_toward_hot_flash_frequency(self) -> None:
        history = build_history(14, body_temperature=BodyTemperature.night_sweats, stress=8, sleep=4)
        types = [i.type for i in generate_predictive_insights(history, today=TEST_TODAY)]
        assert "hot-flash" not in types

    def test_energy_dip(self) -> None:
        history = build_history(14, energy=3, sleep=5)
        insights = generate_predictive_insights(history, today=TEST_TODAY)
        assert [i.type for i in insights] == ["energy-dip"]
        assert insights[0].probability == 0.8
        assert insights[0].date == "2024-03-02"

    def test_only_recent_week_drives_averages(self) -> None:
        history = build_history(14, energy=[2] * 7 + [7] * 7, sleep=[3] * 7 + [8] * 7)
        assert generate_predictive_insights(history, today=TEST_TODAY) == []

    def test_tracker_data_is_accepted(self) -> None:
        readings = [TrackerReading(data_type="sleep", recorded_date=TEST_TODAY, value=81.0)]
        history = build_history(14, stress=7)
        insights = generate_predictive_insights(history, readings, today=TEST_TODAY)
        assert [i.type for i in insights] == ["sleep-quality"]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


class TestWeeklyPattern:
    def test_week_over_week_shift_cancels_per_weekday(self) -> None:
        # Both weeks start on Monday, so every weekday sees one 3 and one 8
        history = build_history(14, mood=[3] * 7 + [8] * 7)
        weekly = analyze_weekly_pattern(history, "mood")
        assert set(weekly.day_averages) == set(range(7))
        assert all(avg == pytest.approx(5.5) for avg in weekly.day_averages.values())
        assert weekly.variability == 0.0

    def test_peak_and_low_days(self) -> None:
        # Saturdays (Jan 6, 13) are great, Mondays (Jan 1, 8) are hard
        moods = [3, 5, 5, 5, 5, 9, 5, 3, 5, 5, 5, 5, 9, 5]
        weekly = analyze_weekly_pattern(build_history(14, mood=moods), "mood")
        assert weekly.peak_day == "Saturday"
        assert weekly.low_day == "Monday"
        assert weekly.variability == pytest.approx(6.0)
        assert weekly.pattern == "peak"

    def test_ties_resolve_to_earliest_weekday(self) -> None:
        weekly = analyze_weekly_pattern(build_history(14, mood=5), "mood")
        assert weekly.peak_day == "Sunday"
        assert weekly.low_day == "Sunday"


class TestDetectPatterns:
    def test_fewer_than_fourteen_returns_empty(self) -> None:
        history = build_history(13, sleep=2, energy=2, body_temperature=BodyTemperature.hot_flash)
        assert detect_patterns(history) == []

    def test_constant_mood_has_no_weekly_pattern(self) -> None:
        assert detect_patterns(build_history(14, mood=5)) == []

    def test_weekly_mood_fluctuation(self) -> None:
        moods = [3, 5, 5, 5, 5, 9, 5, 3, 5, 5, 5, 5, 9, 5]
        patterns = detect_patterns(build_history(14, mood=moods))
        assert len(patterns) == 1
        weekly = patterns[0]
        assert weekly.pattern == "Weekly Mood Fluctuation"
        assert weekly.frequency == 7
        assert weekly.strength == pytest.approx(6.0)
        assert weekly.description == "Mood tends to peak on Saturdays"
        assert weekly.action_items[0] == "Plan self-care activities for Mondays"

    def test_hot_flash_timing_from_logged_period(self) -> None:
        temps = [BodyTemperature.hot_flash] * 4 + [BodyTemperature.normal] * 10
        history = build_history(14, body_temperature=temps, hot_flash_period=HotFlashPeriod.morning)
        patterns = detect_patterns(history)
        assert [p.pattern for p in patterns] == ["Hot Flash Timing"]
        assert patterns[0].frequency == pytest.approx(4 / 14)
        assert patterns[0].strength == pytest.approx(8 / 14)
        assert patterns[0].description == "Hot flashes occur most often in the morning"

    def test_hot_flash_timing_evening(self) -> None:
        history = build_history(
            14,
            body_temperature=BodyTemperature.night_sweats,
            hot_flash_period=HotFlashPeriod.evening,
        )
        patterns = detect_patterns(history)
        assert patterns[0].description == "Hot flashes occur most often in the evening"

    def test_hot_flash_strength_is_not_clamped(self) -> None:
        history = build_history(14, body_temperature=BodyTemperature.hot_flash)
        patterns = detect_patterns(history, rng=FixedRandom(0.0))
        assert patterns[0].frequency == pytest.approx(1.0)
        assert patterns[0].strength == pytest.approx(2.0)

    def test_hot_flash_timing_uses_injected_random_source(self) -> None:
        history = build_history(14, body_temperature=BodyTemperature.hot_flash)
        morning = detect_patterns(history, rng=FixedRandom(0.9))
        evening = detect_patterns(history, rng=FixedRandom(0.5))
        assert morning[0].description.endswith("in the morning")
        assert evening[0].description.endswith("in the evening")

    def test_temperature_frequency_must_exceed_twenty_percent(self) -> None:
        temps = [BodyTemperature.hot_flash] * 3 + [BodyTemperature.normal] * 12
        assert detect_patterns(build_history(15, body_temperature=temps)) == []

    def test_sleep_energy_cascade(self) -> None:
        patterns = detect_patterns(build_history(14, sleep=3, energy=3))
        assert [p.pattern for p in patterns] == ["Sleep-Energy Cascade"]
        assert patterns[0].strength == pytest.approx(1.0)
        assert patterns[0].frequency == pytest.approx(13 / 14)

    def test_cascade_follows_given_order(self) -> None:
        # Poor sleep on even days, low energy on odd days: every pair starting
        # on an even day cascades
        sleep = [3 if i % 2 == 0 else 8 for i in range(14)]
        energy = [3 if i % 2 == 1 else 8 for i in range(14)]
        cascade = analyze_sleep_energy_cascade(build_history(14, sleep=sleep, energy=energy))
        assert cascade.cascades == 7
        assert cascade.strength == pytest.approx(7 / 13)

    def test_cascade_below_threshold_not_reported(self) -> None:
        sleep = [3 if i % 2 == 0 else 8 for i in range(14)]
        energy = [3 if i % 2 == 1 else 8 for i in range(14)]
        assert detect_patterns(build_history(14, sleep=sleep, energy=energy)) == []

    def test_single_record_cascade_is_zero(self) -> None:
        cascade = analyze_sleep_energy_cascade([make_check_in(START_DATE, sleep=2, energy=2)])
        assert cascade.strength == 0.0
