"""Shared fixtures and check-in builders for analytics tests."""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Any, Sequence

import pytest

from menowell.analytics.content_loader import ContentLibrary, load_content_library
from menowell.models.checkins import BodyTemperature, CheckIn

# 2024-01-01 is a Monday
START_DATE = date(2024, 1, 1)
TEST_TODAY = date(2024, 3, 1)


class FixedRandom(random.Random):
    """Random source whose draws always return the same value."""

    def __init__(self, value: float) -> None:
        super().__init__()
        self.value = value

    def random(self) -> float:
        return self.value


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_check_in(d: date = START_DATE, **overrides: Any) -> CheckIn:
    """A middle-of-the-road check-in; override any field."""
    fields: dict[str, Any] = {
        "date": d,
        "mood": 6,
        "energy": 6,
        "libido": 5,
        "sleep": 7,
        "stress": 4,
        "body_temperature": BodyTemperature.normal,
    }
    fields.update(overrides)
    return CheckIn(**fields)


def build_history(
    n: int,
    start: date = START_DATE,
    **series: Sequence[Any] | Any,
) -> list[CheckIn]:
    """Build ``n`` consecutive daily check-ins, oldest first.

    Each keyword is either a constant or a sequence of length ``n``::

        build_history(7, mood=[1, 2, 3, 4, 5, 6, 7], stress=4)
    """
    history = []
    for i in range(n):
        overrides = {
            key: (value[i] if isinstance(value, (list, tuple)) else value)
            for key, value in series.items()
        }
        history.append(make_check_in(start + timedelta(days=i), **overrides))
    return history


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def content_library() -> ContentLibrary:
    """Load the real bundled content catalog."""
    return load_content_library()


@pytest.fixture
def two_weeks_stable() -> list[CheckIn]:
    """14 unremarkable days: nothing should fire."""
    return build_history(14)


@pytest.fixture
def low_mood_low_energy_week() -> list[CheckIn]:
    return build_history(7, mood=2, energy=2)
