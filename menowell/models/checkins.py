"""Pydantic models for daily wellness check-ins, device tracker readings,
and the educational content catalog."""

from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import Field

from menowell.models.base import MenoWellBase


# ---------- Enums ----------

class BodyTemperature(str, Enum):
    normal = "normal"
    hot_flash = "hot-flash"
    night_sweats = "night-sweats"
    cold = "cold"


class DataSource(str, Enum):
    manual = "manual"
    device = "device"


class HotFlashPeriod(str, Enum):
    morning = "morning"
    evening = "evening"


class ContentCategory(str, Enum):
    symptoms = "Symptoms"
    hormones = "Hormones"
    nutrition = "Nutrition"
    sex_libido = "Sex & Libido"
    emotional_confidence = "Emotional Confidence"


class ContentType(str, Enum):
    article = "article"
    audio = "audio"
    podcast = "podcast"
    video = "video"


# ---------- Check-ins ----------

# Every rating is on the same 1-10 scale. For stress, 10 = most stressed.
RATING_MIN = 1
RATING_MAX = 10
RATING_FIELDS = ("mood", "energy", "libido", "sleep", "stress")


class CheckIn(MenoWellBase):
    """One day's self-reported wellness ratings.

    At most one check-in exists per user per date; that is enforced by the
    storage layer, not here.
    """

    date: dt.date
    mood: int = Field(ge=RATING_MIN, le=RATING_MAX)
    energy: int = Field(ge=RATING_MIN, le=RATING_MAX)
    libido: int = Field(ge=RATING_MIN, le=RATING_MAX)
    sleep: int = Field(ge=RATING_MIN, le=RATING_MAX)
    stress: int = Field(ge=RATING_MIN, le=RATING_MAX)
    body_temperature: BodyTemperature = BodyTemperature.normal
    notes: str | None = None

    # Provenance: manual entry vs. synced from a device
    mood_source: DataSource | None = None
    energy_source: DataSource | None = None
    sleep_source: DataSource | None = None
    stress_source: DataSource | None = None
    body_temperature_source: DataSource | None = None

    # Raw device values, carried through untouched
    tracker_sleep_score: float | None = None
    tracker_hrv: float | None = None
    tracker_resting_hr: float | None = None

    # When the hot flash / night sweat happened, if the user logged it
    hot_flash_period: HotFlashPeriod | None = None


class TrackerReading(MenoWellBase):
    """A single device-tracker datum (Fitbit, Oura, Apple Health, Google Fit)."""

    data_type: str
    recorded_date: dt.date
    recorded_time: str | None = None
    value: float | None = None
    metadata: dict | None = None


# ---------- Content catalog ----------

class ContentItem(MenoWellBase):
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    category: ContentCategory
    type: ContentType
    duration: str | None = None
    description: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    unlocked_by: list[str] = Field(default_factory=list)
