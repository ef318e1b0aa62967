import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional


class InvalidInput(ValueError):
    """User input the scorer must never see (bad date, coordinates, choice)."""


class TimeOfDay(str, Enum):
    MORNING = "morning"
    MIDDAY = "midday"
    EVENING = "evening"
    ALL_DAY = "allDay"


class Terrain(str, Enum):
    PINES_CLEARCUTS = "pinesClearcuts"
    HARDWOODS = "hardwoods"
    AG_EDGES = "agEdges"
    MIXED = "mixed"


class HuntingPressure(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def parse_choice(enum_cls, value):
    """Map a form/query value onto an enum member or raise InvalidInput."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise InvalidInput(f"'{value}' is not one of: {choices}") from None


@dataclass(frozen=True)
class WeatherFlags:
    cold_front: bool = False
    recent_rain: bool = False
    high_wind: bool = False
    very_warm: bool = False


@dataclass(frozen=True)
class ScoringFactors:
    time_of_day: TimeOfDay
    temperature_f: float
    wind_speed_mph: float
    terrain: Terrain
    hunting_pressure: HuntingPressure
    precipitation_mm: Optional[float] = None
    barometric_pressure_hpa: Optional[float] = None
    flags: WeatherFlags = field(default_factory=WeatherFlags)


def reading(value: Optional[float]) -> Optional[float]:
    """Treat missing and non-finite readings alike as absent."""
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return value


@dataclass(frozen=True)
class FactorContribution:
    name: str
    value: float
    detail: str = ""


@dataclass(frozen=True)
class ScoreResult:
    policy: str
    score: int
    classification: str
    badge: str
    rating_text: str
    breakdown: List[FactorContribution]
    tips: List[str]
    chance_percent: Optional[int] = None

    @property
    def tips_text(self) -> str:
        return " ".join(self.tips)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["tips_text"] = self.tips_text
        return data
