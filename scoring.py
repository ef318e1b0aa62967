import math
from typing import Dict, List, Tuple

from models import (
    FactorContribution,
    HuntingPressure,
    ScoreResult,
    ScoringFactors,
    Terrain,
    TimeOfDay,
    reading,
)
from rut import RutPhase, rut_factor
from tips import build_tips

RUT_PHASES = (RutPhase.PEAK_RUT, RutPhase.SECOND_RUT)


def clamp(num: float, lo: float, hi: float) -> float:
    return min(max(num, lo), hi)


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


class ScoringPolicy:
    """Turns a rut phase plus situational factors into a bounded score.

    Subclasses carry their own threshold table; ratings from one policy
    mean nothing against the other's scale.
    """

    name = ""
    # (minimum score, classification, badge, rating text), highest first
    thresholds: Tuple[Tuple[int, str, str, str], ...] = ()

    def classify(self, score: float) -> Tuple[str, str, str]:
        for minimum, classification, badge, text in self.thresholds:
            if score >= minimum:
                return classification, badge, text
        _, classification, badge, text = self.thresholds[-1]
        return classification, badge, text

    def breakdown(self, phase: RutPhase, factors: ScoringFactors) -> List[FactorContribution]:
        raise NotImplementedError

    def score(self, phase: RutPhase, factors: ScoringFactors) -> ScoreResult:
        raise NotImplementedError

    def _result(self, score: int, phase, factors, breakdown, chance=None) -> ScoreResult:
        classification, badge, text = self.classify(score)
        return ScoreResult(
            policy=self.name,
            score=score,
            classification=classification,
            badge=badge,
            rating_text=text,
            breakdown=breakdown,
            tips=build_tips(factors.terrain, factors.time_of_day, phase, factors.flags),
            chance_percent=chance,
        )


# ===================================================================
#                   POLICY A: ADDITIVE MODIFIERS
# ===================================================================

RUT_BASE = {
    RutPhase.EARLY_SEASON: 45,
    RutPhase.PRE_RUT: 55,
    RutPhase.PEAK_RUT: 65,
    RutPhase.LOCKDOWN: 50,
    RutPhase.POST_RUT: 50,
    RutPhase.SECOND_RUT: 68,
    RutPhase.LATE_SEASON: 45,
    RutPhase.GENERAL_SEASON: 50,
}

SCORE_MIN, SCORE_MAX = 20, 90
CHANCE_MIN, CHANCE_MAX = 10, 95


def base_from_rut(phase: RutPhase) -> int:
    return RUT_BASE.get(phase, 50)


def time_of_day_modifier(time_of_day: TimeOfDay, phase: RutPhase) -> int:
    if time_of_day == TimeOfDay.MORNING:
        return 8
    if time_of_day == TimeOfDay.EVENING:
        return 6
    if time_of_day == TimeOfDay.ALL_DAY:
        return 10

    # midday only pays off while bucks are cruising
    if phase in RUT_PHASES:
        return 5
    return 0


def weather_modifier(flags) -> int:
    mod = 0
    if flags.cold_front:
        mod += 8
    if flags.recent_rain:
        mod += 4
    if flags.high_wind:
        mod -= 6
    if flags.very_warm:
        mod -= 5
    return mod


def pressure_modifier(pressure: HuntingPressure) -> int:
    if pressure == HuntingPressure.LOW:
        return 5
    if pressure == HuntingPressure.HIGH:
        return -8
    return 0


def terrain_modifier(terrain: Terrain, phase: RutPhase) -> int:
    if phase in RUT_PHASES and terrain == Terrain.PINES_CLEARCUTS:
        return 3
    return 0


class AdditivePolicy(ScoringPolicy):
    name = "additive"
    thresholds = (
        (75, "high", "High odds",
         "🔥 High odds – this is a sit you don't want to miss. Stay as long as you can."),
        (60, "solid", "Solid odds",
         "👍 Solid odds – definitely worth hunting hard in your best spot."),
        (50, "fair", "Fair odds",
         "⚖️ Fair odds – a good deer could still show with the right wind and stealth."),
        (0, "low", "Low odds",
         "😬 Low odds – maybe treat this as an observation sit or scouting mission."),
    )

    def breakdown(self, phase, factors):
        flags = factors.flags
        return [
            FactorContribution("rut", base_from_rut(phase), phase.value),
            FactorContribution(
                "time_of_day",
                time_of_day_modifier(factors.time_of_day, phase),
                factors.time_of_day.value,
            ),
            FactorContribution(
                "weather",
                weather_modifier(flags),
                ",".join(k for k, v in vars(flags).items() if v) or "neutral",
            ),
            FactorContribution(
                "hunting_pressure",
                pressure_modifier(factors.hunting_pressure),
                factors.hunting_pressure.value,
            ),
            FactorContribution(
                "terrain",
                terrain_modifier(factors.terrain, phase),
                factors.terrain.value,
            ),
        ]

    def score(self, phase, factors):
        parts = self.breakdown(phase, factors)
        raw = sum(p.value for p in parts)
        score = int(clamp(raw, SCORE_MIN, SCORE_MAX))
        chance = int(clamp(round_half_up(score), CHANCE_MIN, CHANCE_MAX))
        return self._result(score, phase, factors, parts, chance=chance)


# ===================================================================
#                POLICY B: WEIGHTED MULTIPLICATIVE
# ===================================================================

WEIGHTS = {
    "rut": 0.35,
    "time": 0.20,
    "temperature": 0.18,
    "wind": 0.14,
    "precipitation": 0.08,
    "barometer": 0.05,
}
TERRAIN_WEIGHT = 0.05

TERRAIN_FACTORS = {
    Terrain.PINES_CLEARCUTS: 1.0,
    Terrain.MIXED: 0.95,
    Terrain.HARDWOODS: 0.9,
    Terrain.AG_EDGES: 0.9,
}

PRESSURE_PENALTY = {
    HuntingPressure.LOW: 1.05,
    HuntingPressure.MEDIUM: 1.0,
    HuntingPressure.HIGH: 0.9,
}


def time_factor(time_of_day: TimeOfDay) -> float:
    if time_of_day in (TimeOfDay.MORNING, TimeOfDay.EVENING):
        return 1.0
    if time_of_day == TimeOfDay.ALL_DAY:
        return 0.85
    return 0.65


def temp_factor(temperature_f) -> float:
    t = reading(temperature_f)
    if t is None:
        return 1.0
    if 30 <= t <= 55:
        return 1.0
    if 20 <= t < 30 or 55 < t <= 65:
        return 0.85
    return 0.6


def wind_factor(wind_mph) -> float:
    w = reading(wind_mph)
    if w is None or w <= 5:
        return 1.0
    if w <= 10:
        return 0.85
    if w <= 15:
        return 0.65
    if w <= 20:
        return 0.5
    return 0.35


def precip_factor(precip_mm) -> float:
    p = reading(precip_mm)
    if p is None or p <= 0.2:
        return 1.0
    if p <= 5.0:
        return 0.8
    return 0.6


def barometer_factor(pressure_hpa) -> float:
    p = reading(pressure_hpa)
    if p is None or p >= 1015:
        return 1.0
    if p >= 1005:
        return 0.85
    if p >= 995:
        return 0.7
    return 0.6


def terrain_factor(terrain: Terrain) -> float:
    return TERRAIN_FACTORS.get(terrain, 0.9)


class WeightedPolicy(ScoringPolicy):
    name = "weighted"
    thresholds = (
        (76, "great", "Great",
         "🔥 Great day – every factor lines up. Get in early and stay late."),
        (61, "good", "Good",
         "👍 Good day – conditions favor daylight movement."),
        (41, "ok", "OK",
         "⚖️ OK day – hunt your safest wind and stay patient."),
        (0, "bad", "Tough",
         "😬 Tough day – scout, hang a stand, or keep the sit short."),
    )

    def sub_factors(self, phase, factors) -> Dict[str, float]:
        return {
            "rut": rut_factor(phase),
            "time": time_factor(factors.time_of_day),
            "temperature": temp_factor(factors.temperature_f),
            "wind": wind_factor(factors.wind_speed_mph),
            "precipitation": precip_factor(factors.precipitation_mm),
            "barometer": barometer_factor(factors.barometric_pressure_hpa),
        }

    def breakdown(self, phase, factors):
        subs = self.sub_factors(phase, factors)
        parts = [
            FactorContribution(name, 100 * WEIGHTS[name] * value, f"factor {value:.2f}")
            for name, value in subs.items()
        ]
        t = terrain_factor(factors.terrain)
        parts.append(
            FactorContribution("terrain", -100 * TERRAIN_WEIGHT * (1 - t), f"factor {t:.2f}")
        )
        penalty = PRESSURE_PENALTY.get(factors.hunting_pressure, 1.0)
        parts.append(
            FactorContribution("hunting_pressure", penalty, f"multiplier x{penalty:.2f}")
        )
        return parts

    def raw_score(self, phase, factors) -> float:
        subs = self.sub_factors(phase, factors)
        weighted = sum(WEIGHTS[name] * value for name, value in subs.items())
        weighted -= TERRAIN_WEIGHT * (1 - terrain_factor(factors.terrain))
        penalty = PRESSURE_PENALTY.get(factors.hunting_pressure, 1.0)
        return 100 * penalty * weighted

    def score(self, phase, factors):
        score = int(clamp(round_half_up(self.raw_score(phase, factors)), 0, 100))
        return self._result(score, phase, factors, self.breakdown(phase, factors))


POLICIES = {
    AdditivePolicy.name: AdditivePolicy,
    WeightedPolicy.name: WeightedPolicy,
}


def get_policy(name: str) -> ScoringPolicy:
    try:
        return POLICIES[(name or "").strip().lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown scoring policy '{name}' (choose from {', '.join(POLICIES)})"
        ) from None


def score_day(phase: RutPhase, factors: ScoringFactors, policy="additive") -> ScoreResult:
    if isinstance(policy, str):
        policy = get_policy(policy)
    return policy.score(phase, factors)
