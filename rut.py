import datetime as dt
import math
from enum import Enum
from typing import NamedTuple

# ===================================================================
#              RUT CALENDAR (Washington County, GA DNR map)
# ===================================================================

PEAK_START = (10, 27)
PEAK_END = (11, 2)
SECOND_START = (11, 24)
SECOND_END = (11, 30)

PRE_RUT_DAYS = 14
LOCKDOWN_DAYS = 8


class RutPhase(str, Enum):
    EARLY_SEASON = "early"
    PRE_RUT = "pre"
    PEAK_RUT = "rut"
    LOCKDOWN = "lockdown"
    POST_RUT = "post"
    SECOND_RUT = "secondRut"
    LATE_SEASON = "late"
    GENERAL_SEASON = "general"


PHASE_LABELS = {
    RutPhase.EARLY_SEASON: "Early season relative to peak rut",
    RutPhase.PRE_RUT: "Pre-rut (within 2 weeks of peak)",
    RutPhase.PEAK_RUT: "Peak rut (Washington County, GA)",
    RutPhase.LOCKDOWN: "Lockdown (bucks tending does right after the peak)",
    RutPhase.POST_RUT: "Post-peak rut heading toward second rut",
    RutPhase.SECOND_RUT: "Second rut (late November, Washington County, GA)",
    RutPhase.LATE_SEASON: "Late season after second rut",
    RutPhase.GENERAL_SEASON: "General season",
}

RUT_FACTORS = {
    RutPhase.EARLY_SEASON: 0.50,
    RutPhase.PRE_RUT: 0.75,
    RutPhase.PEAK_RUT: 1.00,
    RutPhase.LOCKDOWN: 0.65,
    RutPhase.POST_RUT: 0.80,
    RutPhase.SECOND_RUT: 0.90,
    RutPhase.LATE_SEASON: 0.55,
    RutPhase.GENERAL_SEASON: 0.50,
}


class RutAnchors(NamedTuple):
    peak_start: dt.date
    peak_end: dt.date
    lockdown_end: dt.date
    second_start: dt.date
    second_end: dt.date


class RutInfo(NamedTuple):
    phase: RutPhase
    label: str
    factor: float


def rut_anchors(year: int) -> RutAnchors:
    peak_end = dt.date(year, *PEAK_END)
    return RutAnchors(
        peak_start=dt.date(year, *PEAK_START),
        peak_end=peak_end,
        lockdown_end=peak_end + dt.timedelta(days=LOCKDOWN_DAYS),
        second_start=dt.date(year, *SECOND_START),
        second_end=dt.date(year, *SECOND_END),
    )


def phase_label(phase: RutPhase) -> str:
    return PHASE_LABELS.get(phase, PHASE_LABELS[RutPhase.GENERAL_SEASON])


def rut_factor(phase: RutPhase) -> float:
    return RUT_FACTORS.get(phase, RUT_FACTORS[RutPhase.GENERAL_SEASON])


def days_until(later: dt.date, earlier: dt.date) -> int:
    """Whole days from `earlier` to `later`, half days rounded up."""
    seconds = (later - earlier).total_seconds()
    return int(math.floor(seconds / 86400.0 + 0.5))


def classify_date(date: dt.date, split_lockdown: bool = True) -> RutPhase:
    if isinstance(date, dt.datetime):
        date = date.date()

    a = rut_anchors(date.year)

    if a.peak_start <= date <= a.peak_end:
        return RutPhase.PEAK_RUT
    if a.second_start <= date <= a.second_end:
        return RutPhase.SECOND_RUT
    if date < a.peak_start:
        if days_until(a.peak_start, date) <= PRE_RUT_DAYS:
            return RutPhase.PRE_RUT
        return RutPhase.EARLY_SEASON
    if a.peak_end < date < a.second_start:
        if split_lockdown and date <= a.lockdown_end:
            return RutPhase.LOCKDOWN
        return RutPhase.POST_RUT
    if date > a.second_end:
        return RutPhase.LATE_SEASON
    return RutPhase.GENERAL_SEASON


def rut_phase(date: dt.date, split_lockdown: bool = True) -> RutInfo:
    """Rut phase, display label and scoring factor for a calendar day.

    Anchors are rebuilt from the date's own year, so Dec 31 and the
    following Jan 1 are judged against different calendars.
    """
    phase = classify_date(date, split_lockdown=split_lockdown)
    return RutInfo(phase=phase, label=phase_label(phase), factor=rut_factor(phase))
