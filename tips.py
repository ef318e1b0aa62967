from typing import List

from models import Terrain, TimeOfDay, WeatherFlags
from rut import RutPhase

TERRAIN_TIPS = {
    Terrain.PINES_CLEARCUTS: (
        "Focus on edges where thick pines meet clearcuts. Hunt downwind of "
        "bedding, especially in corners and funnels, and sneak in through cover."
    ),
    Terrain.HARDWOODS: (
        "Key in on ridges, saddles, and downwind sides of oak flats. Set up on "
        "travel routes from bedding to feed in the morning."
    ),
    Terrain.AG_EDGES: (
        "Evenings on the downwind edge of fields are prime. Look for cover "
        "fingers, ditches, or fence gaps that channel deer into the open."
    ),
    Terrain.MIXED: (
        "Hunt hard transitions between cover types and places where several "
        "trails converge while still keeping the wind safe."
    ),
}

MIDDAY_RUT_TIP = (
    "During the rut or second rut, don't sleep on 10 AM - 2 PM. Cruising "
    "bucks can appear out of nowhere."
)
COLD_FRONT_TIP = (
    "You're hunting behind a front - be set up early, as deer may move "
    "earlier in the evening and later into the morning."
)
HIGH_WIND_TIP = (
    "With higher winds, cheat down into leeward sides of hills or thicker "
    "cover where deer feel more comfortable."
)
DEFAULT_TIP = (
    "Play the wind perfectly, keep your entry quiet, and give your best "
    "spots rest when the wind is wrong."
)

FLAG_DESCRIPTIONS = (
    ("cold_front", "Cold front detected"),
    ("recent_rain", "Recent rain"),
    ("high_wind", "High wind for part of the day"),
    ("very_warm", "Very warm for the season"),
)

RUT_PHASES = (RutPhase.PEAK_RUT, RutPhase.SECOND_RUT)


def terrain_tip(terrain) -> str:
    return TERRAIN_TIPS.get(terrain, TERRAIN_TIPS[Terrain.MIXED])


def condition_tips(time_of_day: TimeOfDay, phase: RutPhase, flags: WeatherFlags) -> List[str]:
    tips = []

    if phase in RUT_PHASES and time_of_day in (TimeOfDay.MIDDAY, TimeOfDay.ALL_DAY):
        tips.append(MIDDAY_RUT_TIP)
    if flags.cold_front:
        tips.append(COLD_FRONT_TIP)
    if flags.high_wind:
        tips.append(HIGH_WIND_TIP)

    if not tips:
        tips.append(DEFAULT_TIP)
    return tips


def build_tips(terrain, time_of_day: TimeOfDay, phase: RutPhase, flags: WeatherFlags) -> List[str]:
    """Terrain tip first, then whatever the conditions call for."""
    return [terrain_tip(terrain)] + condition_tips(time_of_day, phase, flags)


def describe_flags(flags: WeatherFlags) -> str:
    signals = [text for attr, text in FLAG_DESCRIPTIONS if getattr(flags, attr)]
    if not signals:
        return "Weather signals are fairly neutral."
    return f"Signals: {', '.join(signals)}."
