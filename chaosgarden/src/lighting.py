"""Derived lighting values for renderers: a pure function of sunlight, tick and weather."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from .helpers import TICKS_PER_DAY, clamp
from .weather import WeatherCondition


@dataclass(frozen=True)
class LightingContext:
    sunlight: float
    sun_direction: float
    ambient_level: float
    fog_density: float
    shadow_strength: float
    bloom_factor: float
    color_temperature: float
    time_of_day: str
    weather: WeatherCondition | None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["weather"] = self.weather.value if self.weather else None
        return data


# (fog add, shadow add, bloom multiply, bloom add)
WEATHER_LIGHTING_ADJUSTMENTS: dict[WeatherCondition, tuple[float, float, float, float]] = {
    WeatherCondition.STORM: (0.25, 0.35, 0.3, 0.0),
    WeatherCondition.FOG: (0.45, 0.0, 0.4, 0.0),
    WeatherCondition.RAIN: (0.15, 0.2, 0.6, 0.0),
    WeatherCondition.OVERCAST: (0.12, 0.1, 0.8, 0.0),
    WeatherCondition.DROUGHT: (0.0, -0.1, 1.0, 0.15),
}


def time_of_day_from_sunlight(sunlight: float) -> str:
    if sunlight < 0.2:
        return "night"
    if sunlight < 0.45:
        return "dawn"
    if sunlight < 0.75:
        return "day"
    return "dusk"


def create_lighting_context(
    sunlight: float,
    tick: int,
    weather: WeatherCondition | str | None = None,
) -> LightingContext:
    s = clamp(sunlight, 0.0, 1.0)
    condition = WeatherCondition(weather) if weather else None

    fog = 0.05 + (1 - s) * 0.2
    shadow = 0.2 + (1 - s) * 0.55
    bloom = 0.08 + 0.22 * s

    if condition in WEATHER_LIGHTING_ADJUSTMENTS:
        fog_add, shadow_add, bloom_mult, bloom_add = WEATHER_LIGHTING_ADJUSTMENTS[condition]
        fog += fog_add
        shadow += shadow_add
        bloom = bloom * bloom_mult + bloom_add

    return LightingContext(
        sunlight=s,
        sun_direction=2 * math.pi * (tick % TICKS_PER_DAY) / TICKS_PER_DAY,
        ambient_level=0.2 + 0.8 * s,
        fog_density=fog,
        shadow_strength=shadow,
        bloom_factor=bloom,
        color_temperature=2800 + 3500 * s,
        time_of_day=time_of_day_from_sunlight(s),
        weather=condition,
    )
