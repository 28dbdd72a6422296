"""Ambient environment: temperature, sunlight and moisture drifting under the weather."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entities import EntityKind
from .helpers import MAX_ENERGY, MAX_HEALTH, TICKS_PER_DAY, clamp, day_phase
from .narrative import describe_weather_transition
from .weather import (
    WeatherCondition,
    WeatherState,
    advance_weather_state,
    create_initial_weather_state,
    get_active_weather_modifiers,
)

if TYPE_CHECKING:
    from .entities import Entity
    from .events import EventLogger

BASELINE_TEMPERATURE = 20.0
DIURNAL_TEMPERATURE_AMPLITUDE = 3.0
TEMPERATURE_SMOOTHING = 0.2
TEMPERATURE_JITTER = 0.3
MOISTURE_JITTER = 0.01
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 40.0

# Thresholds that produce ENVIRONMENT_CHANGE events
DROUGHT_MOISTURE = 0.2
HEAVY_RAIN_MOISTURE = 0.8
HEAT_WAVE_TEMPERATURE = 35.0
FREEZE_TEMPERATURE = 5.0
RAPID_TEMPERATURE_CHANGE = 5.0
RAPID_MOISTURE_CHANGE = 0.2

# Creature exposure
COMFORT_TEMPERATURE = 20.0
COMFORT_TEMPERATURE_BAND = 10.0
EXPOSURE_HEALTH_COST_PER_DEGREE = 0.5
DRY_ENERGY_COST = 0.5
HUMID_FUNGUS_ENERGY_BONUS = 0.5


@dataclass
class Environment:
    temperature: float
    sunlight: float
    moisture: float
    tick: int
    weather_state: WeatherState = field(default_factory=create_initial_weather_state)

    def to_dict(self) -> dict:
        return {
            "temperature": self.temperature,
            "sunlight": self.sunlight,
            "moisture": self.moisture,
            "tick": self.tick,
            "weather_state": self.weather_state.to_dict(),
        }

    @staticmethod
    def from_dict(data: dict) -> Environment:
        return Environment(
            temperature=float(data["temperature"]),
            sunlight=float(data["sunlight"]),
            moisture=float(data["moisture"]),
            tick=int(data["tick"]),
            weather_state=WeatherState.from_dict(data["weather_state"]),
        )


def create_initial_environment(
    temperature: float = BASELINE_TEMPERATURE,
    sunlight: float = 0.5,
    moisture: float = 0.5,
    tick: int = 0,
    weather: WeatherCondition | str = WeatherCondition.CLEAR,
) -> Environment:
    return Environment(
        temperature=clamp(temperature, MIN_TEMPERATURE, MAX_TEMPERATURE),
        sunlight=clamp(sunlight, 0.0, 1.0),
        moisture=clamp(moisture, 0.0, 1.0),
        tick=tick,
        weather_state=create_initial_weather_state(tick, WeatherCondition(weather)),
    )


def diurnal_temperature_offset(tick: int) -> float:
    """Warmest at midday, coolest at midnight."""
    angle = (tick % TICKS_PER_DAY) / TICKS_PER_DAY * 2 * math.pi
    return DIURNAL_TEMPERATURE_AMPLITUDE * math.sin(angle - math.pi / 2)


def advance_environment(
    environment: Environment,
    rng: random.Random,
    event_logger: EventLogger | None = None,
) -> Environment:
    """Advance one tick: step the weather, then drift the ambient scalars toward it."""
    tick = environment.tick + 1
    weather_state, transitioned = advance_weather_state(environment.weather_state, tick, rng)
    modifiers = get_active_weather_modifiers(weather_state)

    target = BASELINE_TEMPERATURE + diurnal_temperature_offset(tick) + modifiers.temperature_offset
    temperature = (
        environment.temperature
        + (target - environment.temperature) * TEMPERATURE_SMOOTHING
        + rng.uniform(-TEMPERATURE_JITTER, TEMPERATURE_JITTER)
    )
    moisture = (
        environment.moisture
        + modifiers.moisture_change_per_tick
        + rng.uniform(-MOISTURE_JITTER, MOISTURE_JITTER)
    )

    advanced = Environment(
        temperature=clamp(temperature, MIN_TEMPERATURE, MAX_TEMPERATURE),
        sunlight=clamp(day_phase(tick) * modifiers.sunlight_multiplier, 0.0, 1.0),
        moisture=clamp(moisture, 0.0, 1.0),
        tick=tick,
        weather_state=weather_state,
    )

    if event_logger is not None:
        if transitioned:
            event_logger.log_environment_change(
                describe_weather_transition(weather_state.previous_state, weather_state.current_state)
            )
        for description in detect_environment_changes(environment, advanced):
            event_logger.log_environment_change(description)

    return advanced


def detect_environment_changes(previous: Environment, current: Environment) -> list[str]:
    """Descriptions for every threshold crossed between two environments."""
    changes = []
    if current.moisture <= DROUGHT_MOISTURE < previous.moisture:
        changes.append(f"Drought sets in: moisture fell to {current.moisture:.2f}")
    if current.moisture >= HEAVY_RAIN_MOISTURE > previous.moisture:
        changes.append(f"Heavy rain soaks the garden: moisture rose to {current.moisture:.2f}")
    if current.temperature >= HEAT_WAVE_TEMPERATURE > previous.temperature:
        changes.append(f"Heat wave: temperature reached {current.temperature:.1f}")
    if current.temperature <= FREEZE_TEMPERATURE < previous.temperature:
        changes.append(f"Freeze: temperature dropped to {current.temperature:.1f}")
    temperature_delta = current.temperature - previous.temperature
    moisture_delta = current.moisture - previous.moisture
    if abs(temperature_delta) > RAPID_TEMPERATURE_CHANGE or abs(moisture_delta) > RAPID_MOISTURE_CHANGE:
        changes.append(
            f"Rapid shift: temperature {temperature_delta:+.1f}, moisture {moisture_delta:+.2f}"
        )
    return changes


def apply_environmental_effects(entity: Entity, environment: Environment) -> None:
    """Exposure damage and moisture stress. Never kills directly."""
    deviation = abs(environment.temperature - COMFORT_TEMPERATURE)
    if deviation > COMFORT_TEMPERATURE_BAND:
        damage = (deviation - COMFORT_TEMPERATURE_BAND) * EXPOSURE_HEALTH_COST_PER_DEGREE
        entity.health = clamp(entity.health - damage, 0.0, MAX_HEALTH)

    if environment.moisture < DROUGHT_MOISTURE and entity.kind in (
        EntityKind.HERBIVORE, EntityKind.CARNIVORE,
    ):
        entity.energy = clamp(entity.energy - DRY_ENERGY_COST, 0.0, MAX_ENERGY)
    elif environment.moisture > HEAVY_RAIN_MOISTURE and entity.kind == EntityKind.FUNGUS:
        entity.energy = clamp(entity.energy + HUMID_FUNGUS_ENERGY_BONUS, 0.0, MAX_ENERGY)
