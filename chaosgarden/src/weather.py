"""Weather state machine: six conditions, planned durations, blended modifiers."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum


class WeatherCondition(str, Enum):
    CLEAR = "CLEAR"
    OVERCAST = "OVERCAST"
    RAIN = "RAIN"
    STORM = "STORM"
    FOG = "FOG"
    DROUGHT = "DROUGHT"


@dataclass(frozen=True)
class WeatherModifiers:
    """How a condition bends the environment and the creatures living in it."""
    temperature_offset: float = 0.0
    sunlight_multiplier: float = 1.0
    moisture_change_per_tick: float = 0.0
    photosynthesis: float = 1.0
    movement: float = 1.0
    reproduction: float = 1.0


@dataclass(frozen=True)
class WeatherDefinition:
    min_duration: int
    max_duration: int
    modifiers: WeatherModifiers
    transitions: dict[WeatherCondition, float]


C = WeatherCondition

WEATHER_DEFINITIONS: dict[WeatherCondition, WeatherDefinition] = {
    C.CLEAR: WeatherDefinition(
        12, 48,
        WeatherModifiers(0.0, 1.0, -0.005, 1.0, 1.0, 1.0),
        {C.OVERCAST: 30, C.DROUGHT: 6, C.FOG: 15},
    ),
    C.OVERCAST: WeatherDefinition(
        8, 36,
        WeatherModifiers(-1.0, 0.65, 0.002, 0.8, 1.0, 0.95),
        {C.CLEAR: 20, C.RAIN: 35, C.DROUGHT: 6, C.FOG: 15},
    ),
    C.RAIN: WeatherDefinition(
        6, 24,
        WeatherModifiers(-2.0, 0.4, 0.015, 0.6, 0.75, 0.85),
        {C.CLEAR: 10, C.OVERCAST: 30, C.STORM: 16, C.FOG: 5},
    ),
    C.STORM: WeatherDefinition(
        3, 8,
        WeatherModifiers(-4.0, 0.15, 0.03, 0.3, 0.5, 0.6),
        {C.OVERCAST: 50, C.RAIN: 20, C.FOG: 5},
    ),
    C.DROUGHT: WeatherDefinition(
        12, 48,
        WeatherModifiers(3.0, 1.1, -0.015, 0.75, 0.92, 0.85),
        {C.CLEAR: 40, C.OVERCAST: 20, C.FOG: 5},
    ),
    C.FOG: WeatherDefinition(
        8, 24,
        WeatherModifiers(-0.5, 0.5, 0.005, 0.7, 0.7, 0.9),
        {C.CLEAR: 50, C.OVERCAST: 25, C.RAIN: 5},
    ),
}

# Modifiers blend from the previous condition over this many ticks.
INTERPOLATION_TICKS = 6


@dataclass
class WeatherState:
    current_state: WeatherCondition
    state_entered_at_tick: int
    planned_duration_ticks: int
    previous_state: WeatherCondition | None = None
    transition_progress_ticks: int = 0

    def to_dict(self) -> dict:
        return {
            "current_state": self.current_state.value,
            "state_entered_at_tick": self.state_entered_at_tick,
            "planned_duration_ticks": self.planned_duration_ticks,
            "previous_state": self.previous_state.value if self.previous_state else None,
            "transition_progress_ticks": self.transition_progress_ticks,
        }

    @staticmethod
    def from_dict(data: dict) -> WeatherState:
        previous = data.get("previous_state")
        return WeatherState(
            current_state=WeatherCondition(data["current_state"]),
            state_entered_at_tick=int(data["state_entered_at_tick"]),
            planned_duration_ticks=int(data["planned_duration_ticks"]),
            previous_state=WeatherCondition(previous) if previous else None,
            transition_progress_ticks=int(data.get("transition_progress_ticks", 0)),
        )


def create_initial_weather_state(
    tick: int = 0,
    condition: WeatherCondition = WeatherCondition.CLEAR,
) -> WeatherState:
    """Start in `condition` for the midpoint of its duration range."""
    definition = WEATHER_DEFINITIONS[condition]
    return WeatherState(
        current_state=condition,
        state_entered_at_tick=tick,
        planned_duration_ticks=(definition.min_duration + definition.max_duration) // 2,
    )


def draw_duration(condition: WeatherCondition, rng: random.Random) -> int:
    definition = WEATHER_DEFINITIONS[condition]
    return rng.randint(definition.min_duration, definition.max_duration)


def choose_next_condition(current: WeatherCondition, rng: random.Random) -> WeatherCondition:
    """Weighted pick among the transitions out of `current`, never itself."""
    options = [
        (condition, weight)
        for condition, weight in WEATHER_DEFINITIONS[current].transitions.items()
        if condition != current and weight > 0
    ]
    conditions = [condition for condition, _ in options]
    weights = [weight for _, weight in options]
    return rng.choices(conditions, weights=weights, k=1)[0]


def advance_weather_state(
    state: WeatherState, tick: int, rng: random.Random
) -> tuple[WeatherState, bool]:
    """Count one tick of progress; transition once the planned duration is reached.

    Returns the new state and whether a transition happened.
    """
    progress = state.transition_progress_ticks + 1
    if progress < state.planned_duration_ticks:
        return replace(state, transition_progress_ticks=progress), False

    next_condition = choose_next_condition(state.current_state, rng)
    return WeatherState(
        current_state=next_condition,
        state_entered_at_tick=tick,
        planned_duration_ticks=draw_duration(next_condition, rng),
        previous_state=state.current_state,
        transition_progress_ticks=0,
    ), True


def get_active_weather_modifiers(state: WeatherState | None) -> WeatherModifiers:
    """Modifiers in force now, eased in from the previous condition."""
    if state is None:
        return WeatherModifiers()
    current = WEATHER_DEFINITIONS[state.current_state].modifiers
    if state.previous_state is None or state.transition_progress_ticks >= INTERPOLATION_TICKS:
        return current

    previous = WEATHER_DEFINITIONS[state.previous_state].modifiers
    t = state.transition_progress_ticks / INTERPOLATION_TICKS
    return WeatherModifiers(
        **{
            name: getattr(previous, name) + (getattr(current, name) - getattr(previous, name)) * t
            for name in WeatherModifiers.__dataclass_fields__
        }
    )
