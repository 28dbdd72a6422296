"""Nature-documentary prose for simulation events.

Template choice uses a private generator keyed on the entity id or tick, so
descriptions are reproducible and never draw from the simulation's RNG.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from .lighting import time_of_day_from_sunlight

if TYPE_CHECKING:
    from .entities import Entity
    from .environment import Environment
    from .population import PopulationSummary
    from .weather import WeatherCondition

BIRTH_TEMPLATES = {
    "plant": [
        "{name} unfurls its first leaves at ({x}, {y}) and turns toward the light.",
        "A sprout named {name} pushes through the soil.",
        "{name} takes root with {energy} energy and nothing but patience.",
    ],
    "herbivore": [
        "{name} takes its first wobbly steps at ({x}, {y}), already hungry.",
        "A grazer called {name} joins the garden with {energy} energy.",
        "{name} blinks at the world. The plants look delicious. So, unfortunately, does {name}.",
    ],
    "carnivore": [
        "{name} opens its eyes at ({x}, {y}) and starts counting herbivores.",
        "A hunter named {name} arrives. The grazers go quiet.",
        "{name} is born with {energy} energy and an appetite to match.",
    ],
    "fungus": [
        "{name} spreads its first threads at ({x}, {y}), waiting for the dead.",
        "A patch of mycelium called {name} settles in. It is in no hurry.",
        "{name} appears quietly. Someone has to clean up.",
    ],
}

PARENT_TEMPLATES = [
    "{name} is born to {parent_name}, carrying the family traits forward.",
    "The lineage of {parent_name} continues with {name}.",
    "{parent_name} gives rise to {name} near ({x}, {y}).",
]

DEATH_TEMPLATES = {
    "old age": [
        "{name} the {kind} rests after {age} ticks. A full life.",
        "Time catches up with {name} at {age} ticks old.",
    ],
    "starvation": [
        "{name} the {kind} runs out of energy and fades away.",
        "Hunger claims {name} at ({x}, {y}).",
    ],
    "predation": [
        "{name} falls to {killer}. The food chain turns once more.",
        "{killer} catches {name} at ({x}, {y}).",
    ],
    "other": [
        "{name} the {kind} is gone: {cause}.",
    ],
}

PREDATION_PREFIXES = ("killed by ", "eaten by ")

WEATHER_TRANSITIONS = {
    "CLEAR": "The sky clears over the garden",
    "OVERCAST": "Clouds gather and the light goes flat",
    "RAIN": "Rain begins to fall",
    "STORM": "A storm breaks over the garden",
    "FOG": "Fog rolls in and swallows the paths",
    "DROUGHT": "The air dries out as a drought takes hold",
}

AMBIENT_TEMPLATES = {
    "night": [
        "Night holds the garden. {totalLiving} creatures wait for morning at {temperature} degrees.",
        "Under a dark sky, the fungi work while everything else sleeps.",
    ],
    "dawn": [
        "Dawn light touches {plantCount} plants. The herbivores stir.",
        "The garden wakes slowly in {moistureAdjective} air.",
    ],
    "day": [
        "Full daylight. {plantCount} plants drink in the sun while {herbivoreCount} herbivores graze.",
        "A {temperatureAdjective} day: {totalLiving} creatures go about the business of living.",
    ],
    "dusk": [
        "The light turns gold. {carnivoreCount} hunters begin their evening rounds.",
        "Dusk settles over {totalLiving} living things and {fungusCount} patient fungi.",
    ],
}

WEATHER_AMBIENT_TEMPLATES = {
    "RAIN": ["Rain patters on {plantCount} thirsty plants."],
    "STORM": ["Wind and thunder. Even the carnivores keep their heads down."],
    "FOG": ["In the fog, predator and prey pass within metres of each other."],
    "DROUGHT": ["The ground cracks. {herbivoreCount} herbivores search for anything green."],
}


def _pick(templates: list[str], key: str) -> str:
    return random.Random(key).choice(templates)


def _entity_values(entity: Entity) -> dict:
    return {
        "name": entity.name,
        "kind": entity.kind.value,
        "age": entity.age,
        "energy": round(entity.energy),
        "x": round(entity.position.x),
        "y": round(entity.position.y),
    }


def describe_birth(entity: Entity, parent_name: str | None = None) -> str:
    values = _entity_values(entity)
    if parent_name:
        return _pick(PARENT_TEMPLATES, f"{entity.id}:birth").format(parent_name=parent_name, **values)
    return _pick(BIRTH_TEMPLATES[entity.kind.value], f"{entity.id}:birth").format(**values)


def describe_death(entity: Entity, cause: str) -> str:
    values = _entity_values(entity)
    if cause.startswith(PREDATION_PREFIXES):
        template = _pick(DEATH_TEMPLATES["predation"], f"{entity.id}:death")
        return template.format(killer=cause.split(" by ", 1)[1], **values)
    templates = DEATH_TEMPLATES.get(cause, DEATH_TEMPLATES["other"])
    return _pick(templates, f"{entity.id}:death").format(cause=cause, **values)


def describe_reproduction(parent: Entity, offspring: Entity) -> str:
    return f"{parent.name} reproduces; {offspring.name} appears nearby."


def describe_mutation(entity: Entity, trait: str, old_value: float, new_value: float) -> str:
    direction = "rises" if new_value > old_value else "falls"
    label = trait.replace("_", " ")
    return f"{entity.name}'s {label} {direction} from {old_value:.3g} to {new_value:.3g}."


def describe_extinction(species: str, kind: str) -> str:
    return f"The last {kind} is gone. {species} has vanished from the garden."


def describe_population_explosion(kind: str, count: int) -> str:
    return f"The {kind} population explodes to {count}."


def describe_ecosystem_collapse(remaining: int) -> str:
    return f"The ecosystem is collapsing: only {remaining} living things remain."


def describe_weather_transition(
    previous: WeatherCondition | None, current: WeatherCondition
) -> str:
    lead = WEATHER_TRANSITIONS[current.value]
    if previous is None:
        return f"{lead}."
    return f"{lead} ({previous.value} to {current.value})."


def describe_temperature(temperature: float) -> str:
    if temperature >= 35:
        return "scorching"
    if temperature >= 28:
        return "warm"
    if temperature >= 22:
        return "pleasant"
    if temperature >= 15:
        return "mild"
    if temperature >= 10:
        return "cool"
    if temperature >= 5:
        return "chilly"
    return "freezing"


def describe_moisture(moisture: float) -> str:
    if moisture >= 0.8:
        return "lush and humid"
    if moisture >= 0.6:
        return "comfortably moist"
    if moisture >= 0.4:
        return "moderately dry"
    if moisture >= 0.2:
        return "dry"
    return "parched"


def ambient_narrative(
    environment: Environment,
    populations: PopulationSummary,
    entities: list[Entity],
) -> tuple[str, list[str]]:
    """One line of scene-setting prose for the tick, plus tags."""
    time_of_day = time_of_day_from_sunlight(environment.sunlight)
    weather = environment.weather_state.current_state.value
    key = f"ambient:{environment.tick}"
    values = {
        "plantCount": populations.plants,
        "herbivoreCount": populations.herbivores,
        "carnivoreCount": populations.carnivores,
        "fungusCount": populations.fungi,
        "totalLiving": populations.total_living,
        "temperature": round(environment.temperature),
        "temperatureAdjective": describe_temperature(environment.temperature),
        "moistureAdjective": describe_moisture(environment.moisture),
    }

    tags = [time_of_day]
    if weather in WEATHER_AMBIENT_TEMPLATES and random.Random(key).random() < 0.5:
        templates = WEATHER_AMBIENT_TEMPLATES[weather]
        tags.append("weather")
    else:
        templates = AMBIENT_TEMPLATES[time_of_day]
        tags.append("atmosphere")
    if not entities:
        tags.append("empty")
    return _pick(templates, key).format(**values), tags
