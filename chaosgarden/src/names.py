"""Human-readable creature names.

Produces kind-themed compound names like "Fern-whisper" or "Fang-stalker".
Offspring usually keep half of the parent's name so lineages stay recognisable.
"""

from __future__ import annotations

import random

PREFIXES = {
    "plant": [
        "Fern", "Flower", "Grass", "Vine", "Succulent",
        "Lily", "Moss", "Cactus", "Bush", "Herb",
    ],
    "herbivore": [
        "Butterfly", "Beetle", "Rabbit", "Snail", "Cricket",
        "Ladybug", "Grasshopper", "Ant", "Bee", "Moth",
    ],
    "carnivore": [
        "Fang", "Claw", "Night", "Shadow", "Sharp",
        "Hunt", "Stalk", "Blood", "Pounce", "Roar",
    ],
    "fungus": [
        "Spore", "Cap", "Mycel", "Mold", "Glow",
        "Damp", "Shroom", "Puff", "Web", "Rot",
    ],
}

SUFFIXES = {
    "plant": [
        "whisper", "glow", "heart", "reach", "shade",
        "burst", "thorn", "bud", "leaf", "petal",
    ],
    "herbivore": [
        "stride", "dash", "leap", "bound", "graze",
        "fleet", "fur", "step", "breeze", "song",
    ],
    "carnivore": [
        "strike", "rip", "tear", "kill", "fang",
        "pounce", "shade", "hunter", "stalker", "howl",
    ],
    "fungus": [
        "pulse", "spread", "bloom", "rot", "puff",
        "creep", "glow", "web", "drift", "spore",
    ],
}

PARENT_NAME_INHERITANCE_CHANCE = 0.7


def generate_name(kind: str, rng: random.Random, parent_name: str | None = None) -> str:
    """Generate a "Prefix-suffix" name for an entity of the given kind.

    With a parent name, one half of it is usually carried over and the
    other half is drawn fresh.
    """
    kind = str(getattr(kind, "value", kind))
    prefixes = PREFIXES[kind]
    suffixes = SUFFIXES[kind]

    if parent_name and "-" in parent_name and rng.random() < PARENT_NAME_INHERITANCE_CHANCE:
        parent_prefix, parent_suffix = parent_name.split("-", 1)
        if rng.random() < 0.5:
            return f"{parent_prefix}-{rng.choice(suffixes)}"
        return f"{rng.choice(prefixes)}-{parent_suffix}"

    return f"{rng.choice(prefixes)}-{rng.choice(suffixes)}"


def category_from_name(name: str) -> str:
    """The prefix part of a generated name, used as the species label."""
    return name.split("-", 1)[0] if name else ""
