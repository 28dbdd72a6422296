"""Tests for entity types and their serialization."""

from __future__ import annotations

from chaosgarden.src.entities import (
    ENTITY_CLASSES,
    Carnivore,
    Entity,
    EntityKind,
    Fungus,
    Herbivore,
    Plant,
    partition_by_kind,
    trait_domain,
)
from chaosgarden.tests.factories import (
    build_carnivore,
    build_corpse,
    build_fungus,
    build_herbivore,
    build_plant,
)


class TestEntityKinds:
    def test_class_per_kind(self):
        assert ENTITY_CLASSES == {
            EntityKind.PLANT: Plant,
            EntityKind.HERBIVORE: Herbivore,
            EntityKind.CARNIVORE: Carnivore,
            EntityKind.FUNGUS: Fungus,
        }

    def test_species_defaults_to_name_prefix(self):
        assert build_plant(name="Fern-whisper").species == "Fern"

    def test_explicit_species_kept(self):
        assert build_plant(name="Fern-whisper", species="Bracken").species == "Bracken"

    def test_traits_per_kind(self):
        assert set(build_plant().traits()) == {
            "photosynthesis_rate", "reproduction_rate", "metabolism_efficiency",
        }
        assert "threat_detection_radius" in build_herbivore().traits()
        assert "threat_detection_radius" not in build_carnivore().traits()
        assert "decomposition_rate" in build_fungus().traits()

    def test_unknown_trait_domain_is_open(self):
        low, high = trait_domain("wingspan")
        assert low == 0.0 and high == float("inf")


class TestSerialization:
    def test_to_dict_tags_kind_and_flattens_position(self):
        data = build_herbivore(x=12.0, y=34.0).to_dict()
        assert data["type"] == "herbivore"
        assert data["position"] == {"x": 12.0, "y": 34.0}
        assert "movement_speed" in data

    def test_round_trip_restores_subclass(self):
        for entity in (build_plant(), build_herbivore(), build_carnivore(), build_fungus(), build_corpse()):
            restored = Entity.from_dict(entity.to_dict())
            assert type(restored) is type(entity)
            assert restored == entity

    def test_unknown_fields_are_dropped(self):
        data = build_fungus().to_dict()
        data["mood"] = "grumpy"
        assert isinstance(Entity.from_dict(data), Fungus)


class TestPartitionByKind:
    def test_every_kind_present_and_order_kept(self):
        first, second = build_plant(), build_plant()
        fungus = build_fungus()
        groups = partition_by_kind([first, fungus, second])
        assert groups[EntityKind.PLANT] == [first, second]
        assert groups[EntityKind.FUNGUS] == [fungus]
        assert groups[EntityKind.HERBIVORE] == []
        assert groups[EntityKind.CARNIVORE] == []
