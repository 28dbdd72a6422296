"""Tests for carnivore behavior: hunting, pursuit, carcasses, upkeep."""

from __future__ import annotations

import pytest

from chaosgarden.src.carnivores import hunt, process_carnivore
from chaosgarden.src.entities import Carnivore
from chaosgarden.tests.factories import FIXED_NOW, build_carnivore, build_corpse, build_herbivore


class TestHunting:
    def test_small_prey_is_eaten_whole(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=50.0)
        prey = build_herbivore(x=105.0, energy=10.0)

        result = process_carnivore(carnivore, environment, [prey], event_logger, rng)

        # +10 from the prey, -1.125 upkeep at 20 degrees
        assert carnivore.energy == pytest.approx(58.875)
        assert prey.energy == 0.0
        assert not prey.is_alive
        assert prey.death_cause == f"killed by {carnivore.name}"
        assert result.consumed == [prey.id]

    def test_large_prey_leaves_a_carcass(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=50.0)
        prey = build_herbivore(x=105.0, energy=100.0)

        process_carnivore(carnivore, environment, [prey], event_logger, rng)

        assert carnivore.energy == pytest.approx(98.875)
        assert prey.energy == pytest.approx(50.0)
        assert not prey.is_alive

    def test_feeding_restores_health(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=30.0, health=70.0)
        prey = build_herbivore(x=105.0, energy=20.0, health=60.0)

        process_carnivore(carnivore, environment, [prey], event_logger, rng)

        assert carnivore.energy == pytest.approx(48.875)
        assert carnivore.health == pytest.approx(75.0)

    def test_total_energy_never_increases(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=40.0)
        prey = build_herbivore(x=104.0, energy=70.0)
        before = carnivore.energy + prey.energy

        process_carnivore(carnivore, environment, [prey], event_logger, rng)

        assert carnivore.energy + prey.energy <= before

    def test_well_fed_carnivore_does_not_hunt(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=70.0)
        prey = build_herbivore(x=105.0, energy=50.0)

        result = process_carnivore(carnivore, environment, [prey], event_logger, rng)

        assert prey.is_alive
        assert result.consumed == []
        assert carnivore.energy == pytest.approx(68.875)

    def test_dead_prey_is_ignored(self, environment, event_logger, rng):
        carnivore = build_carnivore(x=400.0, y=300.0, energy=50.0)
        carcass = build_herbivore(x=404.0, y=300.0, energy=40.0, is_alive=False)

        result = process_carnivore(carnivore, environment, [carcass], event_logger, rng)

        assert result.consumed == []
        assert carcass.energy == 40.0

    def test_hunt_kills_even_an_empty_prey(self):
        carnivore = build_carnivore(energy=50.0)
        prey = build_herbivore(energy=0.0)
        assert hunt(carnivore, prey) == 0.0
        assert not prey.is_alive


class TestPursuit:
    def test_chases_prey_in_perception_range(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=50.0)
        prey = build_herbivore(x=200.0, energy=50.0)

        process_carnivore(carnivore, environment, [prey], event_logger, rng)

        assert carnivore.position.x == pytest.approx(104.6)
        pursuit_cost = 0.1 * 4.6 / 1.1 * 1.2
        assert carnivore.energy == pytest.approx(50.0 - pursuit_cost - 1.125)
        assert prey.is_alive

    def test_heads_for_prey_beyond_perception(self, environment, event_logger, rng):
        carnivore = build_carnivore(x=400.0, y=300.0, energy=50.0)
        prey = build_herbivore(x=700.0, y=300.0, energy=50.0)

        process_carnivore(carnivore, environment, [prey], event_logger, rng)

        reach = 4.6 * 0.85
        assert carnivore.position.x == pytest.approx(400.0 + reach)
        assert carnivore.position.y == pytest.approx(300.0)
        search_cost = 0.1 * reach / 1.1 * 0.85
        assert carnivore.energy == pytest.approx(50.0 - search_cost - 1.125)
        assert prey.is_alive

    def test_idles_when_no_herbivore_exists(self, environment, event_logger, rng):
        carnivore = build_carnivore(x=400.0, y=300.0, energy=50.0)
        carcass = build_corpse(x=420.0, y=300.0)

        process_carnivore(carnivore, environment, [carcass], event_logger, rng)

        assert (carnivore.position.x, carnivore.position.y) == (400.0, 300.0)
        # quarter of the base upkeep, then the temperature-scaled upkeep
        assert carnivore.energy == pytest.approx(50.0 - 0.225 - 1.125)


class TestCarnivoreLifecycle:
    def test_dies_the_tick_its_energy_runs_out(self, environment, event_logger, rng):
        carnivore = build_carnivore(x=400.0, y=300.0, energy=1.0, health=100.0)

        process_carnivore(carnivore, environment, [], event_logger, rng)

        assert not carnivore.is_alive
        assert carnivore.energy == 0.0
        assert carnivore.health == 0.0
        assert carnivore.death_cause == "starvation"

    def test_starving_carnivore_that_feeds_survives(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=0.0, health=40.0)
        prey = build_herbivore(x=102.0, energy=20.0)

        process_carnivore(carnivore, environment, [prey], event_logger, rng)

        assert carnivore.is_alive
        assert carnivore.energy == pytest.approx(20.0 - 1.125)
        # +5 feeding, +15 starvation recovery
        assert carnivore.health == pytest.approx(60.0)

    def test_dies_of_old_age(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=80.0, age=200)

        process_carnivore(carnivore, environment, [], event_logger, rng)

        assert not carnivore.is_alive
        assert carnivore.death_cause == "old age"

    def test_reproduces_when_full(self, environment, event_logger, rng):
        carnivore = build_carnivore(energy=100.0, reproduction_rate=1.0)

        result = process_carnivore(carnivore, environment, [], event_logger, rng, now=FIXED_NOW)

        assert len(result.offspring) == 1
        assert isinstance(result.offspring[0], Carnivore)
        assert result.offspring[0].energy == pytest.approx(50.0)
        assert carnivore.energy == pytest.approx(100.0 - 1.125 - 50.0)
