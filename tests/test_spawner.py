import random
from collections import Counter

import pytest

from snake_arcade.constants import DEFAULT_POWER_UP, POWER_UPS, SPECIAL_FOOD_LIFETIME
from snake_arcade.errors import GridFullError, SnakeArcadeError
from snake_arcade.grid import Grid
from snake_arcade.spawner import make_regular_food, make_special_food, pick_power_up, place_food


class FixedDraw:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def test_place_food_avoids_occupied_cells():
    rng = random.Random(7)
    grid = Grid(200, 200, 20)
    for _ in range(300):
        occupied = {grid.random_cell(rng) for _ in range(60)}
        cell = place_food(grid, occupied, rng)
        assert cell not in occupied
        assert grid.in_bounds(cell)
        assert cell[0] % 20 == 0 and cell[1] % 20 == 0


def test_place_food_finds_last_free_cell():
    grid = Grid(100, 100, 20)
    free = (60, 40)
    occupied = set(grid.cells()) - {free}
    assert place_food(grid, occupied, random.Random(3), attempts=5) == free


def test_place_food_on_full_board_raises():
    grid = Grid(60, 60, 20)
    with pytest.raises(GridFullError):
        place_food(grid, set(grid.cells()), random.Random(3))
    assert issubclass(GridFullError, SnakeArcadeError)


def test_pick_power_up_walks_cumulative_weights():
    assert pick_power_up(FixedDraw(0.0)) == "speed_boost"
    assert pick_power_up(FixedDraw(0.25)) == "speed_boost"
    assert pick_power_up(FixedDraw(0.26)) == "slow_time"
    assert pick_power_up(FixedDraw(0.5)) == "invincibility"
    assert pick_power_up(FixedDraw(0.99)) == "double_points"


def test_pick_power_up_falls_back_to_default():
    table = {"shrink": {"probability": 0.3}, "double_points": {"probability": 0.3}}
    assert pick_power_up(FixedDraw(0.9), table=table) == DEFAULT_POWER_UP
    assert pick_power_up(FixedDraw(0.9), table=table, default="shrink") == "shrink"


def test_power_up_frequencies_match_weights():
    rng = random.Random(42)
    trials = 40000
    counts = Counter(pick_power_up(rng) for _ in range(trials))
    for kind, spec in POWER_UPS.items():
        assert counts[kind] / trials == pytest.approx(spec["probability"], abs=0.015)


def test_food_builders():
    grid = Grid(200, 200, 20)
    rng = random.Random(5)
    food = make_regular_food(grid, set(), 50.0, rng)
    assert not food.special and food.expires_at is None and food.spawned_at == 50.0

    special = make_special_food(grid, {food.cell}, 100.0, SPECIAL_FOOD_LIFETIME, rng)
    assert special.kind in POWER_UPS
    assert special.color == POWER_UPS[special.kind]["color"]
    assert special.expires_at == 100.0 + SPECIAL_FOOD_LIFETIME
    assert special.cell != food.cell
