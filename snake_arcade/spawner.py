"""Food placement and power-up selection."""

import random
from typing import Optional

from .constants import DEFAULT_POWER_UP, FOOD_COLOR, MAX_SPAWN_ATTEMPTS, POWER_UPS, REGULAR
from .errors import GridFullError
from .grid import Cell, Grid
from .models import Food


def place_food(grid: Grid, occupied: set, rng=random, attempts: int = MAX_SPAWN_ATTEMPTS) -> Cell:
    """Pick a random free cell.

    Sampling is retried a bounded number of times; after that the board is
    scanned so a nearly full board still finds its last free cells. Raises
    GridFullError when nothing is free.
    """
    for _ in range(attempts):
        cell = grid.random_cell(rng)
        if cell not in occupied:
            return cell

    free = [cell for cell in grid.cells() if cell not in occupied]
    if not free:
        raise GridFullError(f"no free cell on a {grid.columns}x{grid.rows} board")
    return rng.choice(free)


def pick_power_up(rng=random, table: Optional[dict] = None, default: str = DEFAULT_POWER_UP) -> str:
    table = POWER_UPS if table is None else table
    draw = rng.random()
    cumulative = 0.0
    for kind, spec in table.items():
        cumulative += spec["probability"]
        if cumulative >= draw:
            return kind
    # Rounding can leave the cumulative total just short of the draw.
    return default


def make_regular_food(grid: Grid, occupied: set, now: float, rng=random) -> Food:
    return Food(cell=place_food(grid, occupied, rng), kind=REGULAR, color=FOOD_COLOR, spawned_at=now)


def make_special_food(grid: Grid, occupied: set, now: float, lifetime: float, rng=random) -> Food:
    kind = pick_power_up(rng)
    return Food(
        cell=place_food(grid, occupied, rng),
        kind=kind,
        color=POWER_UPS[kind]["color"],
        spawned_at=now,
        expires_at=now + lifetime,
    )
