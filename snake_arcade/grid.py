"""Playfield geometry."""

import random
from dataclasses import dataclass
from typing import Iterator

from .constants import CANVAS_W, CANVAS_H, CELL_SIZE, DIRECTIONS

Cell = tuple[int, int]


@dataclass(frozen=True)
class Grid:
    width: int = CANVAS_W
    height: int = CANVAS_H
    cell_size: int = CELL_SIZE

    def __post_init__(self):
        if self.cell_size <= 0 or self.width < self.cell_size or self.height < self.cell_size:
            raise ValueError(f"board {self.width}x{self.height} cannot hold a {self.cell_size}px cell")

    @property
    def max_x(self) -> int:
        return (self.width - self.cell_size) // self.cell_size * self.cell_size

    @property
    def max_y(self) -> int:
        return (self.height - self.cell_size) // self.cell_size * self.cell_size

    @property
    def columns(self) -> int:
        return self.max_x // self.cell_size + 1

    @property
    def rows(self) -> int:
        return self.max_y // self.cell_size + 1

    def step(self, cell: Cell, direction: str) -> Cell:
        dx, dy = DIRECTIONS[direction]
        return (cell[0] + dx * self.cell_size, cell[1] + dy * self.cell_size)

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x <= self.width - self.cell_size and 0 <= y <= self.height - self.cell_size

    def wrap(self, cell: Cell) -> Cell:
        """Fold a cell that left the board back in from the opposite edge."""
        x, y = cell
        if x < 0:
            x = self.max_x
        elif x > self.max_x:
            x = 0
        if y < 0:
            y = self.max_y
        elif y > self.max_y:
            y = 0
        return (x, y)

    def center(self) -> Cell:
        return (
            self.width // 2 // self.cell_size * self.cell_size,
            self.height // 2 // self.cell_size * self.cell_size,
        )

    def random_cell(self, rng=random) -> Cell:
        return (
            rng.randrange(self.columns) * self.cell_size,
            rng.randrange(self.rows) * self.cell_size,
        )

    def cells(self) -> Iterator[Cell]:
        for y in range(0, self.max_y + 1, self.cell_size):
            for x in range(0, self.max_x + 1, self.cell_size):
                yield (x, y)
