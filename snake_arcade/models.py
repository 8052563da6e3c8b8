"""Data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import CELL_SIZE, DEFAULT_SPEED, DIRECTIONS, FOOD_COLOR, MIN_SNAKE_LENGTH, OPPOSITES, REGULAR


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


def validate_direction_change(requested: str, current: str) -> bool:
    """A turn is accepted unless it reverses the committed direction."""
    return requested in DIRECTIONS and OPPOSITES[requested] != current


@dataclass
class Snake:
    segments: list = field(default_factory=list)  # [(x, y), ...] head first
    direction: str = "right"
    next_direction: str = "right"
    cell_size: int = CELL_SIZE

    @classmethod
    def create(cls, head, length: int, direction: str = "right", cell_size: int = CELL_SIZE) -> "Snake":
        dx, dy = DIRECTIONS[direction]
        hx, hy = head
        segments = [(hx - dx * cell_size * i, hy - dy * cell_size * i) for i in range(length)]
        return cls(segments=segments, direction=direction, next_direction=direction, cell_size=cell_size)

    def head(self):
        return self.segments[0] if self.segments else None

    def __len__(self):
        return len(self.segments)

    def change_direction(self, requested: str) -> bool:
        if not validate_direction_change(requested, self.direction):
            return False
        self.next_direction = requested
        return True

    def commit_direction(self) -> str:
        self.direction = self.next_direction
        return self.direction

    def next_head(self, direction: Optional[str] = None):
        dx, dy = DIRECTIONS[direction or self.direction]
        hx, hy = self.segments[0]
        return (hx + dx * self.cell_size, hy + dy * self.cell_size)

    def advance(self, direction: Optional[str] = None, grow: bool = False, head=None):
        """Move one cell; the tail stays put when growing.

        ``head`` overrides the computed cell, e.g. after it was wrapped onto the board.
        """
        new_head = head if head is not None else self.next_head(direction)
        self.segments.insert(0, new_head)
        if not grow:
            self.segments.pop()
        return new_head

    def shrink(self, n: int) -> int:
        removed = max(0, min(n, len(self.segments) - MIN_SNAKE_LENGTH))
        if removed:
            del self.segments[-removed:]
        return removed


@dataclass
class Food:
    cell: tuple
    kind: str = REGULAR
    color: str = FOOD_COLOR
    spawned_at: float = 0.0
    expires_at: Optional[float] = None

    @property
    def special(self) -> bool:
        return self.kind != REGULAR


@dataclass
class ActivePowerUp:
    type: str
    expires_at: float


@dataclass
class SessionState:
    score: int = 0
    multiplier: int = 1
    invincible: bool = False
    speed: int = DEFAULT_SPEED
    original_speed: int = DEFAULT_SPEED
    phase: Phase = Phase.IDLE
    high_score: int = 0
    last_score: int = 0
    accepting_input: bool = False

    @property
    def paused(self) -> bool:
        return self.phase == Phase.PAUSED

    @property
    def in_progress(self) -> bool:
        return self.phase in (Phase.RUNNING, Phase.PAUSED)
