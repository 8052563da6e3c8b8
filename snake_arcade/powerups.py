"""Timed power-up effects."""

import logging
import math
from typing import Callable, Optional

from .constants import MIN_INTERVAL, POWER_UPS, SHRINK_AMOUNT
from .models import ActivePowerUp, SessionState, Snake

logger = logging.getLogger(__name__)


def scaled_interval(original_speed: int, multiplier: float) -> int:
    return max(MIN_INTERVAL, math.floor(original_speed * multiplier + 0.5))


class PowerUpManager:
    """Applies power-ups to a session and reverts them when they run out.

    Speed changes are reported through ``on_speed_change`` so the owner can
    re-arm its tick timer with the new interval.
    """

    def __init__(self, state: SessionState, snake: Snake,
                 on_speed_change: Optional[Callable[[int], None]] = None):
        self.state = state
        self.snake = snake
        self.on_speed_change = on_speed_change
        self.active: list[ActivePowerUp] = []

    def is_active(self, kind: str) -> bool:
        return any(p.type == kind for p in self.active)

    def apply(self, kind: str, now: float):
        spec = POWER_UPS[kind]

        if kind == "shrink":
            removed = self.snake.shrink(SHRINK_AMOUNT)
            logger.info("Shrink removed %d segment(s), length now %d", removed, len(self.snake))
            return None

        self.active = [p for p in self.active if p.type != kind]
        record = ActivePowerUp(type=kind, expires_at=now + spec["duration"])
        self.active.append(record)

        if "speed_multiplier" in spec:
            self._set_speed(scaled_interval(self.state.original_speed, spec["speed_multiplier"]))
        elif kind == "invincibility":
            self.state.invincible = True
        elif kind == "double_points":
            self.state.multiplier = 2

        logger.info("%s activated until %.0f", spec["name"], record.expires_at)
        return record

    def expire(self, kind: str):
        self.active = [p for p in self.active if p.type != kind]
        spec = POWER_UPS[kind]

        if "speed_multiplier" in spec:
            # Another speed power-up still running keeps its own rate.
            remaining = [p for p in self.active if "speed_multiplier" in POWER_UPS[p.type]]
            if remaining:
                latest = POWER_UPS[remaining[-1].type]["speed_multiplier"]
                self._set_speed(scaled_interval(self.state.original_speed, latest))
            else:
                self._set_speed(self.state.original_speed)
        elif kind == "invincibility":
            self.state.invincible = False
        elif kind == "double_points":
            self.state.multiplier = 1

        logger.info("%s expired", spec["name"])

    def expire_due(self, now: float) -> list[str]:
        due = [p.type for p in self.active if now >= p.expires_at]
        for kind in due:
            self.expire(kind)
        return due

    def shift(self, delta: float):
        for p in self.active:
            p.expires_at += delta

    def clear(self):
        self.active.clear()

    def _set_speed(self, interval: int):
        if interval == self.state.speed:
            return
        self.state.speed = interval
        if self.on_speed_change:
            self.on_speed_change(interval)
