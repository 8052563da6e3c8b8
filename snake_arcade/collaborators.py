"""Interfaces the engine talks to, plus the stock implementations."""

import json
import logging
import os
from typing import Protocol

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def draw_board(self) -> None: ...

    def draw_snake(self, segments: list, style: dict) -> None: ...

    def draw_food(self, cell: tuple, style: dict) -> None: ...

    def draw_indicators(self, records: list, now: float) -> None: ...

    def draw_overlay(self, kind: str) -> None: ...

    def present(self) -> None: ...


class AudioPlayer(Protocol):
    def play_sound(self, kind: str) -> None: ...


class HighScoreStore(Protocol):
    def load_high_score(self) -> int: ...

    def save_high_score(self, score: int) -> None: ...


class ScoreBoard(Protocol):
    def set_score_text(self, value: int) -> None: ...

    def set_status_text(self, message: str) -> None: ...


class NullRenderer:
    def draw_board(self):
        pass

    def draw_snake(self, segments, style):
        pass

    def draw_food(self, cell, style):
        pass

    def draw_indicators(self, records, now):
        pass

    def draw_overlay(self, kind):
        pass

    def present(self):
        pass


class NullAudio:
    def play_sound(self, kind):
        pass


class NullScoreBoard:
    def set_score_text(self, value):
        pass

    def set_status_text(self, message):
        pass


class MemoryHighScoreStore:
    def __init__(self, score: int = 0):
        self.score = score
        self.saves: list[int] = []

    def load_high_score(self) -> int:
        return self.score

    def save_high_score(self, score: int):
        self.score = score
        self.saves.append(score)


class JsonHighScoreStore:
    """Keeps one high score per game key in a small JSON file."""

    def __init__(self, path: str, key: str = "snake"):
        self.path = path
        self.key = key

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading high score from %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load_high_score(self) -> int:
        value = self._read().get(self.key, 0)
        return value if isinstance(value, int) else 0

    def save_high_score(self, score: int):
        data = self._read()
        data[self.key] = score
        try:
            with open(self.path, "w") as f:
                json.dump(data, f, indent=4)
        except OSError as e:
            logger.error("Error saving high score to %s: %s", self.path, e)
            return
        logger.info("High score %d saved", score)
