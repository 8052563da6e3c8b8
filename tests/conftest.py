import random

import pytest

from snake_arcade.collaborators import MemoryHighScoreStore
from snake_arcade.game import GameSession
from snake_arcade.models import Food
from snake_arcade.scheduler import ManualScheduler


class RecordingRenderer:
    def __init__(self):
        self.frames = []
        self._current = None

    def draw_board(self):
        self._current = {"snake": None, "food": [], "indicators": [], "clock": None, "overlay": None}

    def draw_snake(self, segments, style):
        self._current["snake"] = (segments, style)

    def draw_food(self, cell, style):
        self._current["food"].append((cell, style))

    def draw_indicators(self, records, now):
        self._current["indicators"] = [(r.type, r.expires_at) for r in records]
        self._current["clock"] = now

    def draw_overlay(self, kind):
        self._current["overlay"] = kind

    def present(self):
        self.frames.append(self._current)
        self._current = None


class RecordingAudio:
    def __init__(self):
        self.played = []

    def play_sound(self, kind):
        self.played.append(kind)


class BrokenAudio:
    def play_sound(self, kind):
        raise OSError("no audio device")


class RecordingScoreBoard:
    def __init__(self):
        self.scores = []
        self.statuses = []

    def set_score_text(self, value):
        self.scores.append(value)

    def set_status_text(self, message):
        self.statuses.append(message)


# Special food stays off the board unless a test asks for it.
QUIET_OPTIONS = {"special_food_delay": 10 ** 9, "special_food_interval": 10 ** 9}


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def scoreboard():
    return RecordingScoreBoard()


@pytest.fixture
def store():
    return MemoryHighScoreStore()


@pytest.fixture
def make_session(scheduler, renderer, audio, scoreboard, store):
    def factory(**options):
        merged = {**QUIET_OPTIONS, **options}
        return GameSession(
            scheduler,
            renderer=renderer,
            audio=audio,
            scoreboard=scoreboard,
            store=store,
            options=merged,
            rng=random.Random(1234),
        )
    return factory


def park_food(session, cell=(0, 0)):
    """Put the regular food somewhere the snake will not reach soon."""
    session.food = Food(cell=cell)
