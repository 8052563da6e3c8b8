"""Core game state and logic."""

import logging
import random
from typing import Optional

from .collaborators import (
    AudioPlayer, HighScoreStore, MemoryHighScoreStore, NullAudio, NullRenderer,
    NullScoreBoard, Renderer, ScoreBoard,
)
from .collision import check_collision
from .constants import (
    DEFAULT_OPTIONS, DIFFICULTIES, KEY_CODES, KEY_NAMES, MAX_DIFFICULTY_SPEED,
    MIN_INTERVAL, MIN_SNAKE_LENGTH, POWER_UPS, RENDER_INTERVAL, SCORE_PER_FOOD,
    SNAKE_BORDER, SNAKE_COLOR,
)
from .errors import GridFullError
from .grid import Grid
from .models import Phase, SessionState, Snake
from .powerups import PowerUpManager
from .scheduler import Scheduler
from .spawner import make_regular_food, make_special_food

logger = logging.getLogger(__name__)


def resolve_key(key) -> Optional[str]:
    """Map a key code or ``KeyboardEvent.key`` name to an action."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return KEY_CODES.get(key)
    if isinstance(key, str):
        return KEY_NAMES.get(key)
    return None


class GameSession:
    """One player's game: snake, food, power-ups and the timers driving them.

    Timers come from the injected scheduler. The tick timer moves the snake,
    the render timer only redraws, and the special-food timers drop a power-up
    on the board every so often. Ending a game cancels all of them and bumps
    the session generation so callbacks already queued do nothing.
    """

    def __init__(self, scheduler: Scheduler, renderer: Optional[Renderer] = None,
                 audio: Optional[AudioPlayer] = None, scoreboard: Optional[ScoreBoard] = None,
                 store: Optional[HighScoreStore] = None, grid: Optional[Grid] = None,
                 options: Optional[dict] = None, rng=None):
        self.scheduler = scheduler
        self.renderer = renderer or NullRenderer()
        self.audio = audio or NullAudio()
        self.scoreboard = scoreboard or NullScoreBoard()
        self.store = store or MemoryHighScoreStore()
        self.options = {**DEFAULT_OPTIONS, **(options or {})}
        if self.options["initial_length"] < MIN_SNAKE_LENGTH:
            raise ValueError(f"initial_length must be at least {MIN_SNAKE_LENGTH}")
        self.grid = grid or Grid(self.options["width"], self.options["height"], self.options["cell_size"])
        start = Snake.create(self.grid.center(), self.options["initial_length"], "right", self.grid.cell_size)
        if not all(self.grid.in_bounds(cell) for cell in start.segments):
            raise ValueError(
                f"a {self.options['initial_length']}-cell snake does not fit on a {self.grid.width}x{self.grid.height} board"
            )
        self.rng = rng or random.Random()

        self.state = SessionState(high_score=self.store.load_high_score())
        self.choose_difficulty(self.options["speed"])

        self._generation = 0
        self._tick_timer = None
        self._render_timer = None
        self._special_timers: list = []
        self._paused_at: Optional[float] = None
        self.last_update = scheduler.now()
        self.animation_time = 0.0

        self.set_up_game()

    # ── Setup ──────────────────────────────────────────────────────

    def set_up_game(self):
        self.snake = Snake.create(
            self.grid.center(), self.options["initial_length"], "right", self.grid.cell_size
        )
        self.food = None
        self.special_food = None
        self.power_ups = PowerUpManager(self.state, self.snake, self._on_speed_change)

        st = self.state
        st.score = 0
        st.multiplier = 1
        st.invincible = False
        st.speed = st.original_speed
        st.phase = Phase.IDLE
        st.accepting_input = False
        self._paused_at = None

    def choose_difficulty(self, value) -> Optional[int]:
        if self.state.in_progress:
            logger.debug("Difficulty change ignored while a game is running")
            return None
        if isinstance(value, str) and value in DIFFICULTIES:
            speed = DIFFICULTIES[value]
        elif isinstance(value, int) and not isinstance(value, bool) and MIN_INTERVAL <= value <= MAX_DIFFICULTY_SPEED:
            speed = value
        else:
            raise ValueError(f"unknown difficulty: {value!r}")
        self.state.speed = speed
        self.state.original_speed = speed
        return speed

    @property
    def active_power_ups(self) -> list:
        return list(self.power_ups.active)

    # ── Session lifecycle ──────────────────────────────────────────

    def start(self, speed=None) -> bool:
        if self.state.phase != Phase.IDLE:
            logger.debug("Start ignored, game is %s", self.state.phase.value)
            return False
        if speed is not None:
            self.choose_difficulty(speed)

        self.set_up_game()
        self._generation += 1
        now = self.scheduler.now()
        self.state.phase = Phase.RUNNING
        self.state.accepting_input = True
        self.last_update = now
        self.animation_time = 0.0

        self.scoreboard.set_score_text(0)
        self.scoreboard.set_status_text("")
        self._replenish_food(now)

        self._arm_tick_timer()
        self._render_timer = self.scheduler.call_every(RENDER_INTERVAL, self._guarded(self.render_frame))
        self._special_timers.append(
            self.scheduler.call_later(self.options["special_food_delay"], self._guarded(self._begin_special_food))
        )
        self.render_frame()
        logger.info("Game started at %d ms per tick", self.state.speed)
        return True

    def pause(self) -> bool:
        if self.state.phase != Phase.RUNNING:
            logger.debug("Pause ignored, game is %s", self.state.phase.value)
            return False
        self.state.phase = Phase.PAUSED
        self._paused_at = self.scheduler.now()
        self.render_frame()
        return True

    def resume(self) -> bool:
        if self.state.phase != Phase.PAUSED:
            logger.debug("Resume ignored, game is %s", self.state.phase.value)
            return False
        now = self.scheduler.now()
        paused_for = now - self._paused_at
        self.power_ups.shift(paused_for)
        if self.special_food is not None and self.special_food.expires_at is not None:
            self.special_food.expires_at += paused_for

        self.state.phase = Phase.RUNNING
        self._paused_at = None
        self.last_update = now
        self.render_frame()
        return True

    def toggle_pause(self) -> bool:
        if self.state.paused:
            return self.resume()
        return self.pause()

    def end(self, reason: str = "collision") -> bool:
        if not self.state.in_progress:
            return False
        self._generation += 1
        self._cancel_timers()

        st = self.state
        st.phase = Phase.GAME_OVER
        st.accepting_input = False
        final = st.score
        st.last_score = final
        self._play("gameOver")
        self.render_frame()

        if final > st.high_score:
            st.high_score = final
            self.store.save_high_score(final)
            logger.info("New high score %d", final)

        title = "Board full" if reason == "board_full" else "Game Over"
        self.scoreboard.set_status_text(f"{title} - Score: {final}")
        logger.info("Game over (%s), score %d", reason, final)

        self.set_up_game()
        return True

    # ── Input ──────────────────────────────────────────────────────

    def handle_input(self, key) -> Optional[str]:
        """Apply a key press; returns the action taken or None if ignored."""
        action = resolve_key(key)
        if action is None or not self.state.accepting_input:
            return None
        if action == "pause":
            return action if self.toggle_pause() else None
        if self.state.paused or not self.snake.change_direction(action):
            return None
        return action

    # ── Timers ─────────────────────────────────────────────────────

    def tick(self):
        if self.state.phase != Phase.RUNNING:
            return
        now = self.scheduler.now()

        self.power_ups.expire_due(now)
        special = self.special_food
        if special is not None and special.expires_at is not None and now >= special.expires_at:
            self.special_food = None

        direction = self.snake.commit_direction()
        new_head = self.snake.next_head(direction)
        eats = self.food is not None and new_head == self.food.cell
        body = self.snake.segments if eats else self.snake.segments[:-1]
        if check_collision([new_head] + body, self.grid, ignore_collisions=self.state.invincible):
            self.end("collision")
            return

        if not self.grid.in_bounds(new_head):
            new_head = self.grid.wrap(new_head)
            eats = self.food is not None and new_head == self.food.cell

        self.snake.advance(grow=eats, head=new_head)
        if eats:
            self._eat_food()
        elif self.special_food is not None and new_head == self.special_food.cell:
            self._eat_special_food(now)

        try:
            self._replenish_food(now)
        except GridFullError:
            self.end("board_full")

    def render_frame(self):
        """Redraw from current state. Never mutates game logic state."""
        now = self.scheduler.now()
        if self.state.phase == Phase.RUNNING:
            self.animation_time += now - self.last_update
        self.last_update = now

        r = self.renderer
        r.draw_board()
        if self.food is not None:
            r.draw_food(self.food.cell, {"color": self.food.color, "kind": self.food.kind})
        if self.special_food is not None:
            r.draw_food(self.special_food.cell, {
                "color": self.special_food.color,
                "kind": self.special_food.kind,
                "pulse": (self.animation_time % 1000) / 1000,
            })
        r.draw_snake(list(self.snake.segments), {
            "color": SNAKE_COLOR,
            "border": SNAKE_BORDER,
            "invincible": self.state.invincible,
        })
        r.draw_indicators(self.active_power_ups, self._paused_at if self.state.paused else now)
        if self.state.paused:
            r.draw_overlay("paused")
        elif self.state.phase == Phase.GAME_OVER:
            r.draw_overlay("game_over")
        r.present()

    def spawn_special_food(self):
        if self.state.phase != Phase.RUNNING:
            return None
        now = self.scheduler.now()
        occupied = self._occupied()
        if self.special_food is not None:
            occupied.discard(self.special_food.cell)
        try:
            self.special_food = make_special_food(
                self.grid, occupied, now, self.options["special_food_lifetime"], self.rng
            )
        except GridFullError:
            logger.debug("No room for special food")
            return None
        return self.special_food

    def _begin_special_food(self):
        self.spawn_special_food()
        self._special_timers.append(
            self.scheduler.call_every(self.options["special_food_interval"], self._guarded(self.spawn_special_food))
        )

    def _guarded(self, callback):
        generation = self._generation

        def run():
            if generation != self._generation or not self.state.in_progress:
                return
            callback()

        return run

    def _arm_tick_timer(self):
        if self._tick_timer is not None:
            self._tick_timer.cancel()
        self._tick_timer = self.scheduler.call_every(self.state.speed, self._guarded(self.tick))

    def _on_speed_change(self, interval: int):
        if self.state.in_progress:
            logger.debug("Tick interval now %d ms", interval)
            self._arm_tick_timer()

    def _cancel_timers(self):
        for timer in [self._tick_timer, self._render_timer, *self._special_timers]:
            if timer is not None:
                timer.cancel()
        self._tick_timer = None
        self._render_timer = None
        self._special_timers = []

    # ── Helpers ────────────────────────────────────────────────────

    def _occupied(self) -> set:
        occupied = set(self.snake.segments)
        if self.food is not None:
            occupied.add(self.food.cell)
        if self.special_food is not None:
            occupied.add(self.special_food.cell)
        return occupied

    def _replenish_food(self, now: float):
        if self.food is None:
            self.food = make_regular_food(self.grid, self._occupied(), now, self.rng)

    def _eat_food(self):
        self.food = None
        self.state.score += SCORE_PER_FOOD * self.state.multiplier
        self.scoreboard.set_score_text(self.state.score)
        self._play("score")

    def _eat_special_food(self, now: float):
        kind = self.special_food.kind
        self.special_food = None
        self.power_ups.apply(kind, now)
        self._play("powerUp")
        self.scoreboard.set_status_text(POWER_UPS[kind]["name"])

    def _play(self, kind: str):
        try:
            self.audio.play_sound(kind)
        except Exception:
            logger.warning("Could not play %s sound", kind, exc_info=True)
