"""WebSocket connection management and state serialization."""

import asyncio
import json
import logging
from collections import deque

from fastapi import WebSocket

from .constants import BOARD_COLOR, DIFFICULTIES, POWER_UPS
from .game import GameSession

logger = logging.getLogger(__name__)


class BrowserFrontend:
    """Presentation collaborator that turns engine callbacks into messages.

    Draw calls between ``draw_board`` and ``present`` are collected into one
    ``frame`` message. Only the newest unsent frame is kept, so a slow client
    skips frames instead of piling them up. Sound, score and status messages
    are queued in order and always delivered ahead of the pending frame.
    """

    def __init__(self):
        self.outbox: deque = deque()
        self.pending_frame = None
        self._frame = None
        self._ready = asyncio.Event()

    @property
    def backlog(self) -> int:
        return len(self.outbox) + (self.pending_frame is not None)

    def post(self, message: str):
        self.outbox.append(message)
        self._ready.set()

    def _send(self, payload: dict):
        self.post(json.dumps(payload))

    async def next_message(self) -> str:
        while True:
            if self.outbox:
                return self.outbox.popleft()
            if self.pending_frame is not None:
                frame, self.pending_frame = self.pending_frame, None
                return frame
            self._ready.clear()
            await self._ready.wait()

    def draw_board(self):
        self._frame = {
            "type": "frame",
            "background": BOARD_COLOR,
            "food": [],
            "snake": None,
            "indicators": [],
            "overlay": None,
        }

    def draw_snake(self, segments, style):
        if self._frame is not None:
            self._frame["snake"] = {"segments": [list(s) for s in segments], **style}

    def draw_food(self, cell, style):
        if self._frame is not None:
            self._frame["food"].append({"cell": list(cell), **style})

    def draw_indicators(self, records, now):
        if self._frame is not None:
            self._frame["indicators"] = [
                {
                    "type": r.type,
                    "name": POWER_UPS[r.type]["name"],
                    "color": POWER_UPS[r.type]["color"],
                    "remaining": max(0, round(r.expires_at - now)),
                }
                for r in records
            ]

    def draw_overlay(self, kind):
        if self._frame is not None:
            self._frame["overlay"] = kind

    def present(self):
        if self._frame is not None:
            self.pending_frame = json.dumps(self._frame)
            self._frame = None
            self._ready.set()

    def play_sound(self, kind):
        self._send({"type": "sound", "kind": kind})

    def set_score_text(self, value):
        self._send({"type": "score", "value": value})

    def set_status_text(self, message):
        self._send({"type": "status", "message": message})


class ConnectionManager:
    def __init__(self):
        self.connections: dict[WebSocket, GameSession] = {}

    async def connect(self, ws: WebSocket, session: GameSession):
        await ws.accept()
        self.connections[ws] = session

    def disconnect(self, ws: WebSocket):
        session = self.connections.pop(ws, None)
        if session is not None:
            session.end("disconnect")

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)


def build_welcome_msg(session: GameSession) -> str:
    grid = session.grid
    return json.dumps({
        "type": "welcome",
        "grid": {"width": grid.width, "height": grid.height, "cell_size": grid.cell_size},
        "difficulties": DIFFICULTIES,
        "speed": session.state.original_speed,
        "high_score": session.state.high_score,
        "power_ups": {
            kind: {"name": spec["name"], "color": spec["color"], "duration": spec["duration"]}
            for kind, spec in POWER_UPS.items()
        },
    })

