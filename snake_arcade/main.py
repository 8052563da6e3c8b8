"""FastAPI application: HTTP routes, WebSocket endpoint, per-connection game sessions."""

import asyncio
import json
import logging
import os

from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse

from .collaborators import JsonHighScoreStore
from .connection_manager import BrowserFrontend, ConnectionManager, build_welcome_msg
from .game import GameSession
from .scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)

HOST = os.environ.get("SNAKE_HOST", "0.0.0.0")
PORT = int(os.environ.get("SNAKE_PORT", "8765"))
HIGHSCORE_PATH = os.environ.get("SNAKE_HIGHSCORE_PATH", "highscore.json")
LOG_LEVEL = os.environ.get("SNAKE_LOG_LEVEL", "INFO")

HTML_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "index.html")

manager = ConnectionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Snake server ready, high scores in %s", HIGHSCORE_PATH)
    yield
    for ws in list(manager.connections):
        manager.disconnect(ws)


app = FastAPI(lifespan=lifespan)


@app.get("/")
async def serve_index():
    return FileResponse(HTML_PATH, media_type="text/html")


@app.get("/health")
async def health():
    return {"status": "ok", "sessions": len(manager.connections)}


def handle_message(session: GameSession, frontend: BrowserFrontend, msg: dict):
    kind = msg.get("type")
    if kind == "start":
        try:
            session.start(msg.get("difficulty"))
        except ValueError as e:
            frontend.set_status_text(str(e))
    elif kind == "key":
        session.handle_input(msg.get("code"))
    elif kind == "pause":
        session.toggle_pause()
    else:
        logger.debug("Ignoring message type %r", kind)


async def pump(ws: WebSocket, frontend: BrowserFrontend):
    try:
        while True:
            message = await frontend.next_message()
            await manager.send_personal(ws, message)
    except (WebSocketDisconnect, RuntimeError):
        logger.debug("Socket closed while sending")


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    frontend = BrowserFrontend()
    session = GameSession(
        AsyncioScheduler(),
        renderer=frontend,
        audio=frontend,
        scoreboard=frontend,
        store=JsonHighScoreStore(HIGHSCORE_PATH),
    )
    await manager.connect(ws, session)
    frontend.post(build_welcome_msg(session))
    sender = asyncio.create_task(pump(ws, frontend))
    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring malformed message: %.80s", raw)
                continue
            if isinstance(msg, dict):
                handle_message(session, frontend, msg)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)
        sender.cancel()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Snake server starting on http://localhost:%d", PORT)
    uvicorn.run(app, host=HOST, port=PORT)
