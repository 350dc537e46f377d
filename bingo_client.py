#!/usr/bin/env python3
"""
Bingo Room Client
Joins a BingoSync room and exposes the live board over a local HTTP API
"""
import argparse
import logging
from typing import Optional
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException

from models.bridge_models import ChatRequest, ColorRequest, SelectRequest
from models.config_models import ClientConfig
from models.room_models import ConnectionStatus, PlayerColor, RoomInfo
from models.socket_models import CHAT_EVENT, GOAL_EVENT, SocketMessage
from utils.session_controller_class import SessionController

logger = logging.getLogger("bingo_client")

# Global session instances
controller: Optional[SessionController] = None
room_info: Optional[RoomInfo] = None


def log_room_event(message: SocketMessage):
    """Print room activity to the log"""
    player = message.player.name if message.player else "?"
    if message.type == CHAT_EVENT:
        logger.info(f"[chat] {player}: {message.text}")
    elif message.type == GOAL_EVENT and message.square:
        action = "cleared" if message.remove else "marked"
        logger.info(f"[goal] {player} {action} {message.square.slot}: {message.square.name}")
    else:
        logger.info(f"[{message.type}] {player}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Join the room on startup and leave it on shutdown"""
    if controller and room_info:
        controller.subscribe(log_room_event)
        status = await controller.join_room(room_info)
        logger.info(f"Join finished with status: {status.value}")
    yield
    if controller:
        logger.info("Shutting down, leaving room...")
        await controller.disconnect()


app = FastAPI(title="Bingo Room Client", version="1.0.0", lifespan=lifespan)


def require_controller() -> SessionController:
    if controller is None:
        raise HTTPException(status_code=503, detail="Session not initialized")
    return controller


def require_connection() -> SessionController:
    session_controller = require_controller()
    if session_controller.status != ConnectionStatus.CONNECTED:
        raise HTTPException(status_code=409, detail=f"Not connected ({session_controller.status.value})")
    return session_controller


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    session_controller = require_controller()
    session = session_controller.session
    return {
        "status": session_controller.status.value,
        "room_id": session.room_id if session else None,
        "player_name": session.player_name if session else None,
        "color": session.color.value if session else None
    }


@app.get("/board")
async def get_board():
    """Current board slots"""
    slots = await require_connection().get_board_slots()
    return [
        {
            "position": slot.position,
            "label": slot.label,
            "colors": [color.value if color else None for color in slot.color_list]
        }
        for slot in slots
    ]


@app.get("/settings")
async def get_settings():
    settings = await require_connection().get_room_settings()
    if settings is None:
        raise HTTPException(status_code=404, detail="Room settings unavailable")
    return settings.model_dump()


@app.get("/feed")
async def get_feed(full: bool = False):
    feed = await require_connection().get_feed(full)
    return {"feed": feed}


@app.post("/select")
async def select_slot(request: SelectRequest):
    await require_connection().select_slot(request.position, request.mark, request.color)
    return {"status": "processed"}


@app.post("/chat")
async def send_chat(request: ChatRequest):
    await require_connection().send_chat_message(request.text)
    return {"status": "processed"}


@app.post("/color")
async def set_color(request: ColorRequest):
    session_controller = require_connection()
    await session_controller.set_player_color(request.color)
    session = session_controller.session
    return {"color": session.color.value if session else None}


@app.post("/reveal")
async def reveal_board():
    await require_connection().reveal_board()
    return {"status": "processed"}


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Bingo Room Client")
    parser.add_argument("--room", type=str, required=True, help="Room id (the part after /room/ in the URL)")
    parser.add_argument("--password", type=str, required=True, help="Room password")
    parser.add_argument("--name", type=str, required=True, help="Player display name")
    parser.add_argument("--color", type=str, choices=[color.value for color in PlayerColor],
                        default=PlayerColor.RED.value, help="Player color (default: red)")
    parser.add_argument("--spectator", action="store_true", help="Join as a spectator")
    parser.add_argument("--port", type=int, default=8200, help="Local API port (default: 8200)")
    parser.add_argument("--log-file", type=str, default="jsonl/bingo_client.jsonl",
                        help="JSON Lines traffic log (default: jsonl/bingo_client.jsonl)")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    global controller, room_info
    controller = SessionController(ClientConfig(traffic_log_file=args.log_file))
    room_info = RoomInfo(
        room_id=args.room,
        password=args.password,
        player_name=args.name,
        color=PlayerColor(args.color),
        spectator=args.spectator
    )

    uvicorn.run(app, host="localhost", port=args.port)


if __name__ == "__main__":
    main()
