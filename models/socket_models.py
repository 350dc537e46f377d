"""
Data Models for Socket Messages
"""
import json
import logging
from typing import Optional, Union

from pydantic import BaseModel, ValidationError

from models.board_models import BoardSlot

logger = logging.getLogger(__name__)

# Text the socket client hands to its handler after the connection is torn down
SOCKET_CLOSED = "Socket Closed"

NEW_CARD_EVENT = "new-card"
GOAL_EVENT = "goal"
COLOR_EVENT = "color"
CHAT_EVENT = "chat"
REVEALED_EVENT = "revealed"
CONNECTION_EVENT = "connection"
SOCKET_CLOSED_EVENT = "socket-closed"


class SocketPlayer(BaseModel):
    uuid: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    is_spectator: bool = False


class SocketMessage(BaseModel):
    """
    A decoded push message.

    Only `type` is always meaningful; the other fields depend on it, e.g. a
    "goal" message carries `player` and `square`, a "chat" message `player`
    and `text`.
    """
    type: Optional[str] = None
    event_type: Optional[str] = None
    player: Optional[SocketPlayer] = None
    square: Optional[BoardSlot] = None
    player_color: Optional[str] = None
    color: Optional[str] = None
    remove: bool = False
    text: Optional[str] = None
    timestamp: Optional[float] = None
    room: Optional[str] = None
    game: Optional[str] = None
    seed: Optional[Union[int, str]] = None
    hide_card: bool = False
    is_current: bool = False
    socket_key: Optional[str] = None
    original_msg: str = ""

    class Config:
        extra = "allow"


def parse_socket_message(message: str) -> Optional[SocketMessage]:
    """Decode one text frame, None when it is not a JSON object we can read"""
    try:
        payload = json.loads(message)
        if not isinstance(payload, dict):
            return None
        socket_message = SocketMessage.model_validate(payload)
    except (ValueError, ValidationError) as e:
        logger.debug(f"Dropping undecodable socket message: {e}")
        return None
    socket_message.original_msg = message
    return socket_message


def socket_closed_message() -> SocketMessage:
    """Synthetic event announcing that the push channel went away"""
    return SocketMessage(type=SOCKET_CLOSED_EVENT, original_msg=SOCKET_CLOSED)
