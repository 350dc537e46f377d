"""
Data Models for Room Sessions
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ConnectionStatus(str, Enum):
    """Connection state machine shared by the session and its socket"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


class PlayerColor(str, Enum):
    ORANGE = "orange"
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    NAVY = "navy"
    TEAL = "teal"
    BROWN = "brown"
    PINK = "pink"
    YELLOW = "yellow"


def parse_player_color(name: Optional[str]) -> Optional[PlayerColor]:
    """Case-insensitive color lookup, None for anything unknown"""
    if not name:
        return None
    try:
        return PlayerColor(name.strip().lower())
    except ValueError:
        return None


class RoomInfo(BaseModel):
    """Connection details for one room; color is the only field updated after joining"""
    room_id: str
    password: str
    player_name: str
    color: PlayerColor = PlayerColor.RED
    spectator: bool = False


class CardIDs(BaseModel):
    """Game and variant identifiers used when generating a new card"""
    game_id: int
    variant_id: int

    class Config:
        frozen = True
