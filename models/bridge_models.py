"""
Request bodies for the local bridge API
"""
from typing import Optional

from pydantic import BaseModel

from models.room_models import PlayerColor


class SelectRequest(BaseModel):
    position: int
    mark: bool = True
    color: Optional[PlayerColor] = None


class ChatRequest(BaseModel):
    text: str


class ColorRequest(BaseModel):
    color: PlayerColor
