"""
Data Models for Board State
"""
import json
import logging
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from models.room_models import PlayerColor, parse_player_color

logger = logging.getLogger(__name__)

BLANK_COLORS = "blank"
LOCKOUT_MODE = "Lockout"


class BoardSlot(BaseModel):
    """
    One cell of the board, as sent by the board endpoint and inside goal events.

    The raw fields are kept exactly as the service sends them so a goal event
    can overwrite them in place.
    """
    name: str = ""
    slot: str = ""
    colors: str = BLANK_COLORS

    @property
    def label(self) -> str:
        return self.name

    @property
    def position(self) -> Optional[int]:
        return parse_slot_position(self.slot)

    @property
    def color_list(self) -> List[Optional[PlayerColor]]:
        """Ordered slot colors; a blank slot yields [None]"""
        if self.colors == BLANK_COLORS:
            return [None]
        return [parse_player_color(name) for name in self.colors.split()]

    @property
    def is_blank(self) -> bool:
        return None in self.color_list

    def has_color(self, color: PlayerColor) -> bool:
        return color in self.color_list


class RoomSettings(BaseModel):
    game: Optional[str] = None
    game_id: Optional[int] = None
    variant: Optional[str] = None
    variant_id: Optional[int] = None
    lockout_mode: Optional[str] = None
    hide_card: bool = False
    seed: Optional[int] = None

    @property
    def is_lockout(self) -> bool:
        return self.lockout_mode == LOCKOUT_MODE


def parse_slot_position(slot_id: Optional[str]) -> Optional[int]:
    """Numeric position from a "slot<N>" identifier"""
    if not slot_id or "slot" not in slot_id:
        return None
    try:
        return int(slot_id.replace("slot", ""))
    except ValueError:
        return None


def parse_board_slots(text: str) -> List[BoardSlot]:
    """Decode the board endpoint payload, [] when it cannot be read"""
    if not text:
        return []
    try:
        payload = json.loads(text)
        if not isinstance(payload, list):
            logger.warning("Board payload is not a list")
            return []
        return [BoardSlot.model_validate(item) for item in payload]
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse board payload: {e}")
        return []


def parse_room_settings(text: str) -> Optional[RoomSettings]:
    """Decode the room-settings payload ({"settings": {...}}), None when it cannot be read"""
    if not text:
        return None
    try:
        payload = json.loads(text)
        if not isinstance(payload, dict) or not isinstance(payload.get("settings"), dict):
            logger.warning("Room settings payload has no settings object")
            return None
        return RoomSettings.model_validate(payload["settings"])
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse room settings: {e}")
        return None
