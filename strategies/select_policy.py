"""
Mark/unmark policy for selecting board slots
"""
from typing import Optional

from models.board_models import BoardSlot, RoomSettings
from models.room_models import PlayerColor


def can_mark(settings: RoomSettings, slot: BoardSlot, color: PlayerColor) -> bool:
    """Lockout rooms only allow marking blank slots, other rooms any slot without this color"""
    if settings.is_lockout:
        return slot.is_blank
    return not slot.has_color(color)


def can_unmark(slot: BoardSlot, color: PlayerColor) -> bool:
    return not slot.is_blank and slot.has_color(color)


def should_select(settings: Optional[RoomSettings], slot: Optional[BoardSlot],
                  color: PlayerColor, mark: bool) -> bool:
    """True when a select request would change the slot, so repeated selects stay silent"""
    if settings is None or slot is None:
        return False
    if mark:
        return can_mark(settings, slot, color)
    return can_unmark(slot, color)
