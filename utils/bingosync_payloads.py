"""
JSON bodies for the BingoSync API
"""
from typing import Dict, Any

from models.room_models import CardIDs, PlayerColor


def create_join_room(room: str, nickname: str, password: str, is_spectator: bool = False) -> Dict[str, Any]:
    """
    Create the join-room body.

    Returns:
        Body with the spectator flag under "is_specator", the key the service reads
    """
    return {
        "room": room,
        "nickname": nickname,
        "password": password,
        "is_specator": is_spectator
    }


def create_set_color(room: str, color: PlayerColor) -> Dict[str, Any]:
    return {"room": room, "color": color.value}


def create_chat(room: str, text: str) -> Dict[str, Any]:
    return {"room": room, "text": text}


def create_reveal(room: str) -> Dict[str, Any]:
    return {"room": room}


def create_select(room: str, position: int, color: PlayerColor, remove_color: bool) -> Dict[str, Any]:
    """Create the select body; remove_color=True unmarks the slot for that color"""
    return {
        "room": room,
        "slot": str(position),
        "color": color.value,
        "remove_color": remove_color
    }


def create_new_card(room: str, lockout_mode: bool, hide_card: bool, card_ids: CardIDs,
                    seed: int = -1, custom_json: str = "") -> Dict[str, Any]:
    """
    Create the new-card body.

    Args:
        room: Room id
        lockout_mode: True for a lockout card ("2"), False for a normal one ("1")
        hide_card: If the card stays hidden until revealed
        card_ids: Game and variant ids
        seed: Card seed, any negative value lets the service pick one
        custom_json: Board definition for custom games
    """
    return {
        "hide_card": hide_card,
        "game_type": str(card_ids.game_id),
        "variant_type": str(card_ids.variant_id),
        "custom_json": custom_json,
        "lockout_mode": "2" if lockout_mode else "1",
        "seed": "" if seed < 0 else str(seed),
        "room": room
    }
