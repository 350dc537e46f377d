"""
Socket event handlers for the Session Controller
"""
import logging

from models.room_models import parse_player_color
from models.socket_models import SocketMessage

logger = logging.getLogger(__name__)


async def handle_new_card(controller, message: SocketMessage):
    """A new card was generated: reload the whole board without waiting for it"""
    logger.info(f"Received new-card (game: {message.game}, seed: {message.seed})")
    controller.board.request_refresh()


async def handle_goal(controller, message: SocketMessage):
    """A slot was marked or unmarked: patch that slot in the cache"""
    square = message.square
    if square is None or not square.slot:
        return
    player_name = message.player.name if message.player else None
    logger.info(f"Received goal on {square.slot} by {player_name} (remove: {message.remove})")
    controller.board.patch(square)


async def handle_color(controller, message: SocketMessage):
    """A player changed color: follow it if the player is us"""
    session = controller.session
    if session is None or message.player is None or message.player.name != session.player_name:
        return
    color = parse_player_color(message.player_color or message.player.color)
    if color is not None:
        session.color = color
        logger.info(f"Player color is now {color.value}")
