"""
SessionController class implementation
"""
import asyncio
import inspect
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from requests.cookies import RequestsCookieJar

from models.board_models import BoardSlot, RoomSettings
from models.config_models import ClientConfig
from models.room_models import CardIDs, ConnectionStatus, PlayerColor, RoomInfo
from models.socket_models import (
    COLOR_EVENT, GOAL_EVENT, NEW_CARD_EVENT, SOCKET_CLOSED,
    SocketMessage, parse_socket_message, socket_closed_message
)
from strategies.select_policy import should_select
from utils import bingosync_endpoints as endpoints
from utils import bingosync_payloads as payloads
from utils import room_handlers
from utils.board_cache_class import BoardCache
from utils.http_client import HttpClient, ResponseMode
from utils.socket_client_class import SocketClient

logger = logging.getLogger(__name__)

Subscriber = Callable[[SocketMessage], Any]

EVENT_HANDLERS = {
    NEW_CARD_EVENT: room_handlers.handle_new_card,
    GOAL_EVENT: room_handlers.handle_goal,
    COLOR_EVENT: room_handlers.handle_color,
}


class SessionController:
    """Client session for one BingoSync room"""

    def __init__(self, config: Optional[ClientConfig] = None, http_client: Optional[HttpClient] = None,
                 socket_factory=SocketClient):
        self.config = config or ClientConfig()
        self.http = http_client or HttpClient(self.config.max_attempts, self.config.retry_delay,
                                              self.config.request_timeout)
        self.socket_factory = socket_factory

        self.status = ConnectionStatus.DISCONNECTED
        self.session: Optional[RoomInfo] = None
        self.cookies: Optional[RequestsCookieJar] = None
        self.socket: Optional[SocketClient] = None
        self.board = BoardCache(self._fetch_settings, self._fetch_slots)

        self._subscribers: List[Subscriber] = []
        self._color_override = False

        self.log_file = Path(self.config.traffic_log_file) if self.config.traffic_log_file else None
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

    @property
    def has_any_connection(self) -> bool:
        return self.status in (ConnectionStatus.CONNECTED, ConnectionStatus.CONNECTING,
                               ConnectionStatus.DISCONNECTING)

    def log_message(self, message: Any, direction: str):
        if self.log_file is None:
            return
        log_entry = {"timestamp": datetime.now(timezone.utc).isoformat(), "direction": direction, "message": message}
        with open(self.log_file, 'a') as f:
            f.write(json.dumps(log_entry) + '\n')

    def subscribe(self, callback: Subscriber):
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    async def _notify(self, message: SocketMessage):
        for callback in list(self._subscribers):
            try:
                result = callback(message)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Subscriber failed on {message.type} message")

    # HTTP

    async def get_response(self, url: str, return_response: bool = True,
                           post: Optional[Dict[str, Any]] = None) -> str:
        """
        Request a URL with the session cookies.

        Args:
            url: The URL to request
            return_response: If False the body is not read and "" is returned
            post: JSON body; when given the request is a POST

        Returns:
            The response text, or "" when there is no cookie jar or the request failed
        """
        if self.cookies is None:
            return ""

        method = "POST" if post is not None else "GET"
        mode = ResponseMode.TEXT if return_response else ResponseMode.DISCARD
        if post is not None:
            self.log_message({"url": url, "body": post}, "outgoing")

        return await asyncio.to_thread(self.http.send, url, method, post, self.cookies, mode)

    async def _get_room_page(self, template: str, return_response: bool = True, force: bool = False) -> str:
        if self.session is None or (self.status != ConnectionStatus.CONNECTED and not force):
            return ""
        return await self.get_response(self.config.room_url(template, self.session.room_id), return_response)

    async def _fetch_settings(self) -> str:
        return await self._get_room_page(endpoints.ROOM_SETTINGS, force=True)

    async def _fetch_slots(self) -> str:
        return await self._get_room_page(endpoints.ROOM_BOARD, force=True)

    # Session lifecycle

    async def join_room(self, room_info: RoomInfo) -> ConnectionStatus:
        """
        Join a room: fetch cookies, join over HTTP, open the socket, load the board and apply the color.

        Returns:
            CONNECTED on success; any other status means the join failed
        """
        if self.has_any_connection:
            return self.status

        self.status = ConnectionStatus.CONNECTING
        self.session = None
        logger.info(f"Joining room {room_info.room_id} as {room_info.player_name}")

        self.cookies = await asyncio.to_thread(self.http.fetch_cookies, self.config.base_url)
        if self.cookies is None:
            logger.error("Failed to get session cookies")
            return self._fail_join()

        socket_key = await self.get_response(
            self.config.join_room_url, True,
            payloads.create_join_room(room_info.room_id, room_info.player_name, room_info.password,
                                      room_info.spectator)
        )
        if not socket_key:
            logger.error(f"Failed to join room {room_info.room_id}")
            return self._fail_join()

        self.socket = self.socket_factory(self.config.socket_url, socket_key, self.handle_socket_message,
                                          max_attempts=self.config.max_attempts,
                                          retry_delay=self.config.retry_delay)
        socket_status = await self.socket.start()
        if socket_status != ConnectionStatus.CONNECTED:
            logger.error("Failed to open room socket")
            return self._fail_join()

        self.session = room_info.model_copy()
        await self.board.refresh()

        self._color_override = True
        await self.set_player_color(room_info.color)

        if self.socket.status != ConnectionStatus.CONNECTED:
            logger.error("Room socket dropped while joining")
            return self._fail_join()

        self.status = ConnectionStatus.CONNECTED
        logger.info(f"Joined room {room_info.room_id}")
        return self.status

    def _fail_join(self) -> ConnectionStatus:
        self.status = ConnectionStatus.DISCONNECTED
        self.session = None
        self.cookies = None
        return self.status

    async def disconnect(self):
        """Leave the room and close the socket; does nothing unless connected"""
        if self.status != ConnectionStatus.CONNECTED:
            return

        self.status = ConnectionStatus.DISCONNECTING
        logger.info(f"Disconnecting from room {self.session.room_id}")

        await self._get_room_page(endpoints.ROOM_SETTINGS, return_response=False, force=True)

        if self.socket is not None and self.socket.status == ConnectionStatus.CONNECTED:
            await self.socket.close()

        self.status = ConnectionStatus.DISCONNECTED
        self.session = None
        self.cookies = None
        logger.info("Disconnected")

    # Room actions

    async def set_player_color(self, color: PlayerColor):
        if self.status != ConnectionStatus.CONNECTED and not self._color_override:
            return
        try:
            session = self.session
            if session is None:
                return
            response = await self.get_response(self.config.color_url, True,
                                               payloads.create_set_color(session.room_id, color))
            if response:
                session.color = color
        finally:
            self._color_override = False

    async def send_chat_message(self, text: str):
        if self.status == ConnectionStatus.CONNECTED:
            await self.get_response(self.config.chat_url, False, payloads.create_chat(self.session.room_id, text))

    async def reveal_board(self):
        if self.status == ConnectionStatus.CONNECTED:
            await self.get_response(self.config.reveal_url, False, payloads.create_reveal(self.session.room_id))

    async def select_slot(self, position: int, mark: bool = True, color: Optional[PlayerColor] = None):
        """
        Mark or unmark a slot for a color (the player's own color by default).

        The request is only sent when it would change the slot, so selecting a
        slot that is already in the wanted state is a silent no-op.
        """
        if self.status != ConnectionStatus.CONNECTED:
            return

        settings = await self.get_room_settings()
        slot = await self.get_board_slot(position)
        session = self.session
        if settings is None or session is None or self.status != ConnectionStatus.CONNECTED:
            return

        color_to_use = color or session.color

        if not should_select(settings, slot, color_to_use, mark):
            logger.debug(f"Select on slot {position} would not change it, skipping")
            return

        await self.get_response(self.config.select_url, False,
                                payloads.create_select(session.room_id, position, color_to_use, not mark))

    async def create_new_card(self, lockout_mode: bool, hide_card: bool, card_ids: Optional[CardIDs],
                              seed: int = -1, custom_json: str = ""):
        if card_ids is None:
            return
        if self.status == ConnectionStatus.CONNECTED:
            await self.get_response(
                self.config.new_card_url, False,
                payloads.create_new_card(self.session.room_id, lockout_mode, hide_card, card_ids, seed, custom_json)
            )

    # Reads

    async def get_feed(self, full: bool = False) -> str:
        if self.status != ConnectionStatus.CONNECTED:
            return ""
        url = self.config.room_url(endpoints.ROOM_FEED, self.session.room_id)
        return await self.get_response(f"{url}?full={str(full).lower()}")

    async def get_board_slots(self) -> List[BoardSlot]:
        if self.status != ConnectionStatus.CONNECTED:
            return []
        return await self.board.get_slots()

    async def get_board_slot(self, position: int) -> Optional[BoardSlot]:
        if self.status != ConnectionStatus.CONNECTED:
            return None
        return await self.board.get_slot(position)

    async def get_room_settings(self) -> Optional[RoomSettings]:
        if self.status != ConnectionStatus.CONNECTED:
            return None
        return await self.board.get_settings()

    # Socket

    async def handle_socket_message(self, message: str):
        """Route one socket frame to the cache and forward it to subscribers"""
        if self.status == ConnectionStatus.DISCONNECTED:
            return

        if message == SOCKET_CLOSED:
            await self.disconnect()
            await self._notify(socket_closed_message())
            return

        self.log_message(message, "incoming")
        socket_message = parse_socket_message(message)
        if socket_message is None:
            return

        handler = EVENT_HANDLERS.get(socket_message.type)
        if handler is not None:
            await handler(self, socket_message)

        await self._notify(socket_message)
