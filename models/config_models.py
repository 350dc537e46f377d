"""
Client configuration
"""
from typing import Optional

from pydantic import BaseModel

from utils import bingosync_endpoints as endpoints


class ClientConfig(BaseModel):
    base_url: str = "https://bingosync.com/"
    socket_url: str = "wss://sockets.bingosync.com/broadcast"
    max_attempts: int = 3
    retry_delay: float = 1.0
    request_timeout: float = 10.0
    traffic_log_file: Optional[str] = None

    def api_url(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path

    def room_url(self, template: str, room_id: str) -> str:
        return self.api_url(template.format(room=room_id))

    @property
    def join_room_url(self) -> str:
        return self.api_url(endpoints.API_JOIN_ROOM)

    @property
    def select_url(self) -> str:
        return self.api_url(endpoints.API_SELECT)

    @property
    def chat_url(self) -> str:
        return self.api_url(endpoints.API_CHAT)

    @property
    def color_url(self) -> str:
        return self.api_url(endpoints.API_COLOR)

    @property
    def reveal_url(self) -> str:
        return self.api_url(endpoints.API_REVEAL)

    @property
    def new_card_url(self) -> str:
        return self.api_url(endpoints.API_NEW_CARD)
