"""
Shared fixtures: an in-memory HTTP client and socket client for the Session Controller
"""
import json

import pytest
from requests.cookies import RequestsCookieJar

from models.config_models import ClientConfig
from models.room_models import ConnectionStatus, PlayerColor, RoomInfo
from models.socket_models import SOCKET_CLOSED
from utils import bingosync_endpoints as endpoints
from utils.http_client import ResponseMode
from utils.session_controller_class import SessionController

ROOM_ID = "room-abc"

BOARD = [
    {"name": "Collect 5 coins", "slot": "slot1", "colors": "blank"},
    {"name": "Beat the boss", "slot": "slot2", "colors": "red"},
    {"name": "Find the key", "slot": "slot3", "colors": "blue green"},
]


def settings_payload(lockout_mode="Non-Lockout"):
    return json.dumps({
        "settings": {
            "hide_card": False,
            "lockout_mode": lockout_mode,
            "game": "Test Game",
            "game_id": 18,
            "variant": "Normal",
            "variant_id": 18,
            "seed": 123456
        }
    })


class FakeHttpClient:
    """Answers requests from a url -> response table and records every call"""

    def __init__(self, config: ClientConfig):
        self.config = config
        self.calls = []
        self.cookie_calls = 0
        self.cookies = RequestsCookieJar()
        self.cookies.set("csrftoken", "token-123")
        self.responses = {
            config.join_room_url: json.dumps({"socket_key": "key-123"}),
            config.color_url: "{}",
            config.room_url(endpoints.ROOM_SETTINGS, ROOM_ID): settings_payload(),
            config.room_url(endpoints.ROOM_BOARD, ROOM_ID): json.dumps(BOARD),
            config.room_url(endpoints.ROOM_FEED, ROOM_ID): json.dumps({"events": []}),
        }

    def fetch_cookies(self, url):
        self.cookie_calls += 1
        return self.cookies

    def send(self, url, method="GET", body=None, cookies=None, mode=ResponseMode.TEXT, header_name=None):
        self.calls.append((url, method, body))
        response = self.responses.get(url.split("?")[0], "")
        if mode == ResponseMode.DISCARD:
            return ""
        return response

    def requests_to(self, url, method=None):
        return [call for call in self.calls if call[0] == url and (method is None or call[1] == method)]

    def set_board(self, board):
        self.responses[self.config.room_url(endpoints.ROOM_BOARD, ROOM_ID)] = json.dumps(board)

    def set_lockout(self):
        self.responses[self.config.room_url(endpoints.ROOM_SETTINGS, ROOM_ID)] = settings_payload("Lockout")


class FakeSocketClient:
    """Stands in for SocketClient; tests push frames through push()"""

    start_status = ConnectionStatus.CONNECTED
    instances = []

    def __init__(self, uri, socket_key, message_handler, max_attempts=3, retry_delay=1.0):
        self.uri = uri
        self.socket_key = socket_key
        self.message_handler = message_handler
        self.status = ConnectionStatus.DISCONNECTED
        self.close_calls = 0
        FakeSocketClient.instances.append(self)

    async def start(self):
        self.status = self.start_status
        return self.status

    async def close(self):
        if self.status != ConnectionStatus.CONNECTED:
            return
        self.close_calls += 1
        self.status = ConnectionStatus.DISCONNECTED
        await self.message_handler(SOCKET_CLOSED)

    async def push(self, message):
        await self.message_handler(message)


@pytest.fixture
def config():
    return ClientConfig(
        base_url="https://bingo.test/",
        socket_url="wss://sockets.bingo.test/broadcast",
        retry_delay=0
    )


@pytest.fixture
def http(config):
    return FakeHttpClient(config)


@pytest.fixture
def socket_factory():
    FakeSocketClient.start_status = ConnectionStatus.CONNECTED
    FakeSocketClient.instances = []
    yield FakeSocketClient
    FakeSocketClient.start_status = ConnectionStatus.CONNECTED
    FakeSocketClient.instances = []


@pytest.fixture
def controller(config, http, socket_factory):
    return SessionController(config, http_client=http, socket_factory=socket_factory)


@pytest.fixture
def room_info():
    return RoomInfo(room_id=ROOM_ID, password="hunter2", player_name="Tester", color=PlayerColor.BLUE)
