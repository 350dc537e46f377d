"""
SocketClient class implementation
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from models.room_models import ConnectionStatus
from models.socket_models import SOCKET_CLOSED

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], Awaitable[None]]


class SocketClient:
    """
    Push channel for one joined room.

    One instance serves one connection: once it is back to DISCONNECTED a new
    instance is needed. Frames are handed to the handler one at a time, in
    arrival order.
    """

    def __init__(self, uri: str, socket_key: str, message_handler: MessageHandler,
                 max_attempts: int = 3, retry_delay: float = 1.0, connect=websockets.connect):
        self.uri = uri
        self.socket_key = socket_key
        self.message_handler = message_handler
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._connect = connect

        self.status = ConnectionStatus.DISCONNECTED
        self._websocket = None
        self._task: Optional[asyncio.Task] = None
        self._settled = asyncio.Event()

    def _set_status(self, status: ConnectionStatus):
        self.status = status
        if status != ConnectionStatus.CONNECTING:
            self._settled.set()

    async def start(self) -> ConnectionStatus:
        """Open the connection and wait until it is either connected or has failed"""
        if self.status != ConnectionStatus.DISCONNECTED:
            return self.status

        self._settled.clear()
        self._set_status(ConnectionStatus.CONNECTING)
        self._task = asyncio.create_task(self._run())
        await self._settled.wait()
        return self.status

    async def wait_closed(self):
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _run(self):
        try:
            self._websocket = await self._connect(self.uri)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            logger.error(f"Could not connect to {self.uri}: {e}")
            self._set_status(ConnectionStatus.DISCONNECTED)
            return

        websocket = self._websocket
        try:
            try:
                await websocket.send(self.socket_key)
            except (OSError, WebSocketException) as e:
                logger.error(f"Could not send socket key: {e}")
                self._set_status(ConnectionStatus.DISCONNECTED)

            if self.status == ConnectionStatus.CONNECTING:
                self._set_status(ConnectionStatus.CONNECTED)
                logger.info(f"Socket connected to {self.uri}")
                await self._receive_messages(websocket)
        finally:
            if self._websocket is websocket:
                await self._close_quietly(websocket)
                self._websocket = None
            self._set_status(ConnectionStatus.DISCONNECTED)

    async def _receive_messages(self, websocket):
        attempt = 0

        while self.status == ConnectionStatus.CONNECTED and attempt < self.max_attempts:
            attempt += 1

            try:
                frame = await websocket.recv()
                attempt = 0
            except ConnectionClosed as e:
                logger.info(f"Socket closed by server: {e}")
                await self.close()
                break
            except (OSError, WebSocketException) as e:
                logger.warning(f"Socket read failed (attempt {attempt}/{self.max_attempts}): {e}")
                if attempt >= self.max_attempts:
                    await self.close()
                    break
                await asyncio.sleep(self.retry_delay)
                continue

            if isinstance(frame, bytes):
                try:
                    frame = frame.decode("utf-8")
                except UnicodeDecodeError:
                    logger.warning("Dropping non UTF-8 socket frame")
                    continue

            if frame:
                await self._dispatch(frame)

    async def close(self):
        """Close the connection if it is open and notify the handler"""
        if self.status != ConnectionStatus.CONNECTED or self._websocket is None:
            return

        self._set_status(ConnectionStatus.DISCONNECTING)
        websocket = self._websocket
        self._websocket = None

        await self._close_quietly(websocket)

        self._set_status(ConnectionStatus.DISCONNECTED)
        logger.info("Socket closed")
        await self._dispatch(SOCKET_CLOSED)

    async def _dispatch(self, message: str):
        try:
            await self.message_handler(message)
        except Exception:
            logger.exception("Socket message handler failed")

    async def _close_quietly(self, websocket):
        try:
            await websocket.close()
        except (OSError, WebSocketException) as e:
            logger.debug(f"Ignoring error during socket close handshake: {e}")
