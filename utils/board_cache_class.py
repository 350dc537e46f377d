"""
BoardCache class implementation
"""
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from models.board_models import BoardSlot, RoomSettings, parse_board_slots, parse_room_settings

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[str]]


class RefreshState(str, Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


class BoardCache:
    """
    Last known board slots and room settings of the joined room.

    A refresh re-fetches settings, then slots. Only one refresh runs at a time;
    a refresh requested while another is running is folded into it as one more
    pass, and every caller waits for the same task. Readers wait until the
    cache is idle again.

    Settings and slots are parsed independently, so a failed settings fetch
    leaves None next to freshly fetched slots (and the other way round).
    """

    def __init__(self, fetch_settings: Fetcher, fetch_slots: Fetcher):
        self._fetch_settings = fetch_settings
        self._fetch_slots = fetch_slots

        self.slots: List[BoardSlot] = []
        self.settings: Optional[RoomSettings] = None
        self.state = RefreshState.IDLE

        self._idle = asyncio.Event()
        self._idle.set()
        self._task: Optional[asyncio.Task] = None
        self._rerun = False
        self._queued_patches: List[BoardSlot] = []

    def request_refresh(self) -> asyncio.Task:
        """Mark the cache as refreshing right away and return the refresh task"""
        self.state = RefreshState.REFRESHING
        self._idle.clear()

        if self._task is not None and not self._task.done():
            self._rerun = True
            return self._task

        self._task = asyncio.create_task(self._run_refresh())
        return self._task

    async def refresh(self):
        await asyncio.shield(self.request_refresh())

    async def _run_refresh(self):
        try:
            while True:
                self._rerun = False
                self.settings = parse_room_settings(await self._fetch_settings())
                self.slots = parse_board_slots(await self._fetch_slots())
                logger.info(f"Board refreshed: {len(self.slots)} slots, settings {'ok' if self.settings else 'missing'}")
                if not self._rerun:
                    break
        finally:
            queued, self._queued_patches = self._queued_patches, []
            for square in queued:
                self._apply_patch(square)
            self._task = None
            self.state = RefreshState.IDLE
            self._idle.set()

    async def wait_idle(self):
        await self._idle.wait()

    async def get_slots(self) -> List[BoardSlot]:
        await self._idle.wait()
        return self.slots

    async def get_slot(self, position: int) -> Optional[BoardSlot]:
        await self._idle.wait()
        return self._find_slot(position)

    async def get_settings(self) -> Optional[RoomSettings]:
        await self._idle.wait()
        return self.settings

    def _find_slot(self, position: int) -> Optional[BoardSlot]:
        for slot in self.slots:
            if slot.position == position:
                return slot
        return None

    def patch(self, square: BoardSlot) -> bool:
        """
        Apply a slot update from a goal event without waiting.

        While a refresh is running the update is queued and applied once the
        refresh ends. Returns False when the update is dropped right away.
        """
        if square.position is None:
            return False
        if not self._idle.is_set():
            self._queued_patches.append(square)
            return True
        return self._apply_patch(square)

    def _apply_patch(self, square: BoardSlot) -> bool:
        slot = self._find_slot(square.position)
        if slot is None:
            logger.debug(f"No cached slot {square.position} to patch")
            return False

        slot.name = square.name
        slot.colors = square.colors
        return True
