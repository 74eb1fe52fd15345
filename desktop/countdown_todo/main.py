"""Client Entry Point — wires settings, logging, preferences, store, and ticker.

Invariants:
    - Preferences are read once here, before the first refresh
    - A failed initial refresh does not raise: the session starts disconnected
      and reports STARTUP_FAILED_STATUS
    - The ticker is always stopped when the session context exits

Design Decisions:
    - Async context manager over start/stop functions: teardown cannot be forgotten
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from countdown_todo.config import Settings, get_settings
from countdown_todo.core.errors import CountdownTodoError
from countdown_todo.infrastructure.observability import setup_logging
from countdown_todo.infrastructure.preferences import PreferenceStore
from countdown_todo.services.command_bridge import CommandBridge
from countdown_todo.services.countdown_ticker import CountdownTicker, TickCallback
from countdown_todo.services.tracker_store import TrackerStore

logger = logging.getLogger(__name__)

CONNECTED_STATUS = "已连接到 Tauri 后端"
STARTUP_FAILED_STATUS = "启动失败：请在 Tauri 桌面环境运行"


@dataclass
class ClientSession:
    store: TrackerStore
    ticker: CountdownTicker
    status: str

    @property
    def connected(self) -> bool:
        return self.status == CONNECTED_STATUS


async def connect(store: TrackerStore) -> str:
    """Initial refresh. Returns the status line to show the user."""
    try:
        await store.refresh()
    except CountdownTodoError as e:
        logger.error(
            f"Initial refresh failed: {e.message}", extra={"error_code": e.code},
        )
        return STARTUP_FAILED_STATUS
    logger.info(f"Connected, {len(store.state.timers)} timer(s) loaded")
    return CONNECTED_STATUS


@asynccontextmanager
async def client_session(
    host: object,
    on_tick: TickCallback | None = None,
    settings: Settings | None = None,
) -> AsyncIterator[ClientSession]:
    """Startup/shutdown lifecycle for one desktop window."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    store = TrackerStore(
        CommandBridge(host),
        preferences=PreferenceStore(settings.preferences_path),
    )
    store.load_preferences()
    status = await connect(store)

    ticker = CountdownTicker(
        store, on_tick or (lambda views: None), settings.tick_interval_seconds,
    )
    ticker.start()
    try:
        yield ClientSession(store=store, ticker=ticker, status=status)
    finally:
        await ticker.stop()
        logger.info("Client session closed")
