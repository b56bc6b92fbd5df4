"""
Logging handler providing bot- or webhook-based logging to Discord.

``DiscordTransport`` plugs into the standard ``logging`` machinery. Every
record it accepts is converted to a LogEntry and handed to the delivery
handler resolved at construction time. Sends run as asyncio tasks when an
event loop is running, so logging calls never wait on the network there.
"""

import asyncio
import logging
from types import MappingProxyType
from typing import Any, Callable, Coroutine, List, Mapping, Optional, Set, Union

import aiohttp

from .core.config import (
    TransportOptions,
    load_environment,
    resolve_level,
    resolve_silent
)
from .core.exceptions import ConfigurationError
from .handlers.base import DeliveryHandler
from .handlers.resolver import resolve_handler
from .types.models import LogEntry

logger = logging.getLogger("discord_transport")

# Records from these loggers are never forwarded, to avoid feedback loops
IGNORED_LOGGERS = ("discord_transport", "discord", "aiohttp")

Listener = Callable[[LogEntry], Any]


class _Completion:
    """Wraps a completion callback so it fires at most once."""

    def __init__(self, callback: Optional[Callable[[], Any]] = None):
        self._callback = callback
        self.called = False

    def __call__(self) -> None:
        if self.called:
            return
        self.called = True

        if self._callback is None:
            return
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Completion callback failed: {e}")


class DiscordTransport(logging.Handler):
    """
    Logging handler that forwards records to a Discord channel.

    Attributes:
        discord_handler: Delivery handler resolved from the options, or None
        metadata: Read-only metadata included in every message
        silent: When True, entries are acknowledged but never sent
    """

    def __init__(
        self,
        options: Optional[Union[TransportOptions, Mapping[str, Any]]] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None
    ):
        """
        Prepare a logging handler for Discord.

        Args:
            options: TransportOptions or the equivalent mapping
            environ: Environment for fallbacks, defaults to os.environ
            session: Optional aiohttp session shared by all sends
            loop: Event loop running in another thread to submit sends to
                  when logging from outside that loop; defaults to the
                  running loop when a session is given

        Raises:
            ConfigurationError: If a session is given without a loop to run
                                it on. An aiohttp session is bound to the loop
                                it was created in, and synchronous logging
                                calls otherwise run each send on a fresh loop.
        """
        # A shared session can only be used on the loop it belongs to
        if session is not None and loop is None:
            loop = _running_loop()
            if loop is None:
                raise ConfigurationError(
                    "A shared aiohttp session needs its event loop; pass loop= "
                    "or create the transport while that loop is running",
                    invalid_values={'loop': None}
                )

        if not isinstance(options, TransportOptions):
            options = TransportOptions.from_dict(options)

        if options.env_file:
            load_environment(options.env_file)

        for error in options.validate():
            logger.warning(f"Discord transport configuration error: {error}")

        self.log_level = resolve_level(options, environ)
        super().__init__(level=self.log_level.logging_level)

        self.silent = resolve_silent(options, environ)
        self.metadata: Mapping[str, str] = MappingProxyType(dict(options.metadata))
        self.loop = loop

        self._listeners: List[Listener] = []
        self._pending: Set[asyncio.Task] = set()

        self.discord_handler: Optional[DeliveryHandler] = resolve_handler(options, environ, session)

    def add_listener(self, listener: Listener) -> None:
        """Register a callback notified with every entry the transport accepts."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def log(
        self,
        entry: Union[LogEntry, Mapping[str, Any]],
        on_done: Optional[Callable[[], Any]] = None
    ) -> bool:
        """
        Accept one log entry.

        Listeners are notified on the next loop iteration when a loop is
        available, and synchronously before delivery otherwise. ``on_done``
        fires exactly once, immediately when silent or without a handler,
        otherwise after the send attempt.

        Args:
            entry: LogEntry or the equivalent mapping
            on_done: Completion callback

        Returns:
            bool: Always True
        """
        if not isinstance(entry, LogEntry):
            entry = LogEntry.from_mapping(entry)

        done = _Completion(on_done)
        self._notify_logged(entry)

        if self.silent:
            done()
            return True

        if self.discord_handler is None:
            done()
            return True

        self._dispatch(self.discord_handler.log(entry, self.metadata, done))
        return True

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a ``logging`` record to Discord."""
        if _is_ignored(record):
            return

        try:
            self.log(LogEntry.from_record(record))
        except Exception:
            self.handleError(record)

    async def drain(self) -> None:
        """Wait until every send scheduled on the current loop has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        """Number of sends still in flight on the current loop."""
        return len(self._pending)

    def _dispatch(self, coro: Coroutine) -> None:
        loop = _running_loop()
        if loop is not None:
            task = loop.create_task(coro)
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            return

        if self.loop is not None and self.loop.is_running():
            asyncio.run_coroutine_threadsafe(coro, self.loop)
            return

        asyncio.run(coro)

    def _notify_logged(self, entry: LogEntry) -> None:
        """
        Notify listeners of an accepted entry.

        Runs on the current loop, else on ``self.loop`` when it is running in
        another thread. Without any running loop the listeners are called
        synchronously, before the entry is delivered.
        """
        loop = _running_loop()
        for listener in list(self._listeners):
            if loop is not None:
                loop.call_soon(self._call_listener, listener, entry)
            elif self.loop is not None and self.loop.is_running():
                self.loop.call_soon_threadsafe(self._call_listener, listener, entry)
            else:
                self._call_listener(listener, entry)

    def _call_listener(self, listener: Listener, entry: LogEntry) -> None:
        try:
            listener(entry)
        except Exception as e:
            logger.error(f"Logged listener failed: {e}")


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _is_ignored(record: logging.LogRecord) -> bool:
    name = record.name or ""
    return any(name == prefix or name.startswith(prefix + ".") for prefix in IGNORED_LOGGERS)
