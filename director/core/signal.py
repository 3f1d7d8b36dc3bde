# director/core/signal.py
"""
SignalBridge - routes direction events (task lifecycle, pause/stop, VFX
changes) from the engine and context to whatever the host connects.

Handlers run synchronously inside `emit()`. A handler that raises is logged
and the remaining handlers still run. Disconnecting while an emit is in
progress takes effect once the outermost emit returns, so every handler
connected when the emit began sees that emit.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from itertools import count
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# Signal Types
# =============================================================================

SIGNAL_TASK_STARTED = 'task_started'        # (task,)
SIGNAL_TASK_COMPLETED = 'task_completed'    # (task,)
SIGNAL_RUN_COMPLETED = 'run_completed'      # ()
SIGNAL_ENGINE_PAUSED = 'engine_paused'      # ()
SIGNAL_ENGINE_RESUMED = 'engine_resumed'    # ()
SIGNAL_ENGINE_STOPPED = 'engine_stopped'    # ()
SIGNAL_VFX_CHANGED = 'vfx_changed'          # (vfx_state,)


# =============================================================================
# Connection Handle
# =============================================================================

@dataclass
class Connection:
    """Returned by `connect()`; call `disconnect()` to drop the handler."""
    signal: str
    handler_id: int
    bridge: Optional[SignalBridge] = None

    @property
    def connected(self) -> bool:
        return self.bridge is not None

    def disconnect(self):
        if self.bridge is not None:
            self.bridge._release(self.signal, self.handler_id)
            self.bridge = None


# =============================================================================
# Signal Bridge
# =============================================================================

class SignalBridge:
    """Name-keyed handler registry shared by the engine and the context."""

    def __init__(self):
        self._handlers: Dict[str, Dict[int, Callable]] = {}
        self._ids = count()
        self._blocked: Set[str] = set()
        self._depth = 0
        self._deferred: List[Tuple[str, int]] = []

    def connect(self, signal: str, handler: Callable) -> Connection:
        handler_id = next(self._ids)
        self._handlers.setdefault(signal, {})[handler_id] = handler
        return Connection(signal, handler_id, self)

    def disconnect_all(self, signal: Optional[str] = None):
        if signal is None:
            self._handlers.clear()
        else:
            self._handlers.pop(signal, None)

    def is_connected(self, signal: str) -> bool:
        return bool(self._handlers.get(signal))

    def handler_count(self, signal: str) -> int:
        return len(self._handlers.get(signal, ()))

    def emit(self, signal: str, *args, **kwargs):
        if signal in self._blocked:
            return
        snapshot = tuple(self._handlers.get(signal, {}).values())
        if not snapshot:
            return

        self._depth += 1
        try:
            for handler in snapshot:
                try:
                    handler(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Signal handler error [{signal}]: {e}")
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._flush_deferred()

    # -------------------------------------------------------------------------
    # Blocking
    # -------------------------------------------------------------------------

    def block(self, signal: str):
        self._blocked.add(signal)

    def unblock(self, signal: str):
        self._blocked.discard(signal)

    @contextmanager
    def blocked(self, signal: str) -> Iterator[None]:
        """Drop `signal` for the duration of the block."""
        was_blocked = signal in self._blocked
        self.block(signal)
        try:
            yield
        finally:
            if not was_blocked:
                self.unblock(signal)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _release(self, signal: str, handler_id: int):
        if self._depth:
            self._deferred.append((signal, handler_id))
            return
        handlers = self._handlers.get(signal)
        if handlers is not None:
            handlers.pop(handler_id, None)

    def _flush_deferred(self):
        pending, self._deferred = self._deferred, []
        for signal, handler_id in pending:
            self._release(signal, handler_id)


# =============================================================================
# Emitter Mixin
# =============================================================================

class SignalEmitter:
    """Mixin for objects that publish through an optional bridge."""

    _bridge: Optional[SignalBridge] = None

    def bind_bridge(self, bridge: Optional[SignalBridge]):
        self._bridge = bridge

    def emit(self, signal: str, *args, **kwargs):
        if self._bridge is not None:
            self._bridge.emit(signal, *args, **kwargs)

    def connect(self, signal: str, handler: Callable) -> Optional[Connection]:
        if self._bridge is None:
            return None
        return self._bridge.connect(signal, handler)
