"""
Direction Engine - sequential scheduler for direction tasks.

Runs queued tasks one at a time against the bound ExecutionContext,
dispatching each command to the executor registered for its kind.

Usage:
    engine = DirectionEngine()
    engine.set_context(ctx)
    engine.add_tasks(prepare_task_queue(direction.commands))
    await engine.execute()

Pause and stop only act between tasks. A task already dispatched keeps
running to its end unless `EngineConfig.cancel_in_flight_on_stop` is set,
in which case `stop()` cancels every live tween of the run.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union
import asyncio
import logging

from .commands import Command, CommandType, Task, TaskStatus
from .context import ExecutionContext
from .core.signal import (
    SignalBridge,
    SignalEmitter,
    SIGNAL_TASK_STARTED,
    SIGNAL_TASK_COMPLETED,
    SIGNAL_RUN_COMPLETED,
    SIGNAL_ENGINE_PAUSED,
    SIGNAL_ENGINE_RESUMED,
    SIGNAL_ENGINE_STOPPED,
)
from .systems import DEFAULT_EXECUTORS, Executor, Failed, Outcome, Skipped
from .time.clock import DEFAULT_FRAME_RATE, FrameClock
from .time.tween import Timeline

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration / State
# =============================================================================

@dataclass
class EngineConfig:
    """Configuration for the direction engine."""
    frame_rate: float = DEFAULT_FRAME_RATE
    # False: stop() only prevents further dispatch (in-flight effects finish).
    # True: stop() also cancels the run's live tweens and timers.
    cancel_in_flight_on_stop: bool = False


@dataclass(frozen=True)
class EngineState:
    is_running: bool
    is_paused: bool
    current_index: int
    total_tasks: int


@dataclass
class _Run:
    """Bookkeeping for one execute() call."""
    timeline: Timeline
    wake: asyncio.Event = field(default_factory=asyncio.Event)
    aborted: bool = False


# =============================================================================
# Engine
# =============================================================================

class DirectionEngine(SignalEmitter):
    """
    Single-flight sequential task runner.

    Owned by the host and reused across runs; the context may be swapped
    between runs with `set_context()`.
    """

    def __init__(self, config: Optional[EngineConfig] = None, signals: Optional[SignalBridge] = None):
        self.config = config or EngineConfig()
        self.clock = FrameClock(self.config.frame_rate)

        self._queue: List[Task] = []
        self._cursor = 0
        self._running = False
        self._paused = False
        self._context: Optional[ExecutionContext] = None
        self._executors: Dict[CommandType, Executor] = dict(DEFAULT_EXECUTORS)
        self._run: Optional[_Run] = None

        if signals is not None:
            self.bind_bridge(signals)

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def set_context(self, ctx: Optional[ExecutionContext]):
        self._context = ctx
        if ctx is not None and self._bridge is not None and ctx._bridge is None:
            ctx.bind_bridge(self._bridge)

    @property
    def context(self) -> Optional[ExecutionContext]:
        return self._context

    def register_executor(self, kind: Union[CommandType, str], fn: Executor):
        """Override or add the executor used for a command kind."""
        self._executors[CommandType(kind)] = fn

    def add_tasks(self, tasks: Iterable[Task]):
        self._queue.extend(tasks)

    def clear_tasks(self):
        self._queue.clear()
        self._cursor = 0

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._queue)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    def get_state(self) -> EngineState:
        return EngineState(
            is_running=self._running,
            is_paused=self._paused,
            current_index=self._cursor,
            total_tasks=len(self._queue),
        )

    # -------------------------------------------------------------------------
    # Run loop
    # -------------------------------------------------------------------------

    async def execute(self):
        """
        Run queued tasks in order until the queue is exhausted or stop() is
        called. Never raises for task failures; see each task's status.
        """
        if self._context is None:
            logger.error("No execution context set, nothing executed")
            return
        if self._running:
            logger.warning("Direction already running, ignoring execute()")
            return

        run = _Run(timeline=Timeline(self.clock))
        run.wake.set()
        self._run = run
        self._running = True
        self._paused = False

        logger.info(f"Direction started: {len(self._queue) - self._cursor} task(s)")
        exhausted = False
        try:
            while self._cursor < len(self._queue):
                if run.aborted:
                    break
                if self._paused:
                    await run.wake.wait()
                    continue
                if self._context is None:
                    logger.error("Execution context was unbound mid-run, stopping")
                    break

                task = self._queue[self._cursor]
                if task.status is not TaskStatus.PENDING:
                    # Settled earlier, or still owned by a stopped run
                    logger.debug(f"Task {task.id} is {task.status.value}, skipping")
                    self._cursor += 1
                    continue

                await self._run_task(task, run.timeline)
                if run.aborted:
                    break
                self._cursor += 1
            else:
                exhausted = True

            if exhausted:
                logger.info("Direction complete")
                if self._context is not None:
                    self._notify("on_all_complete", self._context.on_all_complete)
                self.emit(SIGNAL_RUN_COMPLETED)
        finally:
            # A stop() followed by a new execute() owns the state now
            if self._run is run:
                self._running = False
                self._paused = False
                self._cursor = 0
                self._run = None

    async def _run_task(self, task: Task, timeline: Timeline):
        ctx = self._context
        kind = getattr(task.command, "type", None)
        label = kind.value if isinstance(kind, CommandType) else type(task.command).__name__

        task.mark(TaskStatus.RUNNING)
        logger.debug(f"Task {task.id} started ({label})")
        self._notify("on_task_start", ctx.on_task_start, task)
        self.emit(SIGNAL_TASK_STARTED, task)

        try:
            outcome = await self._dispatch(task.command, ctx, timeline)
        except Exception as e:
            outcome = Failed(e)

        task.outcome = outcome
        if isinstance(outcome, Failed):
            logger.error(f"Task {task.id} ({label}) failed: {outcome.error!r}")
            task.mark(TaskStatus.FAILED)
        else:
            task.mark(TaskStatus.COMPLETED)
            logger.debug(f"Task {task.id} finished ({label}): {outcome}")

        self._notify("on_task_complete", ctx.on_task_complete, task)
        self.emit(SIGNAL_TASK_COMPLETED, task)

    async def _dispatch(self, command: Command, ctx: ExecutionContext, timeline: Timeline) -> Outcome:
        kind = getattr(command, "type", None)
        executor = self._executors.get(kind)
        if executor is None:
            logger.warning(f"No executor for command {command!r}, skipping")
            return Skipped(f"unknown command kind: {kind}")
        return await executor(command, ctx, timeline)

    def _notify(self, name: str, callback: Optional[Callable], *args):
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Callback {name} error: {e}")

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def pause(self):
        """Hold the next dispatch. The in-flight task is unaffected."""
        self._paused = True
        if self._run is not None:
            self._run.wake.clear()
        self.emit(SIGNAL_ENGINE_PAUSED)

    def resume(self):
        self._paused = False
        if self._run is not None:
            self._run.wake.set()
        self.emit(SIGNAL_ENGINE_RESUMED)

    def stop(self):
        """Dispatch nothing further and reset the cursor."""
        run = self._run
        if run is not None:
            run.aborted = True
            run.wake.set()
            if self.config.cancel_in_flight_on_stop:
                cancelled = run.timeline.cancel_all()
                logger.info(f"Direction stopped, cancelled {cancelled} live tween(s)")
            else:
                logger.info("Direction stopped")
        self._run = None
        self._running = False
        self._paused = False
        self._cursor = 0
        self.emit(SIGNAL_ENGINE_STOPPED)
