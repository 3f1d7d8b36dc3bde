"""
Direction Commands

The wire schema shared with direction producers (the AI generator and the
story orchestrator): six immutable command variants, the Task wrapper the
engine schedules, and decoding from JSON.

Wire form of one command:
    {"type": "camera", "action": "dolly_in", "value": 3, "duration": 0.8}

Wire form of a direction:
    {"description": "...", "tasks": [<command>, ...]}
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Union
import json
import logging
import re
import uuid

from .errors import CommandParseError, TaskStateError

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]
CommandValue = Union[Vec3, float, str, None]


class CommandType(Enum):
    ANIMATION = "animation"
    CAMERA = "camera"
    VFX = "vfx"
    SOUND = "sound"
    PHYSICS = "physics"
    WAIT = "wait"


# =============================================================================
# Commands
# =============================================================================

@dataclass(frozen=True)
class AnimationCommand:
    target: str
    action: str
    value: CommandValue
    duration: Optional[float] = None
    ease: Optional[str] = None
    delay: Optional[float] = None

    type: ClassVar[CommandType] = CommandType.ANIMATION


@dataclass(frozen=True)
class CameraCommand:
    action: str
    target: Optional[str] = None
    value: CommandValue = None
    duration: Optional[float] = None

    type: ClassVar[CommandType] = CommandType.CAMERA


@dataclass(frozen=True)
class VFXCommand:
    effect: str
    intensity: Optional[float] = None
    duration: Optional[float] = None
    color: Optional[str] = None

    type: ClassVar[CommandType] = CommandType.VFX


@dataclass(frozen=True)
class SoundCommand:
    sound: str
    volume: Optional[float] = None   # dB, nominally -60..0
    duration: Optional[float] = None
    synth: Optional[str] = None      # producer hint; recipes pick their own synths

    type: ClassVar[CommandType] = CommandType.SOUND


@dataclass(frozen=True)
class PhysicsCommand:
    action: str
    target: Optional[str] = None
    value: CommandValue = None
    radius: Optional[float] = None

    type: ClassVar[CommandType] = CommandType.PHYSICS


@dataclass(frozen=True)
class WaitCommand:
    duration: float

    type: ClassVar[CommandType] = CommandType.WAIT


Command = Union[AnimationCommand, CameraCommand, VFXCommand, SoundCommand, PhysicsCommand, WaitCommand]


@dataclass(frozen=True)
class DirectionResponse:
    description: str
    commands: Tuple[Command, ...] = ()


# =============================================================================
# Tasks
# =============================================================================

class TaskStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


_TRANSITIONS = {
    TaskStatus.PENDING: (TaskStatus.RUNNING,),
    TaskStatus.RUNNING: (TaskStatus.COMPLETED, TaskStatus.FAILED),
    TaskStatus.COMPLETED: (),
    TaskStatus.FAILED: (),
}


@dataclass
class Task:
    """
    A queued command with identity and status.

    `parallel` is carried from the wire schema but the engine never reads
    it: tasks always run one at a time.
    """
    id: str
    command: Command
    parallel: bool = False
    status: TaskStatus = TaskStatus.PENDING
    outcome: Any = None     # executor Outcome once the task has settled

    def mark(self, status: TaskStatus):
        if status not in _TRANSITIONS[self.status]:
            raise TaskStateError(f"task {self.id}: {self.status.value} -> {status.value}")
        self.status = status


def prepare_task_queue(commands: Sequence[Command]) -> List[Task]:
    """Wrap commands into pending tasks with fresh identities."""
    return [Task(id=str(uuid.uuid4()), command=command) for command in commands]


# =============================================================================
# Decoding
# =============================================================================

def _opt_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CommandParseError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _opt_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise CommandParseError(f"'{key}' must be a string, got {value!r}")
    return value


def _req_str(data: Dict[str, Any], key: str) -> str:
    value = _opt_str(data, key)
    if value is None:
        raise CommandParseError(f"missing '{key}' in {data.get('type')} command")
    return value


def _value(data: Dict[str, Any]) -> CommandValue:
    value = data.get("value")
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise CommandParseError(f"'value' must be a number, vector or string, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (list, tuple)) and len(value) == 3 and all(
            isinstance(v, (int, float)) and not isinstance(v, bool) for v in value):
        return (float(value[0]), float(value[1]), float(value[2]))
    raise CommandParseError(f"'value' must be a number, vector or string, got {value!r}")


def command_from_dict(data: Dict[str, Any]) -> Command:
    """Decode one wire command. Raises CommandParseError when malformed."""
    if not isinstance(data, dict):
        raise CommandParseError(f"command must be an object, got {type(data).__name__}")

    kind = data.get("type")
    try:
        ctype = CommandType(kind)
    except ValueError:
        raise CommandParseError(f"unknown command type: {kind!r}") from None

    if ctype is CommandType.ANIMATION:
        return AnimationCommand(
            target=_req_str(data, "target"),
            action=_req_str(data, "action"),
            value=_value(data),
            duration=_opt_float(data, "duration"),
            ease=_opt_str(data, "ease"),
            delay=_opt_float(data, "delay"),
        )
    if ctype is CommandType.CAMERA:
        return CameraCommand(
            action=_req_str(data, "action"),
            target=_opt_str(data, "target"),
            value=_value(data),
            duration=_opt_float(data, "duration"),
        )
    if ctype is CommandType.VFX:
        return VFXCommand(
            effect=_req_str(data, "effect"),
            intensity=_opt_float(data, "intensity"),
            duration=_opt_float(data, "duration"),
            color=_opt_str(data, "color"),
        )
    if ctype is CommandType.SOUND:
        return SoundCommand(
            sound=_req_str(data, "sound"),
            volume=_opt_float(data, "volume"),
            duration=_opt_float(data, "duration"),
            synth=_opt_str(data, "synth"),
        )
    if ctype is CommandType.PHYSICS:
        return PhysicsCommand(
            action=_req_str(data, "action"),
            target=_opt_str(data, "target"),
            value=_value(data),
            radius=_opt_float(data, "radius"),
        )

    duration = _opt_float(data, "duration")
    if duration is None:
        raise CommandParseError("wait command needs a 'duration'")
    return WaitCommand(duration=duration)


def command_to_dict(command: Command) -> Dict[str, Any]:
    """Wire form of a command, omitting unset optional fields."""
    out: Dict[str, Any] = {"type": command.type.value}
    for f in fields(command):
        value = getattr(command, f.name)
        if value is None:
            continue
        out[f.name] = list(value) if isinstance(value, tuple) else value
    return out


_FENCED = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def parse_direction(text: str) -> DirectionResponse:
    """
    Decode a direction as emitted by a generator.

    Accepts bare JSON or JSON inside a fenced markdown code block.
    Commands of an unknown type are dropped with a warning; any other
    malformed command, or malformed JSON, raises CommandParseError.
    """
    match = _FENCED.search(text)
    payload = match.group(1) if match else text
    try:
        data = json.loads(payload.strip())
    except json.JSONDecodeError as e:
        raise CommandParseError(f"direction is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CommandParseError("direction must be a JSON object")
    raw = data.get("tasks", [])
    if not isinstance(raw, list):
        raise CommandParseError("'tasks' must be a list")

    valid_types = {t.value for t in CommandType}
    commands: List[Command] = []
    for i, item in enumerate(raw):
        if isinstance(item, dict) and item.get("type") not in valid_types:
            logger.warning(f"Dropping command {i} with unknown type {item.get('type')!r}")
            continue
        commands.append(command_from_dict(item))

    description = data.get("description") or ""
    return DirectionResponse(description=str(description), commands=tuple(commands))


def create_demo_direction() -> DirectionResponse:
    """Canned beat: zoom in, glow, blow up, settle back."""
    return DirectionResponse(
        description="Demo: camera zoom -> glow -> explosion",
        commands=(
            CameraCommand(action="dolly_in", value=3.0, duration=0.8),
            WaitCommand(duration=0.3),
            VFXCommand(effect="bloom", intensity=2.0, duration=1.0),
            SoundCommand(sound="charge", duration=0.8),
            WaitCommand(duration=0.5),
            VFXCommand(effect="chromatic_aberration", intensity=2.0, duration=0.3),
            SoundCommand(sound="explosion", duration=1.0),
            PhysicsCommand(action="explode", radius=3.0),
            CameraCommand(action="shake", value=0.4, duration=0.5),
            WaitCommand(duration=0.5),
            CameraCommand(action="reset", duration=1.0),
        ),
    )
