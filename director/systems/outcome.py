"""
Executor outcomes.

Every executor settles with one of three results so the engine (and
tests) can tell a soft-skip apart from a real completion or failure.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Completed:
    pass


@dataclass(frozen=True)
class Skipped:
    reason: str


@dataclass(frozen=True)
class Failed:
    error: BaseException


Outcome = Union[Completed, Skipped, Failed]

COMPLETED = Completed()
