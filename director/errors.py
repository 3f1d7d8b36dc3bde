# director/errors.py
"""
Exception types raised by the direction engine and its executors.
"""

from __future__ import annotations


class DirectorError(Exception):
    """Base class for all director errors."""


class NoSceneError(DirectorError):
    """An executor that needs a scene graph was run without one bound."""


class TweenCancelled(DirectorError):
    """Raised to whoever awaits a tween or timer that was cancelled."""


class CommandParseError(DirectorError, ValueError):
    """A command list from a producer could not be decoded."""


class TaskStateError(DirectorError):
    """Illegal task status transition."""
