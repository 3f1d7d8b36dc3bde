"""
Camera rig: a perspective camera plus orbit controls.

The camera position and the orbit target are independent vectors; the
controls re-aim the camera at the target whenever `update()` runs, which
is what keeps the rig consistent while either vector is being tweened.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from ..core.math3d import normalized

DEFAULT_CAMERA_POSITION = (8.0, 5.0, 8.0)
DEFAULT_ORBIT_TARGET = (0.0, 0.0, 0.0)


def _vec(values: Sequence[float]) -> np.ndarray:
    return np.array(values, dtype=np.float64)


# =============================================================================
# Camera
# =============================================================================

@dataclass
class Camera:
    """Mutable perspective camera state."""
    name: str = "camera"
    position: np.ndarray = field(default_factory=lambda: _vec(DEFAULT_CAMERA_POSITION))
    up: np.ndarray = field(default_factory=lambda: _vec((0.0, 1.0, 0.0)))
    fov_y_deg: float = 50.0
    near: float = 0.1
    far: float = 1000.0
    # Unit look direction; -Z until the camera is aimed
    direction: np.ndarray = field(default_factory=lambda: _vec((0.0, 0.0, -1.0)))

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64)
        self.up = np.array(self.up, dtype=np.float64)
        self.direction = normalized(np.array(self.direction, dtype=np.float64))

    def look_at(self, point: Sequence[float]):
        d = normalized(np.asarray(point, dtype=np.float64) - self.position)
        if np.any(d):
            self.direction = d

    def get_world_direction(self) -> np.ndarray:
        return self.direction.copy()

    def view_matrix(self) -> np.ndarray:
        """Compute view matrix from position and look direction."""
        f = self.direction
        u = self.up / (np.linalg.norm(self.up) + 1e-6)
        s = np.cross(f, u)
        s = s / (np.linalg.norm(s) + 1e-6)
        u2 = np.cross(s, f)

        M = np.eye(4, dtype=np.float64)
        M[0, :3] = s
        M[1, :3] = u2
        M[2, :3] = -f
        T = np.eye(4, dtype=np.float64)
        T[:3, 3] = -self.position[:3]
        return M @ T


# =============================================================================
# Orbit Controls
# =============================================================================

class OrbitControls:
    """Orbit target the camera rotates around and looks at."""

    def __init__(self, camera: Camera, target: Sequence[float] = DEFAULT_ORBIT_TARGET):
        self.camera = camera
        self.target = _vec(target)
        self.enabled = True
        self.update_count = 0

    def update(self):
        """Re-aim the camera at the orbit target."""
        self.camera.look_at(self.target)
        self.update_count += 1


@dataclass
class CameraController:
    """The camera/orbit-controls pair executors drive."""
    camera: Camera
    controls: OrbitControls

    @staticmethod
    def create(
        position: Sequence[float] = DEFAULT_CAMERA_POSITION,
        target: Sequence[float] = DEFAULT_ORBIT_TARGET,
        name: str = "camera",
    ) -> "CameraController":
        camera = Camera(name=name, position=_vec(position))
        controls = OrbitControls(camera, target)
        controls.update()
        return CameraController(camera=camera, controls=controls)

    @property
    def position(self) -> np.ndarray:
        return self.camera.position

    @property
    def target(self) -> np.ndarray:
        return self.controls.target

