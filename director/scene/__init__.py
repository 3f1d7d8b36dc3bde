"""
Scene graph and camera rig the director mutates.
"""

from .graph import (
    SceneNode,
    Transform,
    Material,
    MaterialKind,
    MeshRenderer,
    compose_matrix,
    find_object_by_name,
    parse_color,
)
from .camera import (
    Camera,
    OrbitControls,
    CameraController,
    DEFAULT_CAMERA_POSITION,
    DEFAULT_ORBIT_TARGET,
)

__all__ = [
    'SceneNode', 'Transform', 'Material', 'MaterialKind', 'MeshRenderer',
    'compose_matrix', 'find_object_by_name', 'parse_color',
    'Camera', 'OrbitControls', 'CameraController',
    'DEFAULT_CAMERA_POSITION', 'DEFAULT_ORBIT_TARGET',
]
