"""
Scene Graph

Node hierarchy the director mutates while a sequence runs.
Executors locate nodes by name, then tween their transform and material
in place; the host renders whatever state the nodes hold each frame.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union
import re
import threading

import numpy as np

# Thread-safe node ID generation
_node_id_lock = threading.Lock()
_next_node_id = 1


def next_node_id() -> int:
    """Generate a unique node ID. Thread-safe."""
    global _next_node_id
    with _node_id_lock:
        nid = _next_node_id
        _next_node_id += 1
        return nid


def _vec(x: float, y: float, z: float) -> np.ndarray:
    return np.array([x, y, z], dtype=np.float64)


# =============================================================================
# Components
# =============================================================================

@dataclass
class Transform:
    """Transform component - position, rotation (Euler XYZ radians), scale."""
    pos: np.ndarray = field(default_factory=lambda: _vec(0.0, 0.0, 0.0))
    rot_euler: np.ndarray = field(default_factory=lambda: _vec(0.0, 0.0, 0.0))
    scale: np.ndarray = field(default_factory=lambda: _vec(1.0, 1.0, 1.0))

    def __post_init__(self):
        self.pos = np.array(self.pos, dtype=np.float64)
        self.rot_euler = np.array(self.rot_euler, dtype=np.float64)
        self.scale = np.array(self.scale, dtype=np.float64)


class MaterialKind(Enum):
    STANDARD = "standard"   # lit, has an animatable base color
    BASIC = "basic"         # unlit


@dataclass
class Material:
    kind: MaterialKind = MaterialKind.STANDARD
    color: np.ndarray = field(default_factory=lambda: _vec(1.0, 1.0, 1.0))
    opacity: float = 1.0
    transparent: bool = False

    def __post_init__(self):
        self.color = np.array(self.color, dtype=np.float64)

    @property
    def is_standard(self) -> bool:
        return self.kind is MaterialKind.STANDARD


@dataclass
class MeshRenderer:
    """Mesh renderer component - references a mesh and owns its material."""
    mesh_id: str
    material: Material = field(default_factory=Material)


# =============================================================================
# Scene Node
# =============================================================================

class SceneNode:
    """
    A node in the scene graph hierarchy.

    Names are not required to be unique; lookups return the first match in
    depth-first order.
    """

    def __init__(
        self,
        name: str,
        transform: Optional[Transform] = None,
        mesh: Optional[MeshRenderer] = None,
    ):
        self.name = name
        self.node_id = next_node_id()
        self.children: List[SceneNode] = []
        self.parent: Optional[SceneNode] = None

        self.transform: Transform = transform or Transform()
        self.mesh: Optional[MeshRenderer] = mesh

    # Convenience accessors used heavily by executors
    @property
    def position(self) -> np.ndarray:
        return self.transform.pos

    @property
    def rotation(self) -> np.ndarray:
        return self.transform.rot_euler

    @property
    def scale(self) -> np.ndarray:
        return self.transform.scale

    @property
    def is_mesh(self) -> bool:
        return self.mesh is not None

    @property
    def material(self) -> Optional[Material]:
        return self.mesh.material if self.mesh else None

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def add_child(self, node: "SceneNode") -> "SceneNode":
        """Attach `node` (detaching it from any previous parent) and return it."""
        if node.parent is not None:
            node.parent.remove_child(node)
        self.children.append(node)
        node.parent = self
        return node

    def remove_child(self, node: "SceneNode"):
        try:
            self.children.remove(node)
        except ValueError:
            return
        node.parent = None

    def ancestors(self) -> Iterator["SceneNode"]:
        """Parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def find_by_name(self, name: str) -> Optional["SceneNode"]:
        """First node named `name` in depth-first order, self included."""
        return next((node for node in self.walk() if node.name == name), None)

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def walk(self) -> Iterator["SceneNode"]:
        """Self and every descendant, depth-first, children in insertion order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def meshes(self) -> List["SceneNode"]:
        return [node for node in self.walk() if node.is_mesh]

    def traverse(
        self,
        fn: Callable[["SceneNode", np.ndarray], None],
        parent_m: Optional[np.ndarray] = None,
    ):
        """Depth-first visit calling fn(node, world_matrix)."""
        stack = [(self, np.eye(4) if parent_m is None else parent_m)]
        while stack:
            node, parent_world = stack.pop()
            world = parent_world @ compose_matrix(node.transform)
            fn(node, world)
            stack.extend((child, world) for child in reversed(node.children))

    def world_matrix(self) -> np.ndarray:
        m = compose_matrix(self.transform)
        for node in self.ancestors():
            m = compose_matrix(node.transform) @ m
        return m

    def world_position(self) -> np.ndarray:
        return self.world_matrix()[:3, 3].copy()

    # -------------------------------------------------------------------------
    # Debug
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"SceneNode(name={self.name!r}, id={self.node_id}, children={len(self.children)})"

    def format_tree(self, indent: int = 0) -> str:
        """Hierarchy as text, one node per line."""
        label = f"{'  ' * indent}{self.name} (id={self.node_id})"
        if self.mesh is not None:
            label += f" [{self.mesh.mesh_id}]"
        return "\n".join([label] + [child.format_tree(indent + 1) for child in self.children])


def find_object_by_name(root: Optional[SceneNode], name: Optional[str]) -> Optional[SceneNode]:
    """Depth-first exact-name lookup; None when either side is missing."""
    if root is None or not name:
        return None
    return root.find_by_name(name)


# =============================================================================
# Matrix Utilities
# =============================================================================

def _rotation(rx: float, ry: float, rz: float) -> np.ndarray:
    """3x3 rotation for Euler XYZ angles, applied X first (R = Rz @ Ry @ Rx)."""
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)
    return np.array([
        [cz * cy, cz * sy * sx - sz * cx, cz * sy * cx + sz * sx],
        [sz * cy, sz * sy * sx + cz * cx, sz * sy * cx - cz * sx],
        [-sy, cy * sx, cy * cx],
    ], dtype=np.float64)


def compose_matrix(t: Transform) -> np.ndarray:
    """4x4 local matrix T @ R @ S for a transform."""
    m = np.eye(4, dtype=np.float64)
    m[:3, :3] = _rotation(*t.rot_euler[:3]) * t.scale[:3]
    m[:3, 3] = t.pos[:3]
    return m


# =============================================================================
# Colors
# =============================================================================

NAMED_COLORS: Dict[str, Tuple[int, int, int]] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "aqua": (0, 255, 255),
    "magenta": (255, 0, 255),
    "fuchsia": (255, 0, 255),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "pink": (255, 192, 203),
    "gold": (255, 215, 0),
    "silver": (192, 192, 192),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "brown": (165, 42, 42),
    "navy": (0, 0, 128),
    "teal": (0, 128, 128),
    "crimson": (220, 20, 60),
    "violet": (238, 130, 238),
    "indigo": (75, 0, 130),
    "skyblue": (135, 206, 235),
    "hotpink": (255, 105, 180),
}

_RGB_FUNC = re.compile(r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*[\d.]+\s*)?\)$")


def parse_color(value: Union[str, Tuple[float, float, float]]) -> np.ndarray:
    """
    Parse a color to RGB in 0..1.

    Accepts "#rgb", "#rrggbb", "0xrrggbb", "rrggbb", "rgb(r, g, b)" with
    0-255 channels, CSS color names, or an (r, g, b) tuple in 0..1.
    """
    if not isinstance(value, str):
        rgb = np.asarray(value, dtype=np.float64).reshape(-1)
        if rgb.shape != (3,):
            raise ValueError(f"color tuple must have 3 channels: {value!r}")
        return np.clip(rgb, 0.0, 1.0)

    s = value.strip().lower()
    if s in NAMED_COLORS:
        return np.array(NAMED_COLORS[s], dtype=np.float64) / 255.0

    m = _RGB_FUNC.match(s)
    if m:
        channels = [min(255.0, float(c)) for c in m.groups()]
        return np.array(channels, dtype=np.float64) / 255.0

    t = s
    if t.startswith("#"):
        t = t[1:]
    elif t.startswith("0x"):
        t = t[2:]
    if len(t) == 3:
        t = "".join(ch * 2 for ch in t)
    if len(t) != 6:
        raise ValueError(f"invalid color: '{value}'")
    try:
        r, g, b = int(t[0:2], 16), int(t[2:4], 16), int(t[4:6], 16)
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{value}'") from e
    return np.array([r, g, b], dtype=np.float64) / 255.0
