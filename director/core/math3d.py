# director/core/math3d.py
"""
Core math helpers for scene direction.

Vectors are plain float64 NumPy arrays of shape (3,), shared with the
scene graph. Easing curves map linear progress in [0, 1] to eased
progress and are looked up by tween-library style names
("power2.inOut", "bounce.out", "none", ...).
"""

from __future__ import annotations
import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

EaseFunc = Callable[[float], float]
Vec3Like = Union[float, int, Sequence[float], np.ndarray]

DEFAULT_EASE = "power2.inOut"


# =============================================================================
# Vectors
# =============================================================================

def as_vec3(value: Vec3Like) -> np.ndarray:
    """Convert a 3-sequence to a float array, or broadcast a scalar to all axes."""
    if isinstance(value, (int, float)):
        return np.full(3, float(value), dtype=np.float64)
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {arr.shape}")
    return arr.copy()


def normalized(v: np.ndarray) -> np.ndarray:
    ln = float(np.linalg.norm(v))
    if ln < 1e-10:
        return np.zeros(3, dtype=np.float64)
    return v / ln


def distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(a) - np.asarray(b)))


# =============================================================================
# Easing Functions
# =============================================================================

def ease_linear(t: float) -> float:
    return t

def ease_in_quad(t: float) -> float:
    return t * t

def ease_out_quad(t: float) -> float:
    return 1.0 - (1.0 - t) ** 2

def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - (-2.0*t + 2.0) ** 2 / 2.0

def ease_in_cubic(t: float) -> float:
    return t * t * t

def ease_out_cubic(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3

def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0*t + 2.0) ** 3 / 2.0

def ease_in_sine(t: float) -> float:
    return 1.0 - math.cos(t * math.pi / 2.0)

def ease_out_sine(t: float) -> float:
    return math.sin(t * math.pi / 2.0)

def ease_in_out_sine(t: float) -> float:
    return -(math.cos(math.pi * t) - 1.0) / 2.0

def ease_in_expo(t: float) -> float:
    return 0.0 if t == 0.0 else math.pow(2.0, 10.0*t - 10.0)

def ease_out_expo(t: float) -> float:
    return 1.0 if t == 1.0 else 1.0 - math.pow(2.0, -10.0*t)

def ease_in_out_expo(t: float) -> float:
    if t == 0.0 or t == 1.0:
        return t
    if t < 0.5:
        return math.pow(2.0, 20.0*t - 10.0) / 2.0
    return (2.0 - math.pow(2.0, -20.0*t + 10.0)) / 2.0

def ease_in_circ(t: float) -> float:
    return 1.0 - math.sqrt(1.0 - t * t)

def ease_out_circ(t: float) -> float:
    return math.sqrt(1.0 - (t - 1.0) ** 2)

def ease_in_out_circ(t: float) -> float:
    if t < 0.5:
        return (1.0 - math.sqrt(1.0 - (2.0*t) ** 2)) / 2.0
    return (math.sqrt(1.0 - (-2.0*t + 2.0) ** 2) + 1.0) / 2.0

_BACK_C1 = 1.70158
_BACK_C2 = _BACK_C1 * 1.525
_BACK_C3 = _BACK_C1 + 1.0

def ease_in_back(t: float) -> float:
    return _BACK_C3 * t * t * t - _BACK_C1 * t * t

def ease_out_back(t: float) -> float:
    return 1.0 + _BACK_C3 * (t - 1.0) ** 3 + _BACK_C1 * (t - 1.0) ** 2

def ease_in_out_back(t: float) -> float:
    if t < 0.5:
        return ((2.0*t) ** 2 * ((_BACK_C2 + 1.0) * 2.0*t - _BACK_C2)) / 2.0
    return ((2.0*t - 2.0) ** 2 * ((_BACK_C2 + 1.0) * (t*2.0 - 2.0) + _BACK_C2) + 2.0) / 2.0

def ease_in_elastic(t: float) -> float:
    if t == 0.0 or t == 1.0:
        return t
    return -math.pow(2.0, 10.0*t - 10.0) * math.sin((t*10.0 - 10.75) * (2.0*math.pi/3.0))

def ease_out_elastic(t: float) -> float:
    if t == 0.0 or t == 1.0:
        return t
    return math.pow(2.0, -10.0*t) * math.sin((t*10.0 - 0.75) * (2.0*math.pi/3.0)) + 1.0

def ease_out_bounce(t: float) -> float:
    n1 = 7.5625
    d1 = 2.75
    if t < 1.0/d1:
        return n1 * t * t
    elif t < 2.0/d1:
        t -= 1.5/d1
        return n1 * t * t + 0.75
    elif t < 2.5/d1:
        t -= 2.25/d1
        return n1 * t * t + 0.9375
    else:
        t -= 2.625/d1
        return n1 * t * t + 0.984375

def ease_in_bounce(t: float) -> float:
    return 1.0 - ease_out_bounce(1.0 - t)

def ease_in_out_bounce(t: float) -> float:
    if t < 0.5:
        return (1.0 - ease_out_bounce(1.0 - 2.0*t)) / 2.0
    return (1.0 + ease_out_bounce(2.0*t - 1.0)) / 2.0


def _power_in(power: int) -> EaseFunc:
    exponent = power + 1
    return lambda t: t ** exponent

def _power_out(power: int) -> EaseFunc:
    exponent = power + 1
    return lambda t: 1.0 - (1.0 - t) ** exponent

def _power_in_out(power: int) -> EaseFunc:
    exponent = power + 1

    def ease(t: float) -> float:
        if t < 0.5:
            return math.pow(2.0, exponent - 1) * t ** exponent
        return 1.0 - (-2.0*t + 2.0) ** exponent / 2.0
    return ease


# =============================================================================
# Named Lookup
# =============================================================================

_EASES: Dict[str, EaseFunc] = {
    "none": ease_linear,
    "linear": ease_linear,
    "sine.in": ease_in_sine,
    "sine.out": ease_out_sine,
    "sine.inOut": ease_in_out_sine,
    "expo.in": ease_in_expo,
    "expo.out": ease_out_expo,
    "expo.inOut": ease_in_out_expo,
    "circ.in": ease_in_circ,
    "circ.out": ease_out_circ,
    "circ.inOut": ease_in_out_circ,
    "back.in": ease_in_back,
    "back.out": ease_out_back,
    "back.inOut": ease_in_out_back,
    "elastic.in": ease_in_elastic,
    "elastic.out": ease_out_elastic,
    "bounce.in": ease_in_bounce,
    "bounce.out": ease_out_bounce,
    "bounce.inOut": ease_in_out_bounce,
}

for _power in range(5):
    if _power == 0:
        _EASES["power0.in"] = _EASES["power0.out"] = _EASES["power0.inOut"] = ease_linear
        continue
    _EASES[f"power{_power}.in"] = _power_in(_power)
    _EASES[f"power{_power}.out"] = _power_out(_power)
    _EASES[f"power{_power}.inOut"] = _power_in_out(_power)

# Legacy aliases still emitted by some generators
_EASES.update({
    "quad.in": ease_in_quad, "quad.out": ease_out_quad, "quad.inOut": ease_in_out_quad,
    "cubic.in": ease_in_cubic, "cubic.out": ease_out_cubic, "cubic.inOut": ease_in_out_cubic,
})

_FAMILIES = {name.split(".")[0] for name in _EASES if "." in name}


def get_ease(name: Optional[str]) -> EaseFunc:
    """
    Resolve an easing curve by name.

    A bare family name ("power3", "bounce") means its ".out" variant.
    Unknown names log a warning and fall back to power2.inOut.
    """
    if not name:
        return _EASES[DEFAULT_EASE]
    key = name.strip()
    if key in _EASES:
        return _EASES[key]
    if key in _FAMILIES:
        return _EASES[f"{key}.out"]
    logger.warning(f"Unknown ease '{name}', using {DEFAULT_EASE}")
    return _EASES[DEFAULT_EASE]


def ease_names() -> List[str]:
    return sorted(_EASES)


# =============================================================================
# Utility Functions
# =============================================================================

def clamp(value: float, min_val: float, max_val: float) -> float:
    return max(min_val, min(max_val, value))

def lerp(a, b, t: float):
    return a + (b - a) * t
