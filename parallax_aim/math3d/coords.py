"""Direction helpers for yaw/pitch in degrees."""

from __future__ import annotations

import math

import numpy as np


def vec_to_yaw_pitch_deg(v: np.ndarray) -> tuple[float, float]:
    """
    Aim angle convention (x right, y up, z forward):
      yaw:   atan2(x, z)                => 0=forward, +90=right
      pitch: atan2(y, sqrt(x^2+z^2))    => +90=straight up
    """
    x, y, z = float(v[0]), float(v[1]), float(v[2])
    yaw = math.degrees(math.atan2(x, z))
    pitch = math.degrees(math.atan2(y, math.sqrt(x * x + z * z) + 1e-12))
    return yaw, pitch


def yaw_pitch_to_vec(yaw_deg: float, pitch_deg: float) -> np.ndarray:
    yaw = math.radians(yaw_deg)
    pitch = math.radians(pitch_deg)
    x = math.sin(yaw) * math.cos(pitch)
    y = math.sin(pitch)
    z = math.cos(yaw) * math.cos(pitch)
    return np.array([x, y, z], dtype=np.float64)


def horizontal(v: np.ndarray) -> np.ndarray:
    """Projection onto the world horizontal (xz) plane."""
    out = np.asarray(v, dtype=np.float64).reshape(3).copy()
    out[1] = 0.0
    return out


def as_vec3(v, name: str = "vector") -> np.ndarray:
    arr = np.asarray(v, dtype=np.float64)
    if arr.size != 3:
        raise ValueError(f"{name} must have 3 components, got shape {arr.shape}")
    return arr.reshape(3).copy()
