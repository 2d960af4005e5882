"""Target position providers for world-space aim points."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np


class TargetProvider:
    """Base interface for world-space target providers."""

    def get_target_world(self) -> Optional[np.ndarray]:
        raise NotImplementedError

    def step(self, dt: float) -> None:
        """Advance time-dependent targets. Static providers ignore it."""
        pass


class NoTargetProvider(TargetProvider):
    """No target assigned; aiming at it is a no-op."""

    def get_target_world(self) -> Optional[np.ndarray]:
        return None


class FixedTargetProvider(TargetProvider):
    """Always returns a fixed world-space target position."""

    def __init__(self, target_world: np.ndarray):
        self.target_world = np.asarray(target_world, dtype=np.float64).reshape(3)

    def get_target_world(self) -> Optional[np.ndarray]:
        return self.target_world.copy()


class OrbitTargetProvider(TargetProvider):
    """Target circling ``center`` in the horizontal plane.

    Angle 0 is straight ahead (+z) of the centre; positive speed moves toward +x.
    """

    def __init__(
        self,
        center: np.ndarray,
        radius: float,
        speed_deg_per_s: float,
        height: float = 0.0,
        start_deg: float = 0.0,
    ):
        if radius < 0.0:
            raise ValueError(f"orbit radius must be >= 0, got {radius}")
        self.center = np.asarray(center, dtype=np.float64).reshape(3)
        self.radius = float(radius)
        self.speed_deg_per_s = float(speed_deg_per_s)
        self.height = float(height)
        self.angle_deg = float(start_deg)

    def get_target_world(self) -> Optional[np.ndarray]:
        a = math.radians(self.angle_deg)
        return self.center + np.array(
            [self.radius * math.sin(a), self.height, self.radius * math.cos(a)],
            dtype=np.float64,
        )

    def step(self, dt: float) -> None:
        self.angle_deg = (self.angle_deg + self.speed_deg_per_s * float(dt)) % 360.0
