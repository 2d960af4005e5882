"""Explicit pivot -> muzzle hierarchy.

The muzzle is rigidly attached to the pivot. Instead of relying on a scene
graph, the caller owns a ``Turret`` holding the pivot pose and the muzzle's
placement in pivot-local coordinates; the muzzle world pose is derived from
the current pivot pose on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from ..math3d.quaternion import IDENTITY_Q, q_mul, q_normalize
from .pose import Pose


@dataclass(slots=True)
class MuzzleMount:
    """Muzzle placement relative to the pivot.

    local_position:
      Muzzle aperture in pivot-local coordinates (x right, y up, z forward).
    local_rotation:
      Muzzle orientation relative to the pivot, [w, x, y, z].
    """

    local_position: np.ndarray
    local_rotation: np.ndarray = field(default_factory=lambda: IDENTITY_Q.copy())

    def __post_init__(self) -> None:
        self.local_position = np.asarray(self.local_position, dtype=np.float64).reshape(3).copy()
        self.local_rotation = q_normalize(self.local_rotation)

    def world_pose(self, pivot: Pose) -> Pose:
        return Pose(
            position=pivot.transform_point(self.local_position),
            quaternion=q_mul(pivot.quaternion, self.local_rotation),
        )


@dataclass(slots=True)
class Turret:
    """Caller-owned pivot + muzzle pair.

    Either member may be missing; the aim controller reports that as a
    configuration error.
    """

    pivot: Optional[Pose]
    mount: Optional[MuzzleMount]

    def muzzle_pose(self) -> Optional[Pose]:
        if self.pivot is None or self.mount is None:
            return None
        return self.mount.world_pose(self.pivot)

    def set_orientation(self, quaternion: np.ndarray) -> None:
        if self.pivot is None:
            raise RuntimeError("turret has no pivot to orient")
        self.pivot = Pose(position=self.pivot.position, quaternion=quaternion)
