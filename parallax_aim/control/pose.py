"""Pose data structures for pivot and muzzle transforms."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..math3d.quaternion import IDENTITY_Q, WORLD_FORWARD, q_conj, q_normalize, q_rotate_vec


@dataclass(slots=True)
class Pose:
    """Rigid transform in world space.

    position:
      3D translation [x, y, z].
    quaternion:
      Orientation quaternion [w, x, y, z], unit length.
    """

    position: np.ndarray
    quaternion: np.ndarray

    def __post_init__(self) -> None:
        position = np.asarray(self.position, dtype=np.float64)
        quaternion = np.asarray(self.quaternion, dtype=np.float64)
        if position.size != 3:
            raise ValueError(f"Pose position must have 3 components, got {position.shape}")
        if quaternion.size != 4:
            raise ValueError(f"Pose quaternion must have 4 components, got {quaternion.shape}")
        self.position = position.reshape(3).copy()
        self.quaternion = q_normalize(quaternion)

    def forward(self) -> np.ndarray:
        return q_rotate_vec(self.quaternion, WORLD_FORWARD)

    def transform_point(self, p_local: np.ndarray) -> np.ndarray:
        """Local -> world."""
        return self.position + q_rotate_vec(self.quaternion, p_local)

    def inverse_transform_direction(self, v_world: np.ndarray) -> np.ndarray:
        """World direction -> local direction (rotation only)."""
        return q_rotate_vec(q_conj(self.quaternion), v_world)


def identity_pose() -> Pose:
    return Pose(
        position=np.zeros(3, dtype=np.float64),
        quaternion=IDENTITY_Q.copy(),
    )
