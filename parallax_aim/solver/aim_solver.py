"""Closed-form parallax aim correction.

A pivot carries a muzzle that is displaced from the pivot's rotation centre.
Pointing the pivot's own forward axis at a target makes the muzzle miss by
the offset. The solver instead closes two right triangles, one in the
horizontal plane (lateral offset) and one in the vertical plane (height
offset), and rotates the pivot->target sightline by the resulting angles so
the muzzle boresight runs through the target.

Frame convention: x right, y up, z forward.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..control.debug_provider import DebugProvider, draw_axis_cross
from ..control.pose import Pose
from ..math3d.coords import as_vec3, horizontal
from ..math3d.quaternion import (
    WORLD_UP,
    axis_angle_to_q,
    look_rotation,
    q_inverse,
    q_mul,
    q_normalize,
    q_rotate_vec,
)

logger = logging.getLogger(__name__)

_EPS = 1e-9


class AimStatus(enum.Enum):
    SOLVED = "solved"
    INFEASIBLE = "infeasible"
    CONFIG_ERROR = "config-error"


@dataclass(frozen=True)
class AimResult:
    status: AimStatus
    # New pivot orientation [w, x, y, z]; None unless SOLVED.
    orientation: Optional[np.ndarray] = None
    # Positive yaw turns right, positive pitch turns up.
    yaw_correction_deg: float = 0.0
    pitch_correction_deg: float = 0.0
    aim_vector: Optional[np.ndarray] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is AimStatus.SOLVED


def _infeasible(reason: str) -> AimResult:
    logger.debug("[AIM] skipped: %s", reason)
    return AimResult(status=AimStatus.INFEASIBLE, reason=reason)


def _clamped_asin(a: float, c: float) -> float:
    return math.asin(max(-1.0, min(1.0, a / c)))


def orientation_offset(pivot: Pose, muzzle: Pose) -> np.ndarray:
    """inverse(muzzle) * pivot; only valid for this exact pose pair."""
    return q_normalize(q_mul(q_inverse(muzzle.quaternion), pivot.quaternion))


def local_offset(pivot: Pose, muzzle: Pose) -> np.ndarray:
    """Muzzle position relative to the pivot in the muzzle frame, depth removed."""
    v = muzzle.inverse_transform_direction(muzzle.position - pivot.position)
    v[2] = 0.0
    return v


def boresight_miss_distance(muzzle: Pose, target: np.ndarray) -> float:
    """Distance from target to the muzzle's forward ray (inf if behind it)."""
    rel = as_vec3(target, "target") - muzzle.position
    f = muzzle.forward()
    along = float(np.dot(rel, f))
    if along < 0.0:
        return math.inf
    return float(np.linalg.norm(rel - along * f))


class AimSolver:
    """Stateless solver; safe to share between pivots and threads."""

    def __init__(
        self,
        debug_provider: Optional[DebugProvider] = None,
        debug_cross_size: float = 2.0,
    ):
        self.debug_provider = debug_provider
        self.debug_cross_size = float(debug_cross_size)

    def solve(
        self,
        pivot: Optional[Pose],
        muzzle: Optional[Pose],
        target: np.ndarray,
    ) -> AimResult:
        if pivot is None:
            return AimResult(status=AimStatus.CONFIG_ERROR, reason="pivot is not assigned")
        if muzzle is None:
            return AimResult(status=AimStatus.CONFIG_ERROR, reason="muzzle is not assigned")

        target = as_vec3(target, "target")
        if not np.isfinite(target).all():
            return _infeasible("target is not finite")

        to_target = target - pivot.position
        to_muzzle = muzzle.position - pivot.position
        if float(np.dot(to_target, to_target)) <= float(np.dot(to_muzzle, to_muzzle)):
            return _infeasible("target inside minimum engagement radius")

        offset_rot = orientation_offset(pivot, muzzle)
        offset = local_offset(pivot, muzzle)

        # Horizontal pass: rotate about world up by the lateral offset angle.
        c_vec = horizontal(to_target)
        c = float(np.linalg.norm(c_vec))
        if c < _EPS:
            return _infeasible("target is straight above or below the pivot")
        yaw = _clamped_asin(abs(float(offset[0])), c)
        # Muzzle right of the pivot -> turn left, and vice versa.
        if offset[0] > 0.0:
            yaw = -yaw
        horizontal_aim = q_rotate_vec(axis_angle_to_q(WORLD_UP, yaw), c_vec)

        # Vertical pass: restore the target height and rotate about the
        # horizontal axis perpendicular to the corrected bearing.
        c_vec = horizontal_aim + np.array([0.0, to_target[1], 0.0], dtype=np.float64)
        pitch_axis = np.array([horizontal_aim[2], 0.0, -horizontal_aim[0]], dtype=np.float64)
        c = float(np.linalg.norm(c_vec))
        # Rotation about the right axis is positive downward; a muzzle below
        # the pivot (offset y < 0) gives a negative angle, i.e. aim up.
        pitch = _clamped_asin(float(offset[1]), c)
        aim = q_rotate_vec(axis_angle_to_q(pitch_axis, pitch), c_vec)

        aim_len = float(np.linalg.norm(aim))
        if aim_len < _EPS or not np.isfinite(aim).all():
            return _infeasible("corrected aim vector is degenerate")
        if float(np.linalg.norm(horizontal(aim))) < _EPS * aim_len:
            return _infeasible("corrected aim vector is vertical")

        orientation = q_normalize(q_mul(look_rotation(aim, WORLD_UP), offset_rot))
        if not np.isfinite(orientation).all():
            return _infeasible("orientation is not finite")

        if self.debug_provider is not None:
            draw_axis_cross(
                self.debug_provider,
                pivot.position + horizontal_aim,
                self.debug_cross_size,
                "green",
            )
            draw_axis_cross(
                self.debug_provider,
                pivot.position + aim,
                self.debug_cross_size,
                "cyan",
            )

        return AimResult(
            status=AimStatus.SOLVED,
            orientation=orientation,
            yaw_correction_deg=math.degrees(yaw),
            pitch_correction_deg=-math.degrees(pitch),
            aim_vector=aim,
        )
