"""Quaternion utilities.

Axes: x right, y up, z forward. Quaternions are [w, x, y, z].
"""

from __future__ import annotations

import math

import numpy as np

IDENTITY_Q = np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)
WORLD_UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)
WORLD_FORWARD = np.array([0.0, 0.0, 1.0], dtype=np.float64)


def q_normalize(q: np.ndarray) -> np.ndarray:
    q = np.asarray(q, dtype=np.float64).reshape(4)
    n = float(np.linalg.norm(q))
    if n < 1e-12:
        return IDENTITY_Q.copy()
    return q / n


def q_conj(q: np.ndarray) -> np.ndarray:
    return np.array([q[0], -q[1], -q[2], -q[3]], dtype=np.float64)


def q_inverse(q: np.ndarray) -> np.ndarray:
    """Inverse of any non-zero quaternion (equals the conjugate for unit q)."""
    q = np.asarray(q, dtype=np.float64).reshape(4)
    n2 = float(np.dot(q, q))
    if n2 < 1e-24:
        raise ValueError("cannot invert a zero quaternion")
    return q_conj(q) / n2


def q_mul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a*b (apply b first, then a)."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ],
        dtype=np.float64,
    )


def q_rotate_vec(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by quaternion q: v' = q*(0,v)*q^{-1}."""
    q = q_normalize(q)
    vq = np.array([0.0, float(v[0]), float(v[1]), float(v[2])], dtype=np.float64)
    return q_mul(q_mul(q, vq), q_conj(q))[1:]


def axis_angle_to_q(axis: np.ndarray, angle_rad: float) -> np.ndarray:
    axis = np.asarray(axis, dtype=np.float64).reshape(3)
    n = float(np.linalg.norm(axis))
    if n < 1e-12:
        raise ValueError("rotation axis must be non-zero")
    axis = axis / n
    s = math.sin(angle_rad / 2.0)
    return q_normalize(
        np.array(
            [math.cos(angle_rad / 2.0), axis[0] * s, axis[1] * s, axis[2] * s],
            dtype=np.float64,
        )
    )


def euler_yaw_pitch_roll_to_q(
    yaw_deg: float, pitch_deg: float, roll_deg: float
) -> np.ndarray:
    """
    Euler angles in degrees:
      yaw around +y (positive turns forward toward +x / right)
      pitch around +x (positive turns forward toward -y / down)
      roll around +z
    Composition: q = q_yaw * q_pitch * q_roll
    """
    q_yaw = axis_angle_to_q(np.array([0.0, 1.0, 0.0]), math.radians(yaw_deg))
    q_pitch = axis_angle_to_q(np.array([1.0, 0.0, 0.0]), math.radians(pitch_deg))
    q_roll = axis_angle_to_q(np.array([0.0, 0.0, 1.0]), math.radians(roll_deg))
    return q_normalize(q_mul(q_mul(q_yaw, q_pitch), q_roll))


def rotmat_to_q(R: np.ndarray) -> np.ndarray:
    """Convert 3x3 rotation matrix to unit quaternion [w, x, y, z]."""
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"Expected 3x3 rotation matrix, got {R.shape}")

    trace = float(R[0, 0] + R[1, 1] + R[2, 2])
    if trace > 0.0:
        s = math.sqrt(trace + 1.0) * 2.0
        qw = 0.25 * s
        qx = (R[2, 1] - R[1, 2]) / s
        qy = (R[0, 2] - R[2, 0]) / s
        qz = (R[1, 0] - R[0, 1]) / s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = math.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2]) * 2.0
        qw = (R[2, 1] - R[1, 2]) / s
        qx = 0.25 * s
        qy = (R[0, 1] + R[1, 0]) / s
        qz = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = math.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2]) * 2.0
        qw = (R[0, 2] - R[2, 0]) / s
        qx = (R[0, 1] + R[1, 0]) / s
        qy = 0.25 * s
        qz = (R[1, 2] + R[2, 1]) / s
    else:
        s = math.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1]) * 2.0
        qw = (R[1, 0] - R[0, 1]) / s
        qx = (R[0, 2] + R[2, 0]) / s
        qy = (R[1, 2] + R[2, 1]) / s
        qz = 0.25 * s

    return q_normalize(np.array([qw, qx, qy, qz], dtype=np.float64))


def look_rotation(
    forward: np.ndarray, up: np.ndarray = WORLD_UP, eps: float = 1e-9
) -> np.ndarray:
    """Rotation whose local +z maps to ``forward`` with local +y kept toward ``up``.

    Raises ValueError when forward is near zero or parallel to up, since the
    orientation is undefined there.
    """
    f = np.asarray(forward, dtype=np.float64).reshape(3)
    u = np.asarray(up, dtype=np.float64).reshape(3)
    fn = float(np.linalg.norm(f))
    if fn < eps:
        raise ValueError("look_rotation needs a non-zero forward vector")
    z = f / fn
    x = np.cross(u, z)
    xn = float(np.linalg.norm(x))
    if xn < eps:
        raise ValueError("look_rotation forward vector is parallel to up")
    x = x / xn
    y = np.cross(z, x)
    return rotmat_to_q(np.column_stack([x, y, z]))


def q_angle_deg(a: np.ndarray, b: np.ndarray) -> float:
    """Smallest rotation angle between two orientations, in degrees."""
    d = abs(float(np.dot(q_normalize(a), q_normalize(b))))
    return math.degrees(2.0 * math.acos(min(1.0, d)))
