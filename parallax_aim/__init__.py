"""Parallax-corrected aiming for pivots with an offset muzzle."""

from .control.mount import MuzzleMount, Turret
from .control.pose import Pose, identity_pose
from .solver.aim_solver import AimResult, AimSolver, AimStatus

__all__ = [
    "AimResult",
    "AimSolver",
    "AimStatus",
    "MuzzleMount",
    "Pose",
    "Turret",
    "identity_pose",
]
