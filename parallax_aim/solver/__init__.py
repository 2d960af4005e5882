"""Aim solver implementations."""

from .aim_solver import AimResult, AimSolver, AimStatus, boresight_miss_distance

__all__ = [
    "AimResult",
    "AimSolver",
    "AimStatus",
    "boresight_miss_distance",
]
