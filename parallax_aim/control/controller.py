"""Control plane for applying aim corrections to a turret."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..solver.aim_solver import AimResult, AimSolver, AimStatus
from .debug_provider import DebugProvider
from .mount import Turret
from .target_provider import NoTargetProvider, TargetProvider

logger = logging.getLogger(__name__)


class AimController:
    """Drives an ``AimSolver`` for one turret.

    ``early_tick`` and ``late_tick`` are two optional trigger points per
    frame; each can be switched off independently. Calls must be serialized
    per controller since the turret pivot is written in place.
    """

    def __init__(
        self,
        turret: Turret,
        target_provider: TargetProvider | None = None,
        solver: AimSolver | None = None,
        debug_provider: DebugProvider | None = None,
        aim_on_early: bool = True,
        aim_on_late: bool = True,
        draw_debug: bool = False,
        debug_ray_length: float = 200.0,
    ):
        self.turret = turret
        self.target_provider = target_provider or NoTargetProvider()
        self.debug_provider = debug_provider
        if solver is None:
            solver = AimSolver(debug_provider=debug_provider if draw_debug else None)
        self.solver = solver
        self.aim_on_early = aim_on_early
        self.aim_on_late = aim_on_late
        self.draw_debug = draw_debug
        self.debug_ray_length = float(debug_ray_length)

        self.enabled = True
        self.last_result: Optional[AimResult] = None

    def enable(self) -> None:
        """Re-arm after the turret has been reconfigured."""
        self.enabled = True
        self.last_result = None

    def aim(self, target: np.ndarray) -> AimResult:
        if not self.enabled:
            if self.last_result is None or self.last_result.status is not AimStatus.CONFIG_ERROR:
                self.last_result = AimResult(
                    status=AimStatus.CONFIG_ERROR,
                    reason="aim correction is disabled",
                )
            return self.last_result

        result = self.solver.solve(
            self.turret.pivot,
            self.turret.muzzle_pose(),
            target,
        )
        if result.status is AimStatus.CONFIG_ERROR:
            self.enabled = False
            logger.error("[AIM] %s, disabling aim correction", result.reason)
        elif result.ok:
            self.turret.set_orientation(result.orientation)
        self.last_result = result
        return result

    def aim_at_target(self) -> Optional[AimResult]:
        target = self.target_provider.get_target_world()
        if target is None:
            return None
        return self.aim(target)

    def early_tick(self) -> Optional[AimResult]:
        result = self.aim_at_target() if self.aim_on_early else None
        if self.draw_debug and self.debug_provider is not None:
            muzzle = self.turret.muzzle_pose()
            if muzzle is not None:
                self.debug_provider.ray(
                    muzzle.position,
                    muzzle.forward() * self.debug_ray_length,
                    "magenta",
                )
        return result

    def late_tick(self) -> Optional[AimResult]:
        if not self.aim_on_late:
            return None
        return self.aim_at_target()
