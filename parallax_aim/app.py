"""
Parallax aim demo:
- Turret = pivot pose + rigid muzzle mount (explicit, no scene graph)
- Target provider (fixed/orbit/none)
- AimController runs the early and late aim passes each simulated tick
- Display provider (tui/none) renders pivot/muzzle/target state
- Summary: final muzzle yaw/pitch and boresight miss distance

Deps:
  pip install numpy pyyaml
"""

from __future__ import annotations

import logging

import numpy as np

from .config import AimConfig, parse_args
from .control.controller import AimController
from .control.debug_provider import LoggingDebugProvider
from .control.display_provider import AimFrame, NullDisplayProvider, TuiDisplayProvider
from .control.mount import MuzzleMount, Turret
from .control.pose import Pose
from .control.target_provider import (
    FixedTargetProvider,
    NoTargetProvider,
    OrbitTargetProvider,
)
from .math3d.coords import vec_to_yaw_pitch_deg, yaw_pitch_to_vec
from .math3d.quaternion import euler_yaw_pitch_roll_to_q, look_rotation
from .solver.aim_solver import boresight_miss_distance

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_turret(cfg: AimConfig) -> Turret:
    pivot = Pose(
        position=np.array([cfg.pivot_x, cfg.pivot_y, cfg.pivot_z], dtype=np.float64),
        quaternion=look_rotation(yaw_pitch_to_vec(cfg.pivot_yaw, cfg.pivot_pitch)),
    )
    # Euler pitch is positive downward; the CLI uses positive up.
    mount = MuzzleMount(
        local_position=np.array([cfg.muzzle_x, cfg.muzzle_y, cfg.muzzle_z], dtype=np.float64),
        local_rotation=euler_yaw_pitch_roll_to_q(cfg.mount_yaw, -cfg.mount_pitch, cfg.mount_roll),
    )
    logger.info(
        "[SCENE] pivot=(%.3f, %.3f, %.3f) muzzle offset=(%.3f, %.3f, %.3f) "
        "mount ypr=(%.1f, %.1f, %.1f)",
        cfg.pivot_x,
        cfg.pivot_y,
        cfg.pivot_z,
        cfg.muzzle_x,
        cfg.muzzle_y,
        cfg.muzzle_z,
        cfg.mount_yaw,
        cfg.mount_pitch,
        cfg.mount_roll,
    )
    return Turret(pivot=pivot, mount=mount)


def build_target_provider(cfg: AimConfig):
    if cfg.target_provider == "fixed":
        provider = FixedTargetProvider(
            np.array([cfg.target_x, cfg.target_y, cfg.target_z], dtype=np.float64)
        )
    elif cfg.target_provider == "orbit":
        provider = OrbitTargetProvider(
            center=np.array([cfg.pivot_x, cfg.pivot_y, cfg.pivot_z], dtype=np.float64),
            radius=cfg.orbit_radius,
            speed_deg_per_s=cfg.orbit_speed_deg,
            height=cfg.orbit_height,
        )
    elif cfg.target_provider == "none":
        provider = NoTargetProvider()
    else:
        raise RuntimeError(f"Unsupported target provider: {cfg.target_provider}")

    logger.info("[SCENE] target provider=%s", cfg.target_provider)
    return provider


def build_display_provider(cfg: AimConfig):
    if cfg.display_provider == "tui":
        return TuiDisplayProvider(cli_output=cfg.cli_output)
    if cfg.display_provider == "none":
        return NullDisplayProvider()
    raise RuntimeError(f"Unsupported display provider: {cfg.display_provider}")


def build_controller(cfg: AimConfig, turret: Turret, target_provider) -> AimController:
    return AimController(
        turret=turret,
        target_provider=target_provider,
        debug_provider=LoggingDebugProvider() if cfg.draw_debug else None,
        aim_on_early=cfg.aim_on_early,
        aim_on_late=cfg.aim_on_late,
        draw_debug=cfg.draw_debug,
        debug_ray_length=cfg.debug_ray_length,
    )


def make_frame(tick: int, controller: AimController) -> AimFrame:
    turret = controller.turret
    muzzle = turret.muzzle_pose()
    target = controller.target_provider.get_target_world()
    result = controller.last_result
    return AimFrame(
        tick=tick,
        pivot=turret.pivot,
        muzzle=muzzle,
        target_world=target,
        status="idle" if result is None else result.status.value,
        yaw_correction_deg=0.0 if result is None else result.yaw_correction_deg,
        pitch_correction_deg=0.0 if result is None else result.pitch_correction_deg,
        miss_distance=(
            float("nan") if target is None else boresight_miss_distance(muzzle, target)
        ),
    )


def run_simulation(cfg: AimConfig, controller: AimController, display) -> AimFrame:
    dt = 1.0 / cfg.tick_hz
    display_interval = (1.0 / cfg.display_hz) if cfg.display_hz > 0.0 else 0.0
    last_display_t = -float("inf")

    for tick in range(cfg.ticks):
        controller.early_tick()
        controller.target_provider.step(dt)
        controller.late_tick()

        now = tick * dt
        if display_interval > 0.0 and (now - last_display_t) >= display_interval:
            display.update(make_frame(tick, controller))
            last_display_t = now

    return make_frame(cfg.ticks, controller)


def main(argv=None) -> int:
    cfg = parse_args(argv)
    configure_logging(cfg.log_level)

    turret = build_turret(cfg)
    target_provider = build_target_provider(cfg)
    controller = build_controller(cfg, turret, target_provider)
    display = build_display_provider(cfg)

    try:
        final = run_simulation(cfg, controller, display)
    finally:
        display.close()

    yaw, pitch = vec_to_yaw_pitch_deg(final.muzzle.forward())
    logger.info(
        "[AIM] done ticks=%d status=%s muzzle yaw/pitch=(%.3f, %.3f) deg miss=%.5f",
        cfg.ticks,
        final.status,
        yaw,
        pitch,
        final.miss_distance,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
