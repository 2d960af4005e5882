import math

import numpy as np

from parallax_aim.app import (
    build_controller,
    build_target_provider,
    build_turret,
    main,
    run_simulation,
)
from parallax_aim.config import AimConfig
from parallax_aim.control.display_provider import NullDisplayProvider
from parallax_aim.control.target_provider import NoTargetProvider, OrbitTargetProvider


def test_build_turret_places_muzzle_from_config():
    turret = build_turret(AimConfig(pivot_x=1.0, muzzle_x=0.5, muzzle_y=-0.25, muzzle_z=1.5))
    np.testing.assert_allclose(
        turret.muzzle_pose().position, np.array([1.5, -0.25, 1.5]), atol=1e-12
    )


def test_build_turret_applies_initial_yaw():
    turret = build_turret(AimConfig(pivot_yaw=90.0))
    np.testing.assert_allclose(turret.pivot.forward(), np.array([1.0, 0.0, 0.0]), atol=1e-9)


def test_fixed_target_simulation_converges():
    cfg = AimConfig(ticks=3, display_provider="none")
    turret = build_turret(cfg)
    controller = build_controller(cfg, turret, build_target_provider(cfg))
    final = run_simulation(cfg, controller, NullDisplayProvider())
    assert final.status == "solved"
    assert final.miss_distance < 1e-2


def test_orbit_target_simulation_keeps_solving():
    cfg = AimConfig(ticks=30, target_provider="orbit", orbit_radius=12.0, orbit_height=1.5)
    turret = build_turret(cfg)
    provider = build_target_provider(cfg)
    assert isinstance(provider, OrbitTargetProvider)
    controller = build_controller(cfg, turret, provider)
    final = run_simulation(cfg, controller, NullDisplayProvider())
    assert final.status == "solved"
    assert final.miss_distance < 1e-2


def test_no_target_simulation_stays_idle():
    cfg = AimConfig(ticks=2, target_provider="none")
    turret = build_turret(cfg)
    provider = build_target_provider(cfg)
    assert isinstance(provider, NoTargetProvider)
    final = run_simulation(cfg, build_controller(cfg, turret, provider), NullDisplayProvider())
    assert final.status == "idle"
    assert math.isnan(final.miss_distance)


def test_main_runs_with_display_and_debug():
    assert main(["--ticks", "4", "--cli-output", "scroll", "--draw-debug", "--log-level", "debug"]) == 0


def test_main_runs_without_display():
    assert main(["--ticks", "2", "--display-provider", "none", "--no-aim-early"]) == 0
