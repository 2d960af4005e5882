import logging

import numpy as np

from parallax_aim.control.display_provider import AimFrame, TuiDisplayProvider, status_lines
from parallax_aim.control.pose import Pose, identity_pose


def _frame(target=None) -> AimFrame:
    return AimFrame(
        tick=3,
        pivot=identity_pose(),
        muzzle=Pose(position=np.array([1.0, 0.0, 0.0]), quaternion=np.array([1.0, 0.0, 0.0, 0.0])),
        target_world=target,
        status="solved",
        yaw_correction_deg=-5.74,
        pitch_correction_deg=0.0,
        miss_distance=0.0,
    )


def test_status_lines_include_status_and_target():
    lines = status_lines(_frame(np.array([0.0, 0.0, 10.0])))
    assert any("solved" in ln for ln in lines)
    assert any("10.000" in ln for ln in lines)


def test_status_lines_handle_missing_target():
    lines = status_lines(_frame())
    assert any("none" in ln for ln in lines)


def test_tui_scroll_mode_logs_one_line_per_update(caplog):
    provider = TuiDisplayProvider(cli_output="scroll")
    with caplog.at_level(logging.INFO, logger="parallax_aim.control.display_provider"):
        provider.update(_frame(np.array([0.0, 0.0, 10.0])))
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 1
    assert "tick=3" in messages[0]
    assert "status=solved" in messages[0]
