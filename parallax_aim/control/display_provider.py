"""Display providers for rendering runtime aim state."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..math3d.coords import vec_to_yaw_pitch_deg
from .pose import Pose

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AimFrame:
    """Per-tick state shared by all display providers."""

    tick: int
    pivot: Pose
    muzzle: Pose
    target_world: Optional[np.ndarray]
    status: str
    yaw_correction_deg: float
    pitch_correction_deg: float
    miss_distance: float


class DisplayProvider:
    """Base display provider interface."""

    def update(self, frame: AimFrame) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class NullDisplayProvider(DisplayProvider):
    def update(self, frame: AimFrame) -> None:  # noqa: ARG002
        pass


def _fmt_vec(v: Optional[np.ndarray]) -> str:
    if v is None:
        return "(   none   )"
    return f"({v[0]: .3f}, {v[1]: .3f}, {v[2]: .3f})"


def status_lines(frame: AimFrame) -> list[str]:
    yaw, pitch = vec_to_yaw_pitch_deg(frame.muzzle.forward())
    q = frame.pivot.quaternion
    return [
        f"tick            = {frame.tick}",
        f"status          = {frame.status}",
        f"pivot xyz       = {_fmt_vec(frame.pivot.position)}",
        f"muzzle xyz      = {_fmt_vec(frame.muzzle.position)}",
        f"target xyz      = {_fmt_vec(frame.target_world)}",
        f"muzzle yaw/pitch= ({yaw: .2f}, {pitch: .2f}) deg",
        (
            f"correction      = yaw {frame.yaw_correction_deg: .3f} deg, "
            f"pitch {frame.pitch_correction_deg: .3f} deg"
        ),
        f"miss distance   = {frame.miss_distance:.4f}",
        f"q=[w,x,y,z]     = [{q[0]: .4f}, {q[1]: .4f}, {q[2]: .4f}, {q[3]: .4f}]",
    ]


class _CliStatsSink:
    def __init__(self, mode: str):
        self.mode = "live" if mode == "live" else "scroll"
        self._is_tty = bool(getattr(sys.stderr, "isatty", lambda: False)())
        self._live_enabled = self.mode == "live" and self._is_tty
        self._line_count = 0

    def emit(self, lines: list[str], scroll_line: str) -> None:
        if not self._live_enabled:
            logger.info(scroll_line)
            return

        out = sys.stderr
        if self._line_count > 0:
            out.write(f"\x1b[{self._line_count}F")

        max_lines = max(self._line_count, len(lines))
        for i in range(max_lines):
            line = lines[i] if i < len(lines) else ""
            out.write("\x1b[2K")
            out.write(line)
            out.write("\n")
        out.flush()
        self._line_count = len(lines)


class TuiDisplayProvider(DisplayProvider):
    """Terminal status panel (live on a TTY, scrolling log lines otherwise)."""

    def __init__(self, cli_output: str = "live"):
        self.cli_sink = _CliStatsSink(cli_output)

    def update(self, frame: AimFrame) -> None:
        yaw, pitch = vec_to_yaw_pitch_deg(frame.muzzle.forward())
        self.cli_sink.emit(
            lines=["parallax-aim live turret", *status_lines(frame)],
            scroll_line=(
                "[AIM] tick=%d status=%s muzzle_yaw_pitch=(%.2f, %.2f) "
                "correction=(%.3f, %.3f) miss=%.4f"
                % (
                    frame.tick,
                    frame.status,
                    yaw,
                    pitch,
                    frame.yaw_correction_deg,
                    frame.pitch_correction_deg,
                    frame.miss_distance,
                )
            ),
        )
