"""Debug geometry sinks.

Purely observational: nothing drawn here feeds back into the solver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

_AXES = (
    np.array([0.0, 1.0, 0.0], dtype=np.float64),
    np.array([1.0, 0.0, 0.0], dtype=np.float64),
    np.array([0.0, 0.0, 1.0], dtype=np.float64),
)


@dataclass(frozen=True, slots=True)
class DebugLine:
    start: np.ndarray
    end: np.ndarray
    color: str


class DebugProvider:
    """Base interface for line-segment debug output."""

    def line(self, start: np.ndarray, end: np.ndarray, color: str) -> None:
        raise NotImplementedError

    def ray(self, origin: np.ndarray, direction: np.ndarray, color: str) -> None:
        origin = np.asarray(origin, dtype=np.float64).reshape(3)
        self.line(origin, origin + np.asarray(direction, dtype=np.float64).reshape(3), color)


class NullDebugProvider(DebugProvider):
    def line(self, start: np.ndarray, end: np.ndarray, color: str) -> None:  # noqa: ARG002
        return None


class RecordingDebugProvider(DebugProvider):
    """Keeps every emitted line; handy for tests and offline plotting."""

    def __init__(self):
        self.lines: list[DebugLine] = []

    def line(self, start: np.ndarray, end: np.ndarray, color: str) -> None:
        self.lines.append(
            DebugLine(
                start=np.asarray(start, dtype=np.float64).reshape(3).copy(),
                end=np.asarray(end, dtype=np.float64).reshape(3).copy(),
                color=color,
            )
        )

    def by_color(self, color: str) -> list[DebugLine]:
        return [ln for ln in self.lines if ln.color == color]

    def clear(self) -> None:
        self.lines.clear()


class LoggingDebugProvider(DebugProvider):
    def line(self, start: np.ndarray, end: np.ndarray, color: str) -> None:
        logger.debug(
            "[DEBUG] %s line (%.3f, %.3f, %.3f) -> (%.3f, %.3f, %.3f)",
            color,
            start[0],
            start[1],
            start[2],
            end[0],
            end[1],
            end[2],
        )


def draw_axis_cross(
    provider: DebugProvider, point: np.ndarray, size: float, color: str
) -> None:
    """Three axis-aligned segments of half-length ``size`` centred on point."""
    p = np.asarray(point, dtype=np.float64).reshape(3)
    for axis in _AXES:
        provider.line(p + axis * size, p - axis * size, color)
