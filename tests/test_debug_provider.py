import logging

import numpy as np

from parallax_aim.control.debug_provider import (
    LoggingDebugProvider,
    NullDebugProvider,
    RecordingDebugProvider,
    draw_axis_cross,
)


def test_axis_cross_draws_three_centred_segments():
    debug = RecordingDebugProvider()
    point = np.array([1.0, 2.0, 3.0], dtype=np.float64)
    draw_axis_cross(debug, point, 2.0, "green")

    assert len(debug.lines) == 3
    for ln in debug.lines:
        np.testing.assert_allclose((ln.start + ln.end) / 2.0, point)
        assert abs(np.linalg.norm(ln.end - ln.start) - 4.0) < 1e-12
        assert ln.color == "green"


def test_ray_ends_at_origin_plus_direction():
    debug = RecordingDebugProvider()
    debug.ray(np.array([0.0, 1.0, 0.0]), np.array([0.0, 0.0, 5.0]), "magenta")
    np.testing.assert_allclose(debug.lines[0].end, np.array([0.0, 1.0, 5.0]))


def test_null_provider_accepts_lines():
    draw_axis_cross(NullDebugProvider(), np.zeros(3), 1.0, "cyan")


def test_logging_provider_logs_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="parallax_aim.control.debug_provider"):
        LoggingDebugProvider().line(np.zeros(3), np.ones(3), "cyan")
    assert any("cyan" in r.getMessage() for r in caplog.records)
