"""CLI config and defaults."""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class AimConfig:
    pivot_x: float = 0.0
    pivot_y: float = 0.0
    pivot_z: float = 0.0
    pivot_yaw: float = 0.0
    pivot_pitch: float = 0.0
    muzzle_x: float = 0.5
    muzzle_y: float = -0.25
    muzzle_z: float = 1.5
    mount_yaw: float = 0.0
    mount_pitch: float = 0.0
    mount_roll: float = 0.0
    target_provider: str = "fixed"
    target_x: float = 0.0
    target_y: float = 0.0
    target_z: float = 20.0
    orbit_radius: float = 20.0
    orbit_height: float = 0.0
    orbit_speed_deg: float = 30.0
    ticks: int = 120
    tick_hz: float = 60.0
    aim_on_early: bool = True
    aim_on_late: bool = True
    draw_debug: bool = False
    debug_ray_length: float = 200.0
    display_provider: str = "tui"
    display_hz: float = 5.0
    cli_output: str = "live"
    log_level: str = "info"


_AIM_CONFIG_FIELDS = {f.name for f in fields(AimConfig)}
_BOOL_FIELDS = {"aim_on_early", "aim_on_late", "draw_debug"}
_INT_FIELDS = {"ticks"}
_STRING_FIELDS = {"target_provider", "display_provider", "cli_output", "log_level"}
_FLOAT_FIELDS = _AIM_CONFIG_FIELDS - _BOOL_FIELDS - _INT_FIELDS - _STRING_FIELDS
_KEY_ALIASES = {
    "no_aim_early": "aim_on_early",
    "no_aim_late": "aim_on_late",
}
_NEGATED_KEYS = {"aim_on_early": "no_aim_early", "aim_on_late": "no_aim_late"}

TARGET_PROVIDERS = ("fixed", "orbit", "none")
DISPLAY_PROVIDERS = ("tui", "none")
CLI_OUTPUTS = ("live", "scroll")
LOG_LEVELS = ("debug", "info", "warning", "error")


def _parse_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in {"1", "true", "yes", "on"}:
            return True
        if s in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"config key '{key}' expects a bool, got {value!r}")


def _coerce_config_value(key: str, value: Any) -> Any:
    try:
        if key in _BOOL_FIELDS:
            return _parse_bool(value, key)
        if key in _INT_FIELDS:
            if isinstance(value, bool):
                raise TypeError("bool is not an int")
            return int(value)
        if key in _FLOAT_FIELDS:
            return float(value)
        if key in _STRING_FIELDS:
            return "" if value is None else str(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid value for config key '{key}': {value!r}") from exc
    raise ValueError(f"unsupported config key '{key}'")


def _normalize_config_key(raw_key: Any) -> str:
    if not isinstance(raw_key, str):
        raise ValueError(f"config key must be string, got {type(raw_key).__name__}")
    key = raw_key.strip().replace("-", "_")
    if not key:
        raise ValueError("config key cannot be empty")
    return _KEY_ALIASES.get(key, key)


def load_yaml_config(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ValueError(f"--config file not found: {p}")
    if not p.is_file():
        raise ValueError(f"--config must point to a file: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"failed to read --config file {p}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse YAML config {p}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"--config root must be a mapping/object, got {type(loaded).__name__}")

    normalized: dict[str, Any] = {}
    for raw_key, raw_value in loaded.items():
        key = _normalize_config_key(raw_key)
        if key not in _AIM_CONFIG_FIELDS:
            raise ValueError(f"unknown config key in {p}: {raw_key!r}")
        value = _coerce_config_value(key, raw_value)
        # "no-aim-early: true" means aim_on_early is false.
        if raw_key.strip().replace("-", "_") in _KEY_ALIASES:
            value = not value
        normalized[key] = value
    return normalized


def _yaml_defaults_to_argparse_defaults(cfg: dict[str, Any]) -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for key, value in cfg.items():
        if key in _NEGATED_KEYS:
            defaults[_NEGATED_KEYS[key]] = not bool(value)
        else:
            defaults[key] = value
    return defaults


def build_arg_parser() -> argparse.ArgumentParser:
    d = AimConfig()
    ap = argparse.ArgumentParser(
        prog="parallax-aim",
        description="Simulate a turret whose offset muzzle converges on a target.",
    )
    ap.add_argument(
        "--config",
        type=str,
        default="",
        help="YAML config file path. CLI args override YAML values.",
    )

    ap.add_argument("--pivot-x", type=float, default=d.pivot_x, help="Pivot world x.")
    ap.add_argument("--pivot-y", type=float, default=d.pivot_y, help="Pivot world y.")
    ap.add_argument("--pivot-z", type=float, default=d.pivot_z, help="Pivot world z.")
    ap.add_argument(
        "--pivot-yaw",
        type=float,
        default=d.pivot_yaw,
        help="Initial pivot yaw in degrees (+ turns right).",
    )
    ap.add_argument(
        "--pivot-pitch",
        type=float,
        default=d.pivot_pitch,
        help="Initial pivot pitch in degrees (+ turns up).",
    )

    ap.add_argument(
        "--muzzle-x",
        type=float,
        default=d.muzzle_x,
        help="Muzzle offset right of the pivot (pivot-local).",
    )
    ap.add_argument(
        "--muzzle-y",
        type=float,
        default=d.muzzle_y,
        help="Muzzle offset above the pivot (pivot-local).",
    )
    ap.add_argument(
        "--muzzle-z",
        type=float,
        default=d.muzzle_z,
        help="Muzzle offset ahead of the pivot (pivot-local).",
    )
    ap.add_argument("--mount-yaw", type=float, default=d.mount_yaw, help="Muzzle yaw vs pivot (deg).")
    ap.add_argument(
        "--mount-pitch", type=float, default=d.mount_pitch, help="Muzzle pitch vs pivot (deg, + up)."
    )
    ap.add_argument("--mount-roll", type=float, default=d.mount_roll, help="Muzzle roll vs pivot (deg).")

    ap.add_argument(
        "--target-provider",
        choices=list(TARGET_PROVIDERS),
        default=d.target_provider,
        help="Target strategy: fixed world xyz, orbit around the pivot, or no target.",
    )
    ap.add_argument("--target-x", type=float, default=d.target_x, help="Fixed target world x.")
    ap.add_argument("--target-y", type=float, default=d.target_y, help="Fixed target world y.")
    ap.add_argument("--target-z", type=float, default=d.target_z, help="Fixed target world z.")
    ap.add_argument(
        "--orbit-radius",
        type=float,
        default=d.orbit_radius,
        help="Orbit target radius around the pivot.",
    )
    ap.add_argument(
        "--orbit-height",
        type=float,
        default=d.orbit_height,
        help="Orbit target height relative to the pivot.",
    )
    ap.add_argument(
        "--orbit-speed-deg",
        type=float,
        default=d.orbit_speed_deg,
        help="Orbit angular speed in degrees per second.",
    )

    ap.add_argument("--ticks", type=int, default=d.ticks, help="Number of simulated ticks.")
    ap.add_argument("--tick-hz", type=float, default=d.tick_hz, help="Simulated tick rate in Hz.")
    ap.add_argument(
        "--no-aim-early",
        action="store_true",
        help="Skip the early aim pass of each tick.",
    )
    ap.add_argument(
        "--no-aim-late",
        action="store_true",
        help="Skip the late aim pass of each tick.",
    )
    ap.add_argument(
        "--draw-debug",
        action="store_true",
        help="Emit debug geometry (aim crosses, muzzle ray) at DEBUG log level.",
    )
    ap.add_argument(
        "--debug-ray-length",
        type=float,
        default=d.debug_ray_length,
        help="Length of the muzzle debug ray.",
    )

    ap.add_argument(
        "--display-provider",
        choices=list(DISPLAY_PROVIDERS),
        default=d.display_provider,
        help="Display provider: terminal TUI or none.",
    )
    ap.add_argument(
        "--display-hz",
        type=float,
        default=d.display_hz,
        help="Display refresh rate in simulated Hz (0 disables display updates).",
    )
    ap.add_argument(
        "--cli-output",
        choices=list(CLI_OUTPUTS),
        default=d.cli_output,
        help="TUI output mode: in-place live panel or scrolling logs.",
    )
    ap.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default=d.log_level,
        help="Global log level.",
    )
    return ap


def validate_config(cfg: AimConfig) -> None:
    for name in sorted(_FLOAT_FIELDS):
        if not math.isfinite(float(getattr(cfg, name))):
            raise ValueError(f"--{name.replace('_', '-')} must be a finite number")
    if cfg.ticks < 0:
        raise ValueError(f"--ticks must be >= 0, got {cfg.ticks}")
    if cfg.tick_hz <= 0.0:
        raise ValueError(f"--tick-hz must be > 0, got {cfg.tick_hz}")
    if cfg.orbit_radius < 0.0:
        raise ValueError(f"--orbit-radius must be >= 0, got {cfg.orbit_radius}")
    if cfg.debug_ray_length <= 0.0:
        raise ValueError(f"--debug-ray-length must be > 0, got {cfg.debug_ray_length}")
    if cfg.display_hz < 0.0:
        raise ValueError(f"--display-hz must be >= 0, got {cfg.display_hz}")
    if not -90.0 < cfg.pivot_pitch < 90.0:
        raise ValueError(f"--pivot-pitch must be in (-90,90), got {cfg.pivot_pitch}")
    if cfg.target_provider not in TARGET_PROVIDERS:
        raise ValueError(
            f"--target-provider must be one of fixed|orbit|none, got {cfg.target_provider}"
        )
    if cfg.display_provider not in DISPLAY_PROVIDERS:
        raise ValueError(
            f"--display-provider must be one of tui|none, got {cfg.display_provider}"
        )
    if cfg.cli_output not in CLI_OUTPUTS:
        raise ValueError(f"--cli-output must be live|scroll, got {cfg.cli_output}")
    if cfg.log_level not in LOG_LEVELS:
        raise ValueError(
            f"--log-level must be one of debug|info|warning|error, got {cfg.log_level}"
        )


def parse_args(argv=None) -> AimConfig:
    bootstrap = argparse.ArgumentParser(add_help=False)
    bootstrap.add_argument("--config", type=str, default="")
    bootstrap_ns, _ = bootstrap.parse_known_args(argv)

    yaml_cfg: dict[str, Any] = {}
    yaml_error: Optional[str] = None
    if bootstrap_ns.config:
        try:
            yaml_cfg = load_yaml_config(bootstrap_ns.config)
        except ValueError as exc:
            yaml_error = str(exc)

    ap = build_arg_parser()
    if yaml_error is not None:
        ap.error(yaml_error)
    if yaml_cfg:
        ap.set_defaults(**_yaml_defaults_to_argparse_defaults(yaml_cfg))
    args = ap.parse_args(argv)

    values = {
        name: getattr(args, name)
        for name in _AIM_CONFIG_FIELDS
        if name not in _NEGATED_KEYS
    }
    cfg = AimConfig(
        aim_on_early=not args.no_aim_early,
        aim_on_late=not args.no_aim_late,
        **values,
    )
    try:
        validate_config(cfg)
    except ValueError as exc:
        ap.error(str(exc))
    return cfg
