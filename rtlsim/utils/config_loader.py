"""Helpers for loading and validating YAML testbench files.

A testbench names a registered module and lists the stimulus for each
cycle, optionally with the outputs expected after that cycle::

    module: registered_adder
    params: {s: 0}
    clock: true
    cycles:
      - inputs: {x: 1, y: 0}
        expect: {out: 1}
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
import threading

import yaml  # type: ignore[import-untyped]

from rtlsim.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class CycleConfig:
    inputs: dict[str, Any]
    expect: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TestbenchConfig:
    __test__ = False  # not a pytest test class

    module: str
    cycles: tuple[CycleConfig, ...]
    params: dict[str, Any] = field(default_factory=dict)
    clock: bool = True
    name: Optional[str] = None


# Configuration cache with thread safety
_LOADER_CACHE: dict[str, TestbenchConfig] = {}
_CACHE_LOCK = threading.RLock()


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except Exception as exc:
        raise ConfigurationError(f"Failed to parse testbench: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError("testbench file must contain a mapping")
    return raw


def _freeze(value: Any) -> Any:
    """YAML sequences become tuples so they compare equal to bus samples."""
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _build_port_map(raw: Any, key: str) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(key, "must be a mapping of port name to value")
    for port in raw:
        if not isinstance(port, str):
            raise ConfigurationError(key, f"port names must be strings, got {port!r}")
    return {port: _freeze(value) for port, value in raw.items()}


def _build_cycle_cfg(raw: Any, index: int) -> CycleConfig:
    key = f"cycles[{index}]"
    if not isinstance(raw, dict):
        raise ConfigurationError(key, "each cycle must be a mapping")
    unknown = set(raw) - {"inputs", "expect"}
    if unknown:
        raise ConfigurationError(key, f"unknown keys: {sorted(unknown)}")
    return CycleConfig(
        inputs=_build_port_map(raw.get("inputs"), f"{key}.inputs"),
        expect=_build_port_map(raw.get("expect"), f"{key}.expect"),
    )


def _parse_testbench_cfg_from_dict(raw: dict[str, Any]) -> TestbenchConfig:
    try:
        module = raw["module"]
        cycles_raw = raw["cycles"]
    except KeyError as exc:
        raise ConfigurationError(f"Missing required config key: {exc}") from exc

    if not isinstance(module, str) or not module:
        raise ConfigurationError("module", "must be a non-empty string")
    if not isinstance(cycles_raw, list) or not cycles_raw:
        raise ConfigurationError("cycles", "must be a non-empty list")

    clock = raw.get("clock", True)
    if not isinstance(clock, bool):
        raise ConfigurationError("clock", "must be true or false")

    params = raw.get("params") or {}
    if not isinstance(params, dict):
        raise ConfigurationError("params", "must be a mapping")

    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        raise ConfigurationError("name", "must be a string")

    return TestbenchConfig(
        module=module,
        cycles=tuple(_build_cycle_cfg(cycle, i) for i, cycle in enumerate(cycles_raw)),
        params=dict(params),
        clock=clock,
        name=name,
    )


def load_testbench(path: Union[str, Path]) -> TestbenchConfig:
    """Load and validate a testbench from a YAML file.

    Args:
        path: Path to the YAML testbench

    Returns:
        TestbenchConfig instance

    Raises:
        ConfigurationError: on parse or validation errors
    """
    raw = _load_yaml_file(Path(path))
    return _parse_testbench_cfg_from_dict(raw=raw)


def get_testbench(path: Union[str, Path]) -> TestbenchConfig:
    """Return the parsed testbench at path, loading and caching if necessary.

    THREAD SAFETY: This function is thread-safe.
    """
    key = str(Path(path).resolve())
    with _CACHE_LOCK:
        if key not in _LOADER_CACHE:
            _LOADER_CACHE[key] = load_testbench(path)
        return _LOADER_CACHE[key]


def clear_config_cache() -> None:
    """Clear all cached testbenches.

    All subsequent calls to get_testbench() will reload from disk.
    """
    with _CACHE_LOCK:
        _LOADER_CACHE.clear()
