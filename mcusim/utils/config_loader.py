"""Helpers for loading and validating board profile configuration."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
import threading

import yaml  # type: ignore[import-untyped]

from mcusim.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class RegisterConfig:
    name: str
    address: int
    description: str = ""
    reset_value: int = 0


@dataclass(frozen=True)
class GpioConfig:
    ports: tuple[str, ...]
    pins_per_port: int

    @property
    def pin_count(self) -> int:
        return len(self.ports) * self.pins_per_port


@dataclass(frozen=True)
class TimerConfig:
    id: int
    period: int = 1000
    prescaler: int = 1


@dataclass(frozen=True)
class LcdConfig:
    width: int = 16
    height: int = 2
    backlight: bool = True


@dataclass(frozen=True)
class TemperatureConfig:
    initial: float = 25.0
    min: float = -40.0
    max: float = 125.0


@dataclass(frozen=True)
class ExecutionConfig:
    timeout: float = 2.0


@dataclass(frozen=True)
class ProfileConfig:
    name: str
    frequency: int
    registers: tuple[RegisterConfig, ...]
    gpio: GpioConfig
    timers: tuple[TimerConfig, ...]
    lcd: LcdConfig
    temperature: TemperatureConfig
    execution: ExecutionConfig


# Configuration cache with thread safety
_LOADER_CACHE: dict[str, ProfileConfig] = {}
_CACHE_LOCK = threading.RLock()


def _get_config_path(profile_name: str, path: Optional[str] = None) -> str:
    if path is None:
        # Bundled profiles live in mcusim/profiles/{profile_name}.yaml
        base = Path(__file__).parent.parent / "profiles" / f"{profile_name}.yaml"
        path = str(base)

    return path


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except Exception as exc:
        raise ConfigurationError(f"Failed to parse config: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError("Profile must be a YAML mapping")
    return raw


def _build_register_cfgs(registers_raw: list[dict[str, Any]]) -> tuple[RegisterConfig, ...]:
    return tuple(
        RegisterConfig(
            name=str(reg["name"]),
            address=int(reg["address"]),
            description=str(reg.get("description", "")),
            reset_value=int(reg.get("reset_value", 0)),
        )
        for reg in registers_raw
    )


def _build_gpio_cfg(gpio_raw: dict[str, Any]) -> GpioConfig:
    return GpioConfig(
        ports=tuple(str(p) for p in gpio_raw["ports"]),
        pins_per_port=int(gpio_raw.get("pins_per_port", 8)),
    )


def _build_timer_cfgs(timers_raw: list[dict[str, Any]]) -> tuple[TimerConfig, ...]:
    return tuple(
        TimerConfig(
            id=int(t["id"]),
            period=int(t.get("period", 1000)),
            prescaler=int(t.get("prescaler", 1)),
        )
        for t in timers_raw
    )


def _parse_profile_cfg_from_dict(raw: dict[str, Any]) -> ProfileConfig:
    try:
        lcd_raw = raw.get("lcd", {})
        temp_raw = raw.get("temperature", {})
        exec_raw = raw.get("execution", {})

        cfg = ProfileConfig(
            name=str(raw.get("name", "MCU")),
            frequency=int(raw["frequency"]),
            registers=_build_register_cfgs(raw["registers"]),
            gpio=_build_gpio_cfg(raw["gpio"]),
            timers=_build_timer_cfgs(raw.get("timers", [])),
            lcd=LcdConfig(
                width=int(lcd_raw.get("width", 16)),
                height=int(lcd_raw.get("height", 2)),
                backlight=bool(lcd_raw.get("backlight", True)),
            ),
            temperature=TemperatureConfig(
                initial=float(temp_raw.get("initial", 25.0)),
                min=float(temp_raw.get("min", -40.0)),
                max=float(temp_raw.get("max", 125.0)),
            ),
            execution=ExecutionConfig(timeout=float(exec_raw.get("timeout", 2.0))),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Missing required config key: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config schema: {exc}") from exc

    _validate_profile_config(cfg)
    return cfg


def _validate_profile_config(cfg: ProfileConfig) -> None:
    """Basic sanity checks to fail fast on bad profiles."""
    if cfg.frequency <= 0:
        raise ConfigurationError("frequency", "must be positive")

    seen: set[int] = set()
    for reg in cfg.registers:
        if not 0 <= reg.address <= 0xFF:
            raise ConfigurationError("registers", f"{reg.name} address 0x{reg.address:X} is not a byte")
        if reg.address in seen:
            raise ConfigurationError("registers", f"duplicate address 0x{reg.address:02X}")
        seen.add(reg.address)

    if not cfg.gpio.ports or cfg.gpio.pins_per_port <= 0:
        raise ConfigurationError("gpio", "needs at least one port with a positive pin count")

    if cfg.lcd.width <= 0 or cfg.lcd.height <= 0:
        raise ConfigurationError("lcd", "dimensions must be positive")

    temp = cfg.temperature
    if temp.min > temp.max:
        raise ConfigurationError("temperature", "min must not exceed max")
    if not temp.min <= temp.initial <= temp.max:
        raise ConfigurationError("temperature", "initial value outside [min, max]")

    if cfg.execution.timeout <= 0:
        raise ConfigurationError("execution.timeout", "must be positive")


def load_config(profile_name: str, path: Optional[str] = None) -> ProfileConfig:
    """Load and validate a board profile from a YAML file.

    Args:
        profile_name: Profile identifier (e.g., 'default') for config lookup.
        path: Optional path to YAML profile. If None, load bundled
            mcusim/profiles/{profile_name}.yaml.

    Returns:
        ProfileConfig instance

    Raises:
        ConfigurationError: on parse or validation errors
    """

    p = Path(_get_config_path(profile_name=profile_name, path=path))
    raw = _load_yaml_file(p)

    return _parse_profile_cfg_from_dict(raw=raw)


def get_config(profile_name: str) -> ProfileConfig:
    """Return the loaded profile, loading and caching if necessary.

    THREAD SAFETY: This function is thread-safe.
    """
    with _CACHE_LOCK:
        if profile_name not in _LOADER_CACHE:
            _LOADER_CACHE[profile_name] = load_config(profile_name=profile_name)
        return _LOADER_CACHE[profile_name]


def clear_config_cache() -> None:
    """Clear all cached profiles.

    All subsequent calls to get_config() will reload from disk.
    """
    with _CACHE_LOCK:
        _LOADER_CACHE.clear()
