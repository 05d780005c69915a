"""
Pytest configuration and shared fixtures for the mcusim test suite.
"""

import copy
import sys
import tempfile
from pathlib import Path

import pytest

# Ensure project root is on PYTHONPATH so 'mcusim' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mcusim.core.controller import MCUSimulator  # noqa: E402
from mcusim.core.engine import PythonScriptEngine  # noqa: E402
from mcusim.core.state import MCUState  # noqa: E402
from mcusim.utils.config_loader import clear_config_cache, get_config  # noqa: E402


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


REGISTERS_CFG = [
    {"name": "PORTA", "address": 0x00, "description": "Port A data register"},
    {"name": "PORTB", "address": 0x01, "description": "Port B data register"},
    {"name": "DDRA", "address": 0x03, "description": "Port A direction", "reset_value": 0x0F},
]

PROFILE_CFG = {
    "name": "Test MCU",
    "frequency": 8_000_000,
    "registers": REGISTERS_CFG,
    "gpio": {"ports": ["A", "B"], "pins_per_port": 8},
    "timers": [{"id": 0, "period": 500, "prescaler": 8}],
    "lcd": {"width": 16, "height": 2, "backlight": False},
    "temperature": {"initial": 20.0, "min": -10.0, "max": 50.0},
    "execution": {"timeout": 1.5},
}


@pytest.fixture
def profile_dict():
    """A fresh, valid raw profile mapping (deep enough copy to mutate)."""
    return copy.deepcopy(PROFILE_CFG)


@pytest.fixture
def default_config():
    clear_config_cache()
    return get_config("default")


@pytest.fixture
def state(default_config):
    return MCUState(default_config)


@pytest.fixture
def simulator(default_config):
    """Default-profile simulator with a short script budget."""
    return MCUSimulator(config=default_config, runner=PythonScriptEngine(timeout=1.0))


class NotifyCounter:
    def __init__(self):
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def notify():
    return NotifyCounter()
