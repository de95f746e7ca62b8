import sys
from pathlib import Path

import pytest


# Ensure the repository root is importable when running pytest from anywhere
THIS_DIR = Path(__file__).resolve().parent
ROOT_DIR = THIS_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

CONFIG_ENV_VARS = ("PORT", "TEMP_WARNING", "TEMP_CRITICAL", "SENSORS_COMMAND", "TIMEZONE")


def make_snapshot(cpu=None, nic=None):
    """Build a `sensors -j` style snapshot with optional CPU and NIC readings."""
    snapshot = {
        "acpitz-acpi-0": {
            "Adapter": "ACPI interface",
            "temp1": {"temp1_input": 27.8, "temp1_crit": 119.0},
        },
    }
    if cpu is not None:
        snapshot["coretemp-isa-0000"] = {
            "Adapter": "ISA adapter",
            "Package id 0": {"temp1_input": cpu, "temp1_max": 80.0, "temp1_crit": 100.0},
            "Core 0": {"temp2_input": 41.0},
        }
    if nic is not None:
        snapshot["mlx5-pci-0100"] = {
            "Adapter": "PCI adapter",
            "loc1": {"temp1_input": nic, "temp1_crit": 105.0},
        }
    return snapshot


@pytest.fixture()
def snapshot_factory():
    return make_snapshot


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture()
def config(clean_env):
    from config.settings import TemperatureCheckerConfig

    return TemperatureCheckerConfig()


@pytest.fixture()
def monitor_factory(config):
    from core.monitor import TemperatureMonitor

    def build(snapshot=None, error=None):
        def reader():
            if error is not None:
                raise error
            return snapshot

        return TemperatureMonitor(config, sensor_reader=reader)

    return build
