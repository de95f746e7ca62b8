import json
import math
import logging
import subprocess
from typing import Any, Dict, Optional, Sequence

logger = logging.getLogger(__name__)

SENSORS_TIMEOUT = 5  # seconds

CPU_CHIP_MARKER = "coretemp"
CPU_MEASUREMENT = "Package id 0"
NIC_CHIP_MARKER = "pci"
NIC_MEASUREMENT = "loc1"
TEMPERATURE_FIELD = "temp1_input"

SensorSnapshot = Dict[str, Dict[str, Any]]


class AcquisitionError(Exception):
    """Raised when the sensors command cannot produce a usable snapshot"""


def _decode(output, errors: str = "strict") -> str:
    if isinstance(output, bytes):
        return output.decode("utf-8", errors=errors)
    return output


def acquire_sensor_snapshot(command: Sequence[str] = ("sensors", "-j"), timeout: float = SENSORS_TIMEOUT) -> SensorSnapshot:
    """Run the sensors command once and parse its JSON output.

    Any failure (missing binary, timeout, non-zero exit, malformed output)
    is raised as AcquisitionError. There is no retry.
    """
    try:
        completed = subprocess.run(
            list(command),
            capture_output=True,
            timeout=timeout,
            check=True,
        )
    except subprocess.TimeoutExpired as e:
        raise AcquisitionError(f"Failed to read sensors: timed out after {timeout}s") from e
    except subprocess.CalledProcessError as e:
        stderr = _decode(e.stderr or b"", errors="replace").strip()
        raise AcquisitionError(f"Failed to read sensors: exit code {e.returncode} {stderr}".rstrip()) from e
    except OSError as e:
        raise AcquisitionError(f"Failed to read sensors: {e}") from e

    try:
        snapshot = json.loads(_decode(completed.stdout))
    except (ValueError, RecursionError) as e:
        raise AcquisitionError(f"Failed to read sensors: invalid JSON output ({e})") from e

    if not isinstance(snapshot, dict):
        raise AcquisitionError(
            f"Failed to read sensors: expected a JSON object, got {type(snapshot).__name__}"
        )

    logger.debug(f"Sensors snapshot with {len(snapshot)} chips")
    return snapshot


def _read_field(chip: Any, measurement: str, field: str) -> Optional[float]:
    if not isinstance(chip, dict):
        return None
    data = chip.get(measurement)
    if not isinstance(data, dict):
        return None
    value = data.get(field)
    # bool is an int subclass but never a temperature
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    # value * 10 must stay finite for rounding
    if not math.isfinite(value * 10):
        return None
    return value


def _round_temperature(value: float) -> float:
    return round(value * 10) / 10


def _extract_temperature(snapshot: SensorSnapshot, chip_marker: str, measurement: str) -> float:
    if not isinstance(snapshot, dict):
        return 0
    for chip_name, chip in snapshot.items():
        if chip_marker not in str(chip_name):
            continue
        value = _read_field(chip, measurement, TEMPERATURE_FIELD)
        if value:
            return _round_temperature(value)
    return 0


def extract_cpu_temperature(snapshot: SensorSnapshot) -> float:
    """CPU package temperature from the first coretemp chip that reports it, or 0"""
    return _extract_temperature(snapshot, CPU_CHIP_MARKER, CPU_MEASUREMENT)


def extract_nic_temperature(snapshot: SensorSnapshot) -> float:
    """NIC temperature from the first PCI chip that reports it, or 0"""
    return _extract_temperature(snapshot, NIC_CHIP_MARKER, NIC_MEASUREMENT)
