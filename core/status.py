from enum import Enum
from typing import Any, NamedTuple


class TempStatus(str, Enum):
    """Health status of one temperature check"""

    STARTING = "STARTING"  # reserved, never produced by a check
    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"


class TemperatureThresholds(NamedTuple):
    warning: int
    critical: int


STATUS_CODES = {
    TempStatus.OK: 200,
    TempStatus.WARNING: 418,
    TempStatus.CRITICAL: 503,
    TempStatus.ERROR: 500,
}

UNMAPPED_STATUS_CODE = 404


def reduce_temperature(cpu_temperature: float, nic_temperature: float) -> float:
    """Return the hotter of the two readings, CPU wins ties"""
    return cpu_temperature if cpu_temperature >= nic_temperature else nic_temperature


def classify(temperature: float, thresholds: TemperatureThresholds) -> TempStatus:
    """Map a reduced temperature onto a status.

    0 is the "no reading" sentinel and is checked before the thresholds,
    so a missing sensor is never reported as healthy.
    """
    if temperature == 0:
        return TempStatus.ERROR
    if temperature >= thresholds.critical:
        return TempStatus.CRITICAL
    if temperature >= thresholds.warning:
        return TempStatus.WARNING
    return TempStatus.OK


def status_to_code(status: Any) -> int:
    """HTTP status code for a status; unknown values fall back to 404"""
    try:
        return STATUS_CODES.get(status, UNMAPPED_STATUS_CODE)
    except TypeError:
        # unhashable input
        return UNMAPPED_STATUS_CODE
