import datetime
import logging
import os
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from core.status import TemperatureThresholds

# Setup logging once for the whole process
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_PORT = 8888
DEFAULT_TEMP_WARNING = 70
DEFAULT_TEMP_CRITICAL = 80


class TemperatureCheckerConfig:
    """Class for managing the temperature checker configuration"""

    def __init__(self):
        # Server Configuration
        self.HOST = "0.0.0.0"
        self.PORT = self._read_int("PORT", DEFAULT_PORT)

        # Threshold Configuration (°C)
        warning = self._read_int("TEMP_WARNING", DEFAULT_TEMP_WARNING)
        critical = self._read_int("TEMP_CRITICAL", DEFAULT_TEMP_CRITICAL)
        self.THRESHOLDS = TemperatureThresholds(warning=warning, critical=critical)

        # Sensor Configuration
        self.SENSORS_COMMAND = os.getenv("SENSORS_COMMAND", "sensors")

        # Timezone for result timestamps
        self.TIMEZONE_NAME = os.getenv("TIMEZONE", "UTC")
        self.TIMEZONE = self._load_timezone(self.TIMEZONE_NAME)

        self.validate()

    def _read_int(self, name, default):
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw.strip())
        except ValueError:
            logger.error(f"FATAL: {name} must be an integer, got {raw!r}")
            sys.exit(1)

    def _load_timezone(self, name):
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.error(f"FATAL: unknown timezone {name!r}")
            sys.exit(1)

    def validate(self):
        """Validate the loaded configuration"""
        if self.THRESHOLDS.warning >= self.THRESHOLDS.critical:
            logger.warning(
                f"TEMP_WARNING ({self.THRESHOLDS.warning}) is not below "
                f"TEMP_CRITICAL ({self.THRESHOLDS.critical}); WARNING will never be reported"
            )

        logger.info(
            f"Config loaded - Port: {self.PORT}, Thresholds: "
            f"{self.THRESHOLDS.warning}°C/{self.THRESHOLDS.critical}°C, Sensors: {self.SENSORS_COMMAND}"
        )

    def get_current_time(self):
        """Get current time in the configured timezone"""
        return datetime.datetime.now(self.TIMEZONE)

    def format_time(self, dt=None):
        """Format time as ISO-8601 with UTC offset"""
        if dt is None:
            dt = self.get_current_time()
        return dt.isoformat(timespec="milliseconds")
