import datetime
import functools
import logging
import resource
from typing import Any, Callable, Dict, NamedTuple, Optional
from flask import Flask

from config.settings import TemperatureCheckerConfig
from core.sensors import (
    AcquisitionError,
    acquire_sensor_snapshot,
    extract_cpu_temperature,
    extract_nic_temperature,
)
from core.status import TempStatus, classify, reduce_temperature, status_to_code
from web.routes import WebRoutes

logger = logging.getLogger(__name__)


class TemperatureResult(NamedTuple):
    temperature: float
    status: TempStatus
    timestamp: datetime.datetime


class TemperatureMonitor:
    """On-demand temperature checker: every evaluate() reads the sensors fresh"""

    def __init__(self, config=None, sensor_reader: Optional[Callable[[], Dict[str, Any]]] = None):
        self.config = config or TemperatureCheckerConfig()
        self.thresholds = self.config.THRESHOLDS

        if sensor_reader is None:
            sensor_reader = functools.partial(acquire_sensor_snapshot, (self.config.SENSORS_COMMAND, "-j"))
        self.sensor_reader = sensor_reader

    def evaluate(self) -> TemperatureResult:
        """Read sensors, reduce and classify. Never raises; failures become ERROR."""
        try:
            snapshot = self.sensor_reader()
        except AcquisitionError as e:
            logger.error(f"Failed to get temperature: {e}")
            return TemperatureResult(0, TempStatus.ERROR, self.config.get_current_time())

        cpu_temperature = extract_cpu_temperature(snapshot)
        nic_temperature = extract_nic_temperature(snapshot)
        temperature = reduce_temperature(cpu_temperature, nic_temperature)
        status = classify(temperature, self.thresholds)

        if status == TempStatus.ERROR:
            logger.warning("Sensors returned no coretemp or PCI temperature")
        else:
            logger.info(f"Temperature {temperature:.1f}°C (CPU {cpu_temperature:.1f}°C, NIC {nic_temperature:.1f}°C) -> {status.value}")

        return TemperatureResult(temperature, status, self.config.get_current_time())

    def get_status_code(self, status: Any) -> int:
        return status_to_code(status)

    def temperature_thresholds(self) -> Dict[str, int]:
        """Copy of the active thresholds"""
        return {"warning": self.thresholds.warning, "critical": self.thresholds.critical}

    def create_flask_app(self):
        """Create and configure the Flask application"""
        app = Flask(__name__)
        app.json.ensure_ascii = False
        app.json.sort_keys = False

        web_routes = WebRoutes(self.config, self)
        web_routes.register_routes(app)

        return app

    def _log_startup(self):
        port = self.config.PORT
        logger.info(f"Temperature checker started on port {port}")
        logger.info("Mode: On-demand checking (no background monitoring)")
        logger.info("Endpoints:")
        for path in ("/health", "/temperature/simple", "/temperature", "/api"):
            logger.info(f"   http://localhost:{port}{path}")
        logger.info(
            f"Thresholds: warning {self.thresholds.warning}°C, critical {self.thresholds.critical}°C"
        )
        logger.info("Ready for Uptime Kuma monitoring every 60 seconds")
        # ru_maxrss is reported in kilobytes on Linux
        rss_mb = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss / 1024
        logger.info(f"Memory usage: {round(rss_mb)}MB")

    def run(self):
        """Run the HTTP server until interrupted"""
        app = self.create_flask_app()
        self._log_startup()
        try:
            app.run(host=self.config.HOST, port=self.config.PORT, threaded=True)
        except KeyboardInterrupt:
            logger.info("Shutting down...")
