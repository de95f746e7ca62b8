from flask import request, jsonify, Response
from werkzeug.exceptions import HTTPException
import platform
import socket
import logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "Proxmox Temperature Checker"
SERVICE_VERSION = "1.0.0"
IMPLEMENTATION = "Python On-Demand"
SERVER_HEADER = "Proxmox-TempChecker-PY/1.0"
TEMPERATURE_UNIT = "°C"

AVAILABLE_ENDPOINTS = ['/health', '/temperature', '/temperature/simple', '/api']


class WebRoutes:
    """Class for registering all HTTP routes of the temperature checker"""

    def __init__(self, config, monitor_instance):
        self.config = config
        self.monitor = monitor_instance

    def register_routes(self, app):
        """Register all routes to the Flask app"""

        # === Request hooks ===
        @app.before_request
        def log_request():
            logger.info(f"{request.method} {request.path}")

        @app.after_request
        def add_server_headers(response):
            response.headers['Server'] = SERVER_HEADER
            response.headers['X-Powered-By'] = IMPLEMENTATION
            return response

        # === Health Routes ===
        @app.route('/health')
        def health():
            return Response('Temperature Checker OK - Ready for requests', status=200, mimetype='text/plain')

        # === Temperature Routes ===
        @app.route('/temperature')
        def temperature():
            result = self.monitor.evaluate()
            status_code = self.monitor.get_status_code(result.status)

            response = {
                "temperature": result.temperature,
                "status": result.status.value,
                "unit": TEMPERATURE_UNIT,
                "thresholds": self.monitor.temperature_thresholds(),
                "timestamp": self.config.format_time(result.timestamp),
                "hostname": socket.gethostname()
            }
            return jsonify(response), status_code

        @app.route('/temperature/simple')
        def temperature_simple():
            result = self.monitor.evaluate()
            status_code = self.monitor.get_status_code(result.status)
            body = f"{result.status.value} {result.temperature:.1f}{TEMPERATURE_UNIT}"
            return Response(body, status=status_code, mimetype='text/plain')

        # === Documentation Routes ===
        @app.route('/api')
        def api_info():
            return jsonify(self._api_document()), 200

        # === Error Handlers ===
        @app.errorhandler(404)
        def not_found(e):
            response = {
                "error": "Not Found",
                "path": request.path,
                "available_endpoints": AVAILABLE_ENDPOINTS,
                "message": "Use /api for documentation"
            }
            return jsonify(response), 404

        @app.errorhandler(Exception)
        def internal_error(e):
            # 405 and friends keep their own status
            if isinstance(e, HTTPException):
                return e

            logger.exception(f"Request error on {request.path}: {e}")
            response = {
                "error": "Internal Server Error",
                "message": str(e),
                "timestamp": self.config.format_time()
            }
            return jsonify(response), 500

    def _api_document(self):
        thresholds = self.monitor.temperature_thresholds()
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "implementation": IMPLEMENTATION,
            "description": "Checks temperature on each request - no background monitoring",
            "thresholds": thresholds,
            "endpoints": [
                {
                    "path": "/health",
                    "description": "Health check - always returns 200",
                    "method": "GET"
                },
                {
                    "path": "/temperature",
                    "description": "Check temperature (JSON response)",
                    "method": "GET",
                    "responses": {
                        "200": "OK - Normal temperature",
                        "418": "WARNING - High temperature",
                        "503": "CRITICAL - Critical temperature",
                        "500": "ERROR - Sensor reading failed"
                    }
                },
                {
                    "path": "/temperature/simple",
                    "description": "Check temperature (plain text, same status codes)",
                    "method": "GET"
                },
                {
                    "path": "/api",
                    "description": "This documentation",
                    "method": "GET"
                }
            ],
            "usage": {
                "uptime_kuma": "Monitor /temperature/simple endpoint every 60 seconds",
                "expected_status_codes": {
                    "200": "Temperature OK",
                    "418": "Temperature Warning (will show as warning in Uptime Kuma)",
                    "503": "Temperature Critical (will show as down in Uptime Kuma)",
                    "500": "Sensor Error (will show as down in Uptime Kuma)"
                }
            },
            "system": {
                "hostname": socket.gethostname(),
                "pythonVersion": platform.python_version(),
                "platform": platform.system().lower()
            }
        }
