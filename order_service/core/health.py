"""
Health checks for container orchestration

- /health and /health/live answer as long as the process is up
- /health/ready answers 503 while the relational store is unreachable
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from typing import Dict, Any
import time
from datetime import datetime
from enum import Enum
import psutil

from .logging_config import get_logger

logger = get_logger(__name__)

class HealthStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"

def _now() -> str:
    return datetime.utcnow().isoformat() + "Z"

class ServiceHealth:
    """Liveness, readiness and process metrics for one service"""

    def __init__(self, service_name: str, version: str = "1.0.0"):
        self.service_name = service_name
        self.version = version
        self.start_time = time.time()
        self.checks_performed = 0
        self.last_check_time = None

    def create_health_router(self) -> APIRouter:
        router = APIRouter(tags=["health"])

        @router.get("/health", status_code=status.HTTP_200_OK)
        async def health_check() -> Dict[str, Any]:
            """Basic liveness probe - lightweight check"""
            return {
                "status": HealthStatus.PASS,
                "service": self.service_name,
                "version": self.version,
                "timestamp": _now()
            }

        @router.get("/health/live", status_code=status.HTTP_200_OK)
        async def liveness() -> Dict[str, Any]:
            return {"status": "alive"}

        @router.get("/health/ready")
        def readiness(request: Request) -> JSONResponse:
            """
            Readiness probe
            Fails while the database does not answer
            """
            checks = self.perform_readiness_checks(request.app.state.database)
            overall_status = self.calculate_overall_status(checks)
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE if overall_status == HealthStatus.FAIL else status.HTTP_200_OK

            return JSONResponse(status_code=status_code, content={
                "status": overall_status,
                "version": self.version,
                "serviceId": self.service_name,
                "checks": checks,
                "timestamp": _now()
            })

        @router.get("/metrics")
        async def metrics() -> Dict[str, Any]:
            process = psutil.Process()
            memory = process.memory_info()
            return {
                "service": self.service_name,
                "version": self.version,
                "uptime_seconds": time.time() - self.start_time,
                "checks_performed": self.checks_performed,
                "timestamp": _now(),
                "system": {
                    "memory_rss_bytes": memory.rss,
                    "memory_vms_bytes": memory.vms,
                    "num_threads": process.num_threads()
                }
            }

        return router

    def perform_readiness_checks(self, database) -> Dict[str, Dict[str, Any]]:
        self.checks_performed += 1
        self.last_check_time = time.time()
        return {
            "database:connectivity": self._check_database(database),
            "system:memory": self._check_memory(),
        }

    def _check_database(self, database) -> Dict[str, Any]:
        try:
            start_time = time.time()
            database.ping()
            response_time = (time.time() - start_time) * 1000
            return {
                "status": HealthStatus.PASS,
                "componentType": "datastore",
                "observedValue": f"{response_time:.2f}",
                "observedUnit": "ms",
                "time": _now()
            }
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": HealthStatus.FAIL,
                "componentType": "datastore",
                "output": str(e),
                "time": _now()
            }

    def _check_memory(self) -> Dict[str, Any]:
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024 ** 2)

        # Low memory degrades readiness but only the store can fail it
        if available_mb < 500:
            status_val = HealthStatus.WARN
        else:
            status_val = HealthStatus.PASS

        return {
            "status": status_val,
            "componentType": "system",
            "observedValue": f"{available_mb:.2f}",
            "observedUnit": "MB",
            "time": _now()
        }

    @staticmethod
    def calculate_overall_status(checks: Dict[str, Dict[str, Any]]) -> HealthStatus:
        statuses = [check.get("status", HealthStatus.PASS) for check in checks.values()]
        if HealthStatus.FAIL in statuses:
            return HealthStatus.FAIL
        if HealthStatus.WARN in statuses:
            return HealthStatus.WARN
        return HealthStatus.PASS
