"""
Health checks following the "Health Check Response Format for HTTP APIs"
draft and the Kubernetes liveness/readiness/startup probe conventions.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from typing import Dict, Any
import os
import time
from datetime import datetime
from enum import Enum
import psutil
import logging

logger = logging.getLogger(__name__)

def _now() -> str:
    return datetime.utcnow().isoformat() + "Z"

class HealthStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"

class ServiceHealth:
    """Builds the health/metrics router for one service and its database."""

    def __init__(self, service_name: str, engine: Engine, version: str = "1.0.0",
                 jwt_secret: str = "", environment: str = "development"):
        self.service_name = service_name
        self.engine = engine
        self.version = version
        self.jwt_secret = jwt_secret
        self.environment = environment
        self.start_time = time.time()
        self.checks_performed = 0
        self.last_check_time = None

    def create_health_router(self) -> APIRouter:
        router = APIRouter(tags=["health"])

        @router.get("/health", status_code=status.HTTP_200_OK)
        def health_check() -> Dict[str, Any]:
            """Lightweight liveness check for load balancers."""
            return {
                "status": HealthStatus.PASS,
                "service": self.service_name,
                "version": self.version,
                "releaseId": os.getenv("RELEASE_ID", "unknown"),
                "timestamp": _now()
            }

        @router.get("/health/live", status_code=status.HTTP_200_OK)
        def liveness() -> Dict[str, Any]:
            return {"status": "alive"}

        @router.get("/health/ready")
        def readiness() -> JSONResponse:
            checks = self.perform_readiness_checks()
            overall_status = self.calculate_overall_status(checks)
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE if overall_status == HealthStatus.FAIL else status.HTTP_200_OK

            return JSONResponse(status_code=status_code, content={
                "status": overall_status.value,
                "version": self.version,
                "releaseId": os.getenv("RELEASE_ID", "unknown"),
                "checks": checks,
                "serviceId": self.service_name,
                "description": f"{self.service_name} service",
                "timestamp": _now()
            })

        @router.get("/health/startup")
        def startup() -> JSONResponse:
            checks = self.perform_startup_checks()
            if self.calculate_overall_status(checks) == HealthStatus.FAIL:
                return JSONResponse(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    content={"status": "starting", "checks": checks}
                )
            return JSONResponse(content={"status": "started", "checks": checks})

        @router.get("/metrics")
        def metrics() -> Dict[str, Any]:
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
                    "cpu_percent": process.cpu_percent(),
                    "num_threads": process.num_threads()
                }
            }

        return router

    def perform_readiness_checks(self) -> Dict[str, Dict[str, Any]]:
        self.checks_performed += 1
        self.last_check_time = time.time()
        return {
            "database:connectivity": self._check_database(),
            "storage:disk_space": self._check_disk_space(),
            "system:memory": self._check_memory(),
        }

    def perform_startup_checks(self) -> Dict[str, Dict[str, Any]]:
        return {
            "database:migrations": self._check_migrations(),
            "config:environment": self._check_environment(),
        }

    def _check_database(self) -> Dict[str, Any]:
        try:
            start_time = time.time()
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            response_time = (time.time() - start_time) * 1000
            return {
                "status": HealthStatus.PASS.value,
                "componentType": "datastore",
                "observedValue": f"{response_time:.2f}",
                "observedUnit": "ms",
                "time": _now()
            }
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": HealthStatus.FAIL.value,
                "componentType": "datastore",
                "output": "database unreachable",
                "time": _now()
            }

    def _check_disk_space(self) -> Dict[str, Any]:
        free_gb = psutil.disk_usage('/').free / (1024 ** 3)
        if free_gb < 1:
            status_val = HealthStatus.FAIL
        elif free_gb < 5:
            status_val = HealthStatus.WARN
        else:
            status_val = HealthStatus.PASS
        return {
            "status": status_val.value,
            "componentType": "system",
            "observedValue": f"{free_gb:.2f}",
            "observedUnit": "GB",
            "time": _now()
        }

    def _check_memory(self) -> Dict[str, Any]:
        available_mb = psutil.virtual_memory().available / (1024 ** 2)
        if available_mb < 100:
            status_val = HealthStatus.FAIL
        elif available_mb < 500:
            status_val = HealthStatus.WARN
        else:
            status_val = HealthStatus.PASS
        return {
            "status": status_val.value,
            "componentType": "system",
            "observedValue": f"{available_mb:.2f}",
            "observedUnit": "MB",
            "time": _now()
        }

    def _check_migrations(self) -> Dict[str, Any]:
        try:
            migrated = inspect(self.engine).has_table("alembic_version")
        except Exception as e:
            logger.error(f"Migration check failed: {e}")
            return {
                "status": HealthStatus.FAIL.value,
                "componentType": "datastore",
                "output": "database unreachable",
                "time": _now()
            }
        result = {
            "status": (HealthStatus.PASS if migrated else HealthStatus.WARN).value,
            "componentType": "datastore",
            "time": _now()
        }
        if not migrated:
            result["output"] = "Migrations table not found"
        return result

    def _check_environment(self) -> Dict[str, Any]:
        if self.environment == "production" and self.jwt_secret in ("", "change-me"):
            return {
                "status": HealthStatus.FAIL.value,
                "componentType": "configuration",
                "output": "JWT_SECRET must be set in production",
                "time": _now()
            }
        return {
            "status": HealthStatus.PASS.value,
            "componentType": "configuration",
            "time": _now()
        }

    @staticmethod
    def calculate_overall_status(checks: Dict[str, Dict[str, Any]]) -> HealthStatus:
        statuses = {check.get("status", HealthStatus.PASS.value) for check in checks.values()}
        if HealthStatus.FAIL.value in statuses:
            return HealthStatus.FAIL
        if HealthStatus.WARN.value in statuses:
            return HealthStatus.WARN
        return HealthStatus.PASS
