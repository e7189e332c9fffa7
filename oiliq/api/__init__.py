"""
API Module — FastAPI Application

Public API:
- app: FastAPI application instance
- run_oil_test: Test run orchestration
"""

from .main import app
from .services import run_oil_test, build_report_data

__all__ = [
    "app",
    "run_oil_test",
    "build_report_data",
]
