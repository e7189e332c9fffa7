"""
API Dependencies — Shared Repositories and Predictor

Built once from settings at import time. Route handlers receive them via
Depends(), so tests swap them with app.dependency_overrides.
"""

from oiliq.config import settings
from oiliq.prediction import Predictor, build_predictor
from oiliq.rules.standards import RegulatoryLimits, resolve_limits
from oiliq.store import (
    AlertRepository,
    BatchRepository,
    InMemoryAlertRepository,
    InMemoryBatchRepository,
)


_limits = resolve_limits(
    settings.REGULATORY_STANDARD,
    ffa=settings.FFA_LIMIT,
    tpc=settings.TPC_LIMIT,
    pv=settings.PV_LIMIT,
)
_batch_repo = InMemoryBatchRepository(seed_demo=settings.SEED_DEMO_DATA)
_alert_repo = InMemoryAlertRepository(seed_demo=settings.SEED_DEMO_DATA)
_predictor = build_predictor(settings)


def get_limits() -> RegulatoryLimits:
    return _limits


def get_batch_repository() -> BatchRepository:
    return _batch_repo


def get_alert_repository() -> AlertRepository:
    return _alert_repo


def get_predictor() -> Predictor:
    return _predictor
