"""
Store Module — Repository Interfaces for Batches and Alerts

Public API:
- BatchRepository / InMemoryBatchRepository: stations, batches, test records
- AlertRepository / InMemoryAlertRepository: alerts, notification preferences
- AlertNotifier: email/SMS dispatch (logging only)
"""

from .batches import (
    BatchRepository,
    InMemoryBatchRepository,
    FryingStation,
    StationStatus,
    Batch,
    TestRecord,
    BatchStatistics,
)
from .alerts import (
    AlertRepository,
    InMemoryAlertRepository,
    AlertNotifier,
    Alert,
    AlertType,
    AlertSeverity,
    NotificationPreferences,
    NotifyOn,
)

__all__ = [
    "BatchRepository",
    "InMemoryBatchRepository",
    "FryingStation",
    "StationStatus",
    "Batch",
    "TestRecord",
    "BatchStatistics",
    "AlertRepository",
    "InMemoryAlertRepository",
    "AlertNotifier",
    "Alert",
    "AlertType",
    "AlertSeverity",
    "NotificationPreferences",
    "NotifyOn",
]
