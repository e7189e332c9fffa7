"""
Alert Repository — Quality Alerts and Notification Preferences

Borderline and rejected tests raise alerts; equipment and calibration
alerts can be raised directly. New alerts are dispatched to the configured
email/SMS recipients through AlertNotifier.

Notification gateways are not wired up: AlertNotifier logs what it would
send. Swap in a subclass to deliver for real.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import List, Optional

from pydantic import BaseModel, Field

from oiliq.rules.classifier import ComplianceStatus


logger = logging.getLogger(__name__)


# ============================================================================
# Enums and Schemas
# ============================================================================

class AlertType(str, Enum):
    """What raised the alert."""
    BORDERLINE = "borderline"
    REJECT = "reject"
    EQUIPMENT = "equipment"
    CALIBRATION = "calibration"


class AlertSeverity(str, Enum):
    """How urgently the alert needs attention."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class Alert(BaseModel):
    """A raised alert and its acknowledgement state."""
    id: str
    type: AlertType
    severity: AlertSeverity
    title: str
    message: str
    batch_id: Optional[str] = None
    station_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    acknowledged: bool = False
    acknowledged_by: Optional[str] = None
    acknowledged_at: Optional[datetime] = None


class NotifyOn(BaseModel):
    """Alert types that trigger notifications."""
    borderline: bool = True
    reject: bool = True
    equipment: bool = True


class NotificationPreferences(BaseModel):
    """Where and when alert notifications are sent."""
    email: bool = True
    sms: bool = False
    email_addresses: List[str] = Field(default_factory=list)
    phone_numbers: List[str] = Field(default_factory=list)
    notify_on: NotifyOn = Field(default_factory=NotifyOn)


# Test-result alert wording by classification
TEST_RESULT_ALERTS = {
    ComplianceStatus.BORDERLINE: (
        AlertType.BORDERLINE,
        AlertSeverity.WARNING,
        "Borderline Oil Quality Detected",
        "Batch {batch_id} shows borderline oil quality (Score: {score}). "
        "Increased monitoring recommended.",
    ),
    ComplianceStatus.REJECT: (
        AlertType.REJECT,
        AlertSeverity.CRITICAL,
        "Oil Quality Below Acceptable Limits",
        "Batch {batch_id} has been REJECTED (Score: {score}). "
        "Immediate oil replacement required.",
    ),
}


# ============================================================================
# Notifier
# ============================================================================

class AlertNotifier:
    """Dispatch alert notifications according to preferences."""

    def notify(self, alert: Alert, prefs: NotificationPreferences) -> List[str]:
        """
        Send notifications for an alert.

        Returns:
            Channels used ("email", "sms"); empty if filtered out
        """
        enabled = getattr(prefs.notify_on, alert.type.value, False)
        if not enabled:
            return []

        channels = []
        if prefs.email and prefs.email_addresses:
            self.send_email(prefs.email_addresses, f"FoodOil IQ Alert - {alert.title}", alert.message)
            channels.append("email")
        if prefs.sms and prefs.phone_numbers:
            self.send_sms(prefs.phone_numbers, f"{alert.title} - {alert.message}")
            channels.append("sms")
        return channels

    def send_email(self, recipients: List[str], subject: str, body: str) -> None:
        logger.info(f"📧 [Email Alert] To: {', '.join(recipients)} | Subject: {subject} | Body: {body}")

    def send_sms(self, recipients: List[str], message: str) -> None:
        logger.info(f"📱 [SMS Alert] To: {', '.join(recipients)} | Message: {message}")


# ============================================================================
# Interface
# ============================================================================

class AlertRepository(ABC):
    """Storage interface for alerts and notification preferences."""

    @abstractmethod
    def create_alert(
        self,
        type: AlertType,
        severity: AlertSeverity,
        title: str,
        message: str,
        batch_id: Optional[str] = None,
        station_id: Optional[str] = None,
    ) -> Alert: ...

    @abstractmethod
    def list_alerts(
        self,
        type: Optional[AlertType] = None,
        acknowledged: Optional[bool] = None,
    ) -> List[Alert]: ...

    @abstractmethod
    def unacknowledged_count(self) -> int: ...

    @abstractmethod
    def acknowledge(self, alert_id: str, acknowledged_by: str) -> Optional[Alert]: ...

    @abstractmethod
    def get_preferences(self) -> NotificationPreferences: ...

    @abstractmethod
    def update_preferences(self, **updates) -> NotificationPreferences: ...

    def create_test_result_alert(
        self,
        classification: ComplianceStatus,
        score: int,
        batch_id: str,
        station_id: Optional[str] = None,
    ) -> Optional[Alert]:
        """
        Raise an alert for a non-passing test. PASS raises nothing.
        """
        template = TEST_RESULT_ALERTS.get(ComplianceStatus(classification))
        if template is None:
            return None

        alert_type, severity, title, message = template
        return self.create_alert(
            alert_type,
            severity,
            title,
            message.format(batch_id=batch_id, score=score),
            batch_id=batch_id,
            station_id=station_id,
        )


# ============================================================================
# In-memory implementation
# ============================================================================

class InMemoryAlertRepository(AlertRepository):
    """
    Process-local alert store. Thread-safe; newest alert first.
    """

    def __init__(
        self,
        notifier: Optional[AlertNotifier] = None,
        seed_demo: bool = False,
    ):
        self._lock = Lock()
        self._alerts: List[Alert] = []
        self._prefs = NotificationPreferences()
        self.notifier = notifier or AlertNotifier()

        if seed_demo:
            self._seed_sample_alerts()

    def _seed_sample_alerts(self) -> None:
        self.create_alert(
            AlertType.BORDERLINE,
            AlertSeverity.WARNING,
            "Borderline TPC Level",
            "Station A3 showing elevated TPC levels (22.5%). Monitor closely.",
            batch_id="BATCH-2024-0115-C",
            station_id="STATION-A3",
        )
        self.create_alert(
            AlertType.REJECT,
            AlertSeverity.CRITICAL,
            "Oil Quality Rejected",
            "Station B1 oil failed quality test. Immediate replacement required.",
            batch_id="BATCH-2024-0114-B",
            station_id="STATION-B1",
        )

    def create_alert(
        self,
        type: AlertType,
        severity: AlertSeverity,
        title: str,
        message: str,
        batch_id: Optional[str] = None,
        station_id: Optional[str] = None,
    ) -> Alert:
        now = datetime.now(timezone.utc)
        alert = Alert(
            id=f"ALT-{int(now.timestamp() * 1000)}-{secrets.token_hex(5)[:9]}",
            type=type,
            severity=severity,
            title=title,
            message=message,
            batch_id=batch_id,
            station_id=station_id,
            timestamp=now,
        )
        with self._lock:
            self._alerts.insert(0, alert)
            prefs = self._prefs.model_copy(deep=True)

        logger.warning(f"🚨 {alert.severity.value.upper()} alert: {alert.title}")
        self.notifier.notify(alert, prefs)
        return alert

    def list_alerts(
        self,
        type: Optional[AlertType] = None,
        acknowledged: Optional[bool] = None,
    ) -> List[Alert]:
        with self._lock:
            filtered = list(self._alerts)
        if type is not None:
            filtered = [a for a in filtered if a.type == type]
        if acknowledged is not None:
            filtered = [a for a in filtered if a.acknowledged == acknowledged]
        return filtered

    def unacknowledged_count(self) -> int:
        with self._lock:
            return sum(1 for a in self._alerts if not a.acknowledged)

    def acknowledge(self, alert_id: str, acknowledged_by: str) -> Optional[Alert]:
        with self._lock:
            for index, alert in enumerate(self._alerts):
                if alert.id == alert_id:
                    updated = alert.model_copy(update={
                        "acknowledged": True,
                        "acknowledged_by": acknowledged_by,
                        "acknowledged_at": datetime.now(timezone.utc),
                    })
                    self._alerts[index] = updated
                    return updated
        return None

    def get_preferences(self) -> NotificationPreferences:
        with self._lock:
            return self._prefs.model_copy(deep=True)

    def update_preferences(self, **updates) -> NotificationPreferences:
        with self._lock:
            merged = {**self._prefs.model_dump(), **updates}
            self._prefs = NotificationPreferences(**merged)
            return self._prefs.model_copy(deep=True)
