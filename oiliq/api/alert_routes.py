"""
Alert Routes — Quality Alerts and Notification Preferences

Endpoints:
- GET /api/v1/alerts
- GET /api/v1/alerts/unacknowledged-count
- POST /api/v1/alerts/{alert_id}/acknowledge
- GET/PUT /api/v1/alerts/preferences
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from oiliq.config import settings
from oiliq.exceptions import RecordNotFound
from oiliq.store import Alert, AlertRepository, AlertType, NotificationPreferences

from .dependencies import get_alert_repository
from .schemas import AcknowledgeRequest, PreferencesUpdate, UnacknowledgedCount


logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_STR}/alerts", tags=["Alerts"])


@router.get("", response_model=List[Alert])
async def list_alerts(
    type: Optional[AlertType] = Query(default=None),
    acknowledged: Optional[bool] = Query(default=None),
    repo: AlertRepository = Depends(get_alert_repository),
):
    """Alerts, newest first."""
    return repo.list_alerts(type=type, acknowledged=acknowledged)


@router.get("/unacknowledged-count", response_model=UnacknowledgedCount)
async def unacknowledged_count(repo: AlertRepository = Depends(get_alert_repository)):
    return UnacknowledgedCount(count=repo.unacknowledged_count())


@router.get("/preferences", response_model=NotificationPreferences)
async def get_preferences(repo: AlertRepository = Depends(get_alert_repository)):
    return repo.get_preferences()


@router.put("/preferences", response_model=NotificationPreferences)
async def update_preferences(
    request: PreferencesUpdate,
    repo: AlertRepository = Depends(get_alert_repository),
):
    updated = repo.update_preferences(**request.model_dump(exclude_none=True))
    logger.info("🔔 Notification preferences updated")
    return updated


@router.post("/{alert_id}/acknowledge", response_model=Alert)
async def acknowledge_alert(
    alert_id: str,
    request: AcknowledgeRequest,
    repo: AlertRepository = Depends(get_alert_repository),
):
    alert = repo.acknowledge(alert_id, request.acknowledged_by)
    if alert is None:
        raise RecordNotFound("Alert", alert_id)
    return alert
