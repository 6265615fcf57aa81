from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..api.deps import get_current_user
from ..services.health_metric_service import HealthMetricService
from ..schemas.health_metric import (
    HealthMetricCreate, HealthMetricEnvelope, HealthMetricHistory, HealthMetricResponse
)
from ..models.user import User

router = APIRouter(prefix="/health-metrics", tags=["Health Metrics"])


@router.post("", response_model=HealthMetricEnvelope)
async def record_metrics(
    data: HealthMetricCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    metric = HealthMetricService(db).record(current_user, data)
    return HealthMetricEnvelope(metrics=HealthMetricResponse.model_validate(metric))


@router.get("/latest", response_model=HealthMetricEnvelope)
async def latest_metrics(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Most recent reading; 404 when the patient has none yet."""
    metric = HealthMetricService(db).latest(current_user)
    return HealthMetricEnvelope(metrics=HealthMetricResponse.model_validate(metric))


@router.get("/history", response_model=HealthMetricHistory)
async def metrics_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    metrics = HealthMetricService(db).history(current_user)
    return HealthMetricHistory(
        count=len(metrics),
        metrics=[HealthMetricResponse.model_validate(m) for m in metrics],
    )
