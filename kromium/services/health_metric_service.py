from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List

from ..models.health_metric import HealthMetric
from ..models.user import User
from ..schemas.health_metric import HealthMetricCreate
from ..utils.validators import calculate_bmi

HISTORY_LIMIT = 30


class HealthMetricService:
    def __init__(self, db: Session):
        self.db = db

    def record(self, patient: User, data: HealthMetricCreate) -> HealthMetric:
        """Store a new reading; BMI is always derived here."""
        metric = HealthMetric(
            patient_id=patient.id,
            blood_pressure=data.blood_pressure,
            heart_rate=data.heart_rate,
            weight=data.weight,
            height=data.height,
            bmi=calculate_bmi(data.weight, data.height),
            temperature=data.temperature,
            blood_sugar=data.blood_sugar,
            cholesterol=data.cholesterol.model_dump(exclude_none=True) if data.cholesterol else None,
        )
        self.db.add(metric)
        self.db.commit()
        self.db.refresh(metric)
        return metric

    def latest(self, patient: User) -> HealthMetric:
        metric = (
            self.db.query(HealthMetric)
            .filter(HealthMetric.patient_id == patient.id)
            .order_by(HealthMetric.last_updated.desc(), HealthMetric.id.desc())
            .first()
        )
        if not metric:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No health metrics found"
            )
        return metric

    def history(self, patient: User) -> List[HealthMetric]:
        return (
            self.db.query(HealthMetric)
            .filter(HealthMetric.patient_id == patient.id)
            .order_by(HealthMetric.last_updated.desc(), HealthMetric.id.desc())
            .limit(HISTORY_LIMIT)
            .all()
        )
