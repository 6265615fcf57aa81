from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel


class Cholesterol(CamelModel):
    total: Optional[float] = None
    hdl: Optional[float] = None
    ldl: Optional[float] = None


class HealthMetricCreate(CamelModel):
    blood_pressure: str = Field(..., pattern=r"^\d{2,3}/\d{2,3}$")
    heart_rate: int = Field(..., ge=30, le=200)
    weight: float = Field(..., ge=20, le=300)
    height: float = Field(..., ge=100, le=250)
    temperature: Optional[float] = Field(None, ge=35, le=42)
    blood_sugar: Optional[float] = Field(None, ge=50, le=300)
    cholesterol: Optional[Cholesterol] = None


class HealthMetricResponse(CamelModel):
    id: int
    blood_pressure: str
    heart_rate: int
    weight: float
    height: float
    bmi: float
    temperature: Optional[float] = None
    blood_sugar: Optional[float] = None
    cholesterol: Optional[Cholesterol] = None
    last_updated: Optional[datetime] = None


class HealthMetricEnvelope(CamelModel):
    success: bool = True
    metrics: HealthMetricResponse


class HealthMetricHistory(CamelModel):
    success: bool = True
    count: int
    metrics: List[HealthMetricResponse]
