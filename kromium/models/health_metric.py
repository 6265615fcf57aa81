from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float, JSON
from sqlalchemy.sql import func

from ..core.database import Base


class HealthMetric(Base):
    __tablename__ = "health_metrics"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    blood_pressure = Column(String(10), nullable=False)  # "120/80"
    heart_rate = Column(Integer, nullable=False)  # bpm
    weight = Column(Float, nullable=False)  # kg
    height = Column(Float, nullable=False)  # cm
    bmi = Column(Float, nullable=False)
    temperature = Column(Float, nullable=True)  # Celsius
    blood_sugar = Column(Float, nullable=True)  # mg/dL
    cholesterol = Column(JSON, nullable=True)  # {"total", "hdl", "ldl"}

    last_updated = Column(DateTime, server_default=func.now(), index=True)

    def __repr__(self):
        return f"<HealthMetric(id={self.id}, patient_id={self.patient_id}, bp='{self.blood_pressure}')>"
