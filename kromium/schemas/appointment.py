from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..models.appointment import AppointmentMode, AppointmentStatus, AppointmentType
from ..utils.validators import validate_appointment_time
from .common import CamelModel
from .user import DoctorSummary, PatientSummary


class PrescriptionItem(CamelModel):
    medication: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None


class AppointmentCreate(CamelModel):
    doctor_id: int = Field(..., alias="doctor")
    appointment_date: date
    appointment_time: str
    type: AppointmentType = AppointmentType.CONSULTATION
    mode: AppointmentMode = AppointmentMode.IN_PERSON
    reason: str = Field(..., min_length=1)
    notes: Optional[str] = None
    location: Optional[str] = None

    @field_validator("appointment_time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return validate_appointment_time(value)

    @field_validator("reason")
    @classmethod
    def check_reason(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Reason for appointment is required")
        return value.strip()


class AppointmentUpdate(CamelModel):
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None
    diagnosis: Optional[str] = None
    prescription: Optional[List[PrescriptionItem]] = None
    follow_up_required: Optional[bool] = None
    follow_up_date: Optional[date] = None

    @field_validator("appointment_time")
    @classmethod
    def check_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return validate_appointment_time(value)


class AppointmentResponse(CamelModel):
    id: int
    patient: PatientSummary
    doctor: DoctorSummary
    appointment_date: date
    appointment_time: str
    type: AppointmentType
    mode: AppointmentMode
    status: AppointmentStatus
    reason: str
    notes: Optional[str] = None
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    diagnosis: Optional[str] = None
    prescription: List[PrescriptionItem] = []
    follow_up_required: bool = False
    follow_up_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AppointmentEnvelope(CamelModel):
    success: bool = True
    appointment: AppointmentResponse


class AppointmentList(CamelModel):
    success: bool = True
    count: int
    appointments: List[AppointmentResponse]
