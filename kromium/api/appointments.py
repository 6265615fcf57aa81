from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ..core.database import get_db
from ..api.deps import get_current_user, get_patient_user
from ..services.appointment_service import AppointmentService
from ..schemas.appointment import (
    AppointmentCreate, AppointmentEnvelope, AppointmentList,
    AppointmentResponse, AppointmentUpdate
)
from ..schemas.common import MessageResponse
from ..models.appointment import Appointment
from ..models.user import User

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def _as_list(appointments: List[Appointment]) -> AppointmentList:
    return AppointmentList(
        count=len(appointments),
        appointments=[AppointmentResponse.model_validate(a) for a in appointments],
    )


@router.get("", response_model=AppointmentList)
async def list_appointments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Appointments where the caller is the patient or the doctor."""
    return _as_list(AppointmentService(db).list_for_user(current_user))


@router.get("/my-appointments", response_model=AppointmentList)
async def my_appointments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _as_list(AppointmentService(db).list_for_user(current_user))


@router.get("/upcoming/list", response_model=AppointmentList)
async def upcoming_appointments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _as_list(AppointmentService(db).list_upcoming(current_user))


@router.get("/{appointment_id}", response_model=AppointmentEnvelope)
async def get_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).get_for_user(appointment_id, current_user)
    return AppointmentEnvelope(appointment=AppointmentResponse.model_validate(appointment))


@router.post("", response_model=AppointmentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_patient_user),
    db: Session = Depends(get_db)
):
    """Book an appointment with a doctor."""
    appointment = AppointmentService(db).create(current_user, data)
    return AppointmentEnvelope(appointment=AppointmentResponse.model_validate(appointment))


@router.put("/{appointment_id}", response_model=AppointmentEnvelope)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).update(appointment_id, current_user, data)
    return AppointmentEnvelope(appointment=AppointmentResponse.model_validate(appointment))


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def cancel_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancel an appointment. The record is kept with status Cancelled."""
    AppointmentService(db).cancel(appointment_id, current_user)
    return MessageResponse(message="Appointment cancelled successfully")
