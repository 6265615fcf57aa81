from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
from typing import List
import logging

from ..models.appointment import (
    Appointment, AppointmentMode, AppointmentStatus, ACTIVE_STATUSES
)
from ..models.user import User
from ..core.security import UserRole
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate
from ..utils.validators import generate_meeting_link

logger = logging.getLogger(__name__)


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Appointment).options(
            joinedload(Appointment.patient),
            joinedload(Appointment.doctor),
        )

    def _scoped(self, user: User):
        query = self._query()
        if user.role == UserRole.PATIENT:
            query = query.filter(Appointment.patient_id == user.id)
        elif user.role == UserRole.DOCTOR:
            query = query.filter(Appointment.doctor_id == user.id)
        return query

    def list_for_user(self, user: User) -> List[Appointment]:
        """Most recent first."""
        return self._scoped(user).order_by(
            Appointment.appointment_date.desc(), Appointment.id.desc()
        ).all()

    def list_upcoming(self, user: User) -> List[Appointment]:
        """Scheduled or confirmed, soonest first."""
        return self._scoped(user).filter(
            Appointment.status.in_(ACTIVE_STATUSES)
        ).order_by(
            Appointment.appointment_date.asc(), Appointment.id.asc()
        ).all()

    def get_for_user(self, appointment_id: int, user: User, action: str = "view") -> Appointment:
        appointment = self._query().filter(Appointment.id == appointment_id).first()

        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )

        if not appointment.involves(user.id) and user.role != UserRole.ADMIN:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not authorized to {action} this appointment"
            )

        return appointment

    def create(self, patient: User, data: AppointmentCreate) -> Appointment:
        doctor = self.db.query(User).filter(User.id == data.doctor_id).first()
        if not doctor or not doctor.is_doctor:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found"
            )

        appointment = Appointment(
            patient_id=patient.id,
            doctor_id=doctor.id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            type=data.type,
            mode=data.mode,
            reason=data.reason,
            notes=data.notes,
            location=data.location,
            status=AppointmentStatus.SCHEDULED,
        )
        self.db.add(appointment)
        self.db.flush()

        if appointment.mode == AppointmentMode.VIDEO_CALL:
            appointment.meeting_link = generate_meeting_link(appointment.id)

        self.db.commit()
        logger.info(
            f"Appointment {appointment.id} booked: patient {patient.id} with doctor {doctor.id} "
            f"on {appointment.appointment_date} at {appointment.appointment_time}"
        )
        return self.get_for_user(appointment.id, patient)

    def update(self, appointment_id: int, user: User, data: AppointmentUpdate) -> Appointment:
        appointment = self.get_for_user(appointment_id, user, action="update")

        changes = data.model_dump(exclude_unset=True)
        if "prescription" in changes and changes["prescription"] is not None:
            changes["prescription"] = [item.model_dump() for item in data.prescription]

        for field, value in changes.items():
            if value is None and field in ("appointment_date", "appointment_time", "status"):
                continue
            setattr(appointment, field, value)

        self.db.commit()
        return self.get_for_user(appointment.id, user)

    def cancel(self, appointment_id: int, user: User) -> Appointment:
        """Cancellation keeps the record and flips its status."""
        appointment = self.get_for_user(appointment_id, user, action="delete")
        appointment.status = AppointmentStatus.CANCELLED
        self.db.commit()
        logger.info(f"Appointment {appointment.id} cancelled by user {user.id}")
        return appointment
