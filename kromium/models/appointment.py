from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Boolean, Text, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "No-show"


class AppointmentType(str, enum.Enum):
    CONSULTATION = "Consultation"
    FOLLOW_UP = "Follow-up"
    ROUTINE_CHECKUP = "Routine Checkup"
    EMERGENCY = "Emergency"
    OTHER = "Other"


class AppointmentMode(str, enum.Enum):
    IN_PERSON = "In-person"
    VIDEO_CALL = "Video Call"
    PHONE_CALL = "Phone Call"


ACTIVE_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # Participants
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Appointment details
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(String(20), nullable=False)
    type = Column(SQLEnum(AppointmentType, values_callable=lambda e: [m.value for m in e]),
                  default=AppointmentType.CONSULTATION)
    mode = Column(SQLEnum(AppointmentMode, values_callable=lambda e: [m.value for m in e]),
                  default=AppointmentMode.IN_PERSON)
    status = Column(SQLEnum(AppointmentStatus, values_callable=lambda e: [m.value for m in e]),
                    default=AppointmentStatus.SCHEDULED)
    reason = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    meeting_link = Column(String(500), nullable=True)

    # Filled in after the consultation
    diagnosis = Column(Text, nullable=True)
    prescription = Column(JSON, default=list)
    follow_up_required = Column(Boolean, default=False)
    follow_up_date = Column(Date, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])

    def involves(self, user_id: int) -> bool:
        return user_id in (self.patient_id, self.doctor_id)

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, date='{self.appointment_date}')>"
