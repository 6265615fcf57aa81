from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Text, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base


class RecordType(str, enum.Enum):
    LAB_REPORT = "Lab Report"
    CHECKUP_REPORT = "Checkup Report"
    IMAGING = "Imaging"
    PRESCRIPTION = "Prescription"
    IMMUNIZATION = "Immunization"
    OTHER = "Other"


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Empty for documents uploaded by the patient
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)

    title = Column(String(255), nullable=False)
    type = Column(SQLEnum(RecordType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    date = Column(DateTime, server_default=func.now(), nullable=False, index=True)
    description = Column(Text, nullable=True)
    findings = Column(Text, nullable=True)

    lab_results = Column(JSON, default=list)
    vitals = Column(JSON, nullable=True)
    medications = Column(JSON, default=list)
    attachments = Column(JSON, default=list)
    # Name of the uploaded file inside UPLOAD_DIR
    stored_file = Column(String(255), nullable=True)

    notes = Column(Text, nullable=True)
    is_confidential = Column(Boolean, default=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])

    @property
    def file_url(self):
        if self.attachments:
            return self.attachments[0].get("file_url")
        return None

    def __repr__(self):
        return f"<MedicalRecord(id={self.id}, patient_id={self.patient_id}, title='{self.title}')>"
