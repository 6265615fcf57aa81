from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from ..models.medical_record import RecordType
from .common import CamelModel
from .user import DoctorSummary


class LabResult(CamelModel):
    test_name: str
    result: Optional[str] = None
    unit: Optional[str] = None
    normal_range: Optional[str] = None


class Vitals(CamelModel):
    blood_pressure: Optional[str] = None
    heart_rate: Optional[float] = None
    temperature: Optional[float] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: Optional[float] = None


class Medication(CamelModel):
    name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class Attachment(CamelModel):
    file_name: str
    file_url: str
    file_type: Optional[str] = None
    upload_date: Optional[datetime] = None


class RecordPatient(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str


class MedicalRecordCreate(CamelModel):
    patient_id: int = Field(..., alias="patient")
    appointment_id: Optional[int] = Field(None, alias="appointment")
    title: str = Field(..., min_length=1, max_length=255)
    type: RecordType
    date: Optional[datetime] = None
    description: Optional[str] = None
    findings: Optional[str] = None
    lab_results: List[LabResult] = []
    vitals: Optional[Vitals] = None
    medications: List[Medication] = []
    notes: Optional[str] = None
    is_confidential: bool = False


class MedicalRecordUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[RecordType] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    findings: Optional[str] = None
    lab_results: Optional[List[LabResult]] = None
    vitals: Optional[Vitals] = None
    medications: Optional[List[Medication]] = None
    notes: Optional[str] = None
    is_confidential: Optional[bool] = None


class MedicalRecordResponse(CamelModel):
    id: int
    patient: RecordPatient
    doctor: Optional[DoctorSummary] = None
    appointment_id: Optional[int] = None
    title: str
    type: RecordType
    date: datetime
    description: Optional[str] = None
    findings: Optional[str] = None
    lab_results: List[LabResult] = []
    vitals: Optional[Vitals] = None
    medications: List[Medication] = []
    attachments: List[Attachment] = []
    file_url: Optional[str] = None
    notes: Optional[str] = None
    is_confidential: bool = False


class MedicalRecordEnvelope(CamelModel):
    success: bool = True
    record: MedicalRecordResponse


class MedicalRecordList(CamelModel):
    success: bool = True
    count: int
    records: List[MedicalRecordResponse]
