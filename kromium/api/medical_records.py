from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db
from ..api.deps import get_current_user, get_doctor_user, get_patient_user
from ..services.medical_record_service import MedicalRecordService
from ..schemas.medical_record import (
    MedicalRecordCreate, MedicalRecordEnvelope, MedicalRecordList,
    MedicalRecordResponse, MedicalRecordUpdate
)
from ..schemas.common import MessageResponse
from ..models.medical_record import MedicalRecord, RecordType
from ..models.user import User

router = APIRouter(prefix="/medical-records", tags=["Medical Records"])


def _as_list(records: List[MedicalRecord]) -> MedicalRecordList:
    return MedicalRecordList(
        count=len(records),
        records=[MedicalRecordResponse.model_validate(r) for r in records],
    )


def _as_envelope(record: MedicalRecord) -> MedicalRecordEnvelope:
    return MedicalRecordEnvelope(record=MedicalRecordResponse.model_validate(record))


@router.get("", response_model=MedicalRecordList)
async def list_records(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _as_list(MedicalRecordService(db).list_for_user(current_user))


@router.post("", response_model=MedicalRecordEnvelope, status_code=status.HTTP_201_CREATED)
async def create_record(
    data: MedicalRecordCreate,
    current_user: User = Depends(get_doctor_user),
    db: Session = Depends(get_db)
):
    """Doctors write records for their patients."""
    return _as_envelope(MedicalRecordService(db).create(current_user, data))


@router.post("/upload", response_model=MedicalRecordEnvelope, status_code=status.HTTP_201_CREATED)
async def upload_record(
    file: UploadFile = File(...),
    title: str = Form(..., min_length=1, max_length=255),
    record_type: RecordType = Form(RecordType.OTHER, alias="type"),
    description: Optional[str] = Form(None),
    current_user: User = Depends(get_patient_user),
    db: Session = Depends(get_db)
):
    """Patients upload their own documents."""
    record = await MedicalRecordService(db).upload(
        current_user, file, title, record_type=record_type, description=description
    )
    return _as_envelope(record)


@router.get("/patient/{patient_id}", response_model=MedicalRecordList)
async def list_patient_records(
    patient_id: int,
    current_user: User = Depends(get_doctor_user),
    db: Session = Depends(get_db)
):
    return _as_list(MedicalRecordService(db).list_for_patient(patient_id))


@router.get("/{record_id}", response_model=MedicalRecordEnvelope)
async def get_record(
    record_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _as_envelope(MedicalRecordService(db).get_for_user(record_id, current_user))


@router.get("/{record_id}/file")
async def download_record_file(
    record_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Stream an uploaded document to the patient or the record's doctor."""
    path, attachment = MedicalRecordService(db).file_for_user(record_id, current_user)
    return FileResponse(
        path,
        media_type=attachment.get("file_type") or "application/octet-stream",
        filename=attachment.get("file_name") or path.name
    )


@router.put("/{record_id}",response_model=MedicalRecordEnvelope)
async def update_record(
    record_id: int,
    data: MedicalRecordUpdate,
    current_user: User = Depends(get_doctor_user),
    db: Session = Depends(get_db)
):
    return _as_envelope(MedicalRecordService(db).update(record_id, current_user, data))


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_record(
    record_id: int,
    current_user: User = Depends(get_doctor_user),
    db: Session = Depends(get_db)
):
    MedicalRecordService(db).delete(record_id, current_user)
    return MessageResponse(message="Medical record deleted successfully")
