from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, UploadFile, status
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple
import logging
import uuid

import aiofiles

from ..core.config import settings
from ..core.security import UserRole
from ..models.medical_record import MedicalRecord, RecordType
from ..models.user import User
from ..schemas.medical_record import Attachment, MedicalRecordCreate, MedicalRecordUpdate

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png")
# Nested documents stored in JSON columns
JSON_FIELDS = ("lab_results", "vitals", "medications")


class MedicalRecordService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(MedicalRecord).options(
            joinedload(MedicalRecord.patient),
            joinedload(MedicalRecord.doctor),
        )

    def list_for_user(self, user: User) -> List[MedicalRecord]:
        """Patients see their own records, doctors the ones they wrote."""
        query = self._query()
        if user.role == UserRole.PATIENT:
            query = query.filter(MedicalRecord.patient_id == user.id)
        elif user.role == UserRole.DOCTOR:
            query = query.filter(MedicalRecord.doctor_id == user.id)
        return query.order_by(MedicalRecord.date.desc(), MedicalRecord.id.desc()).all()

    def list_for_patient(self, patient_id: int) -> List[MedicalRecord]:
        return self._query().filter(
            MedicalRecord.patient_id == patient_id
        ).order_by(MedicalRecord.date.desc(), MedicalRecord.id.desc()).all()

    def get(self, record_id: int) -> MedicalRecord:
        record = self._query().filter(MedicalRecord.id == record_id).first()
        if not record:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Medical record not found"
            )
        return record

    def get_for_user(self, record_id: int, user: User) -> MedicalRecord:
        record = self.get(record_id)
        if user.id not in (record.patient_id, record.doctor_id) and user.role != UserRole.ADMIN:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to view this record"
            )
        return record

    def file_for_user(self, record_id: int, user: User) -> Tuple[Path, dict]:
        """Location on disk and attachment metadata of an uploaded document."""
        record = self.get_for_user(record_id, user)
        path = Path(settings.UPLOAD_DIR) / record.stored_file if record.stored_file else None
        if path is None or not path.is_file():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No file attached to this record"
            )
        return path, (record.attachments or [{}])[0]

    def _get_owned(self, record_id: int, doctor: User, action: str) -> MedicalRecord:
        record = self.get(record_id)
        if record.doctor_id != doctor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not authorized to {action} this record"
            )
        return record

    def create(self, doctor: User, data: MedicalRecordCreate) -> MedicalRecord:
        patient = self.db.query(User).filter(User.id == data.patient_id).first()
        if not patient or patient.role != UserRole.PATIENT:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Patient not found"
            )

        values = data.model_dump(exclude_none=True)
        values.update(data.model_dump(mode="json", include=set(JSON_FIELDS), exclude_none=True))
        record = MedicalRecord(doctor_id=doctor.id, **values)
        self.db.add(record)
        self.db.commit()
        logger.info(f"Doctor {doctor.id} created medical record {record.id} for patient {patient.id}")
        return self.get(record.id)

    def update(self, record_id: int, doctor: User, data: MedicalRecordUpdate) -> MedicalRecord:
        record = self._get_owned(record_id, doctor, "update")

        changes = data.model_dump(exclude_unset=True)
        changes.update(data.model_dump(mode="json", include=set(JSON_FIELDS) & changes.keys()))
        for field, value in changes.items():
            if value is None and field in ("title", "type", "date"):
                continue
            setattr(record, field, value)

        self.db.commit()
        return self.get(record.id)

    def delete(self, record_id: int, doctor: User) -> None:
        record = self._get_owned(record_id, doctor, "delete")
        self.db.delete(record)
        self.db.commit()
        logger.info(f"Doctor {doctor.id} deleted medical record {record_id}")

    async def upload(
        self,
        patient: User,
        file: UploadFile,
        title: str,
        record_type: RecordType = RecordType.OTHER,
        description: Optional[str] = None,
    ) -> MedicalRecord:
        """Store a patient supplied document and register it as a record."""
        filename = Path(file.filename or "").name
        if not filename.lower().endswith(ALLOWED_EXTENSIONS):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="File must be a PDF, JPG or PNG document"
            )

        content = await file.read()
        if len(content) > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="File is too large"
            )

        upload_dir = Path(settings.UPLOAD_DIR)
        upload_dir.mkdir(parents=True, exist_ok=True)
        stored_name = f"{uuid.uuid4().hex}_{filename}"
        async with aiofiles.open(upload_dir / stored_name, "wb") as out_file:
            await out_file.write(content)

        record = MedicalRecord(
            patient_id=patient.id,
            title=title,
            type=record_type,
            description=description,
            stored_file=stored_name,
        )
        self.db.add(record)
        self.db.flush()

        attachment = Attachment(
            file_name=filename,
            file_url=f"{settings.API_PREFIX}/medical-records/{record.id}/file",
            file_type=file.content_type,
            upload_date=datetime.now(timezone.utc),
        )
        record.attachments = [attachment.model_dump(mode="json")]
        self.db.commit()
        logger.info(f"Patient {patient.id} uploaded {filename} as record {record.id}")
        return self.get(record.id)
