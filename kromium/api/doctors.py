from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from ..core.database import get_db
from ..services.doctor_service import DoctorService
from ..schemas.doctor import DoctorEnvelope, DoctorList, DoctorResponse, SpecialtyList

router = APIRouter(prefix="/doctors", tags=["Doctors"])


@router.get("", response_model=DoctorList)
async def list_doctors(
    specialty: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Browse doctors, optionally filtered by specialty or a name search."""
    doctors, pagination = DoctorService(db).list_doctors(
        specialty=specialty, search=search, page=page, limit=limit
    )
    return DoctorList(
        count=pagination.total,
        pagination=pagination,
        doctors=[DoctorResponse.model_validate(d) for d in doctors],
    )


# Registered before /{doctor_id} so the literal path wins
@router.get("/specialties/list", response_model=SpecialtyList)
async def list_specialties(db: Session = Depends(get_db)):
    return SpecialtyList(specialties=DoctorService(db).list_specialties())


@router.get("/{doctor_id}", response_model=DoctorEnvelope)
async def get_doctor(doctor_id: int, db: Session = Depends(get_db)):
    doctor = DoctorService(db).get_doctor(doctor_id)
    return DoctorEnvelope(doctor=DoctorResponse.model_validate(doctor))
