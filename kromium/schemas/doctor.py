from typing import List, Optional

from .common import CamelModel, Pagination
from .user import Availability


class DoctorResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    specialty: Optional[str] = None
    years_of_experience: Optional[int] = None
    medical_school: Optional[str] = None
    rating: float = 0.0
    review_count: int = 0
    is_verified: bool = False
    availability: Optional[Availability] = None


class DoctorEnvelope(CamelModel):
    success: bool = True
    doctor: DoctorResponse


class DoctorList(CamelModel):
    success: bool = True
    count: int
    pagination: Pagination
    doctors: List[DoctorResponse]


class SpecialtyList(CamelModel):
    success: bool = True
    specialties: List[str]
