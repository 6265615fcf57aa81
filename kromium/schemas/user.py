from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field

from ..core.security import UserRole
from .common import CamelModel

BloodType = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-", ""]


class DayAvailability(CamelModel):
    enabled: bool = False
    start: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    end: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class Availability(CamelModel):
    monday: Optional[DayAvailability] = None
    tuesday: Optional[DayAvailability] = None
    wednesday: Optional[DayAvailability] = None
    thursday: Optional[DayAvailability] = None
    friday: Optional[DayAvailability] = None
    saturday: Optional[DayAvailability] = None
    sunday: Optional[DayAvailability] = None


class UserResponse(CamelModel):
    """Public view of an account, returned by the auth endpoints."""

    id: int
    first_name: str
    last_name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    specialty: Optional[str] = None
    profile_picture: Optional[str] = None
    is_verified: bool = False


class UserProfile(UserResponse):
    """Full profile, including the role specific sections."""

    license_number: Optional[str] = None
    years_of_experience: Optional[int] = None
    medical_school: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    availability: Optional[Availability] = None
    date_of_birth: Optional[date] = None
    blood_type: Optional[str] = None
    allergies: List[str] = []
    chronic_conditions: List[str] = []
    created_at: Optional[datetime] = None


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    profile_picture: Optional[str] = None

    # doctor only
    specialty: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0, le=80)
    medical_school: Optional[str] = None

    # patient only
    date_of_birth: Optional[date] = None
    blood_type: Optional[BloodType] = None
    allergies: Optional[List[str]] = None
    chronic_conditions: Optional[List[str]] = None


class AvailabilityUpdate(CamelModel):
    availability: Availability


class UserEnvelope(CamelModel):
    success: bool = True
    user: UserProfile


class PatientSummary(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


class DoctorSummary(CamelModel):
    id: int
    first_name: str
    last_name: str
    specialty: Optional[str] = None
