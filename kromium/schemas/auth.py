from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel
from .user import UserResponse


class UserRegister(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Literal["patient", "doctor"] = "patient"
    phone: Optional[str] = ""

    # Doctor verification
    specialty: Optional[str] = None
    license_number: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0, le=80)
    medical_school: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()

    @property
    def has_doctor_credentials(self) -> bool:
        return all([
            self.specialty,
            self.license_number,
            self.years_of_experience,
            self.medical_school,
        ])


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class RefreshTokenRequest(CamelModel):
    refresh_token: str


class TokenResponse(CamelModel):
    success: bool = True
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
    message: Optional[str] = None
