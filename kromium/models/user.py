from sqlalchemy import Column, Integer, String, DateTime, Date, Boolean, Float, JSON, Enum as SQLEnum
from sqlalchemy.sql import func

from ..core.database import Base
from ..core.security import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.PATIENT)
    phone = Column(String(30), nullable=True, default="")
    profile_picture = Column(String(500), nullable=True, default="")
    is_active = Column(Boolean, default=True)

    # Doctor profile
    specialty = Column(String(100), nullable=True, index=True)
    license_number = Column(String(50), nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    medical_school = Column(String(255), nullable=True)
    is_verified = Column(Boolean, default=False)
    rating = Column(Float, default=0.0)
    review_count = Column(Integer, default=0)
    # {"monday": {"enabled": true, "start": "09:00", "end": "17:00"}, ...}
    availability = Column(JSON, nullable=True)

    # Patient profile
    date_of_birth = Column(Date, nullable=True)
    blood_type = Column(String(3), default="")
    allergies = Column(JSON, default=list)
    chronic_conditions = Column(JSON, default=list)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def is_doctor(self) -> bool:
        return self.role == UserRole.DOCTOR

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    token_hash = Column(String(255), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    is_revoked = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<RefreshToken(id={self.id}, user_id={self.user_id})>"
