from sqlalchemy.orm import Session
import logging

from ..models.user import User
from ..core.security import UserRole
from ..schemas.user import ProfileUpdate, Availability

logger = logging.getLogger(__name__)

COMMON_FIELDS = ("first_name", "last_name", "phone", "profile_picture")
DOCTOR_FIELDS = ("specialty", "years_of_experience", "medical_school")
PATIENT_FIELDS = ("date_of_birth", "blood_type", "allergies", "chronic_conditions")


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def update_profile(self, user: User, profile: ProfileUpdate) -> User:
        """Apply the fields the user's role may change; others are ignored."""
        allowed = COMMON_FIELDS
        if user.role == UserRole.DOCTOR:
            allowed += DOCTOR_FIELDS
        elif user.role == UserRole.PATIENT:
            allowed += PATIENT_FIELDS

        changes = profile.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if field not in allowed or value is None:
                continue
            if field not in COMMON_FIELDS and value in ("", []):
                continue
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def update_availability(self, user: User, availability: Availability) -> User:
        user.availability = availability.model_dump(exclude_none=True)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Updated availability for doctor {user.id}")
        return user
