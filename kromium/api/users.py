from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..api.deps import get_current_user, get_doctor_user
from ..services.user_service import UserService
from ..schemas.user import AvailabilityUpdate, ProfileUpdate, UserEnvelope, UserProfile
from ..models.user import User

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=UserEnvelope)
async def get_profile(current_user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserProfile.model_validate(current_user))


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    profile: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the caller's profile; role specific fields apply to that role only."""
    user = UserService(db).update_profile(current_user, profile)
    return UserEnvelope(user=UserProfile.model_validate(user))


@router.put("/availability", response_model=UserEnvelope)
async def update_availability(
    payload: AvailabilityUpdate,
    current_user: User = Depends(get_doctor_user),
    db: Session = Depends(get_db)
):
    """Replace the doctor's weekly availability."""
    user = UserService(db).update_availability(current_user, payload.availability)
    return UserEnvelope(user=UserProfile.model_validate(user))
