from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.database import get_db
from ..api.deps import get_current_user, rate_limit
from ..services.auth_service import AuthService
from ..schemas.auth import UserLogin, UserRegister, TokenResponse, RefreshTokenRequest
from ..schemas.common import MessageResponse
from ..schemas.user import UserEnvelope, UserProfile
from ..models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])

auth_rate_limit = rate_limit(
    "auth",
    max_requests=settings.AUTH_RATE_LIMIT_PER_HOUR,
    window_seconds=3600,
)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    _: None = Depends(auth_rate_limit)
):
    """Register a new patient or doctor and return access tokens."""
    return AuthService(db).register_user(user_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(auth_rate_limit)
):
    """Authenticate user and return access tokens."""
    return AuthService(db).authenticate_user(login_data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    """Refresh access token using refresh token."""
    return AuthService(db).refresh_access_token(refresh_data.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    refresh_data: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    """Logout user by revoking refresh token."""
    AuthService(db).logout_user(refresh_data.refresh_token)
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=UserEnvelope)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return UserEnvelope(user=UserProfile.model_validate(current_user))
