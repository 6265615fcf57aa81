from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from datetime import datetime, timedelta, timezone
import logging

from ..models.user import User, RefreshToken
from ..core.security import (
    verify_password, get_password_hash, create_token_pair,
    verify_token, hash_token, UserRole
)
from ..schemas.auth import UserLogin, UserRegister, TokenResponse
from ..schemas.user import UserResponse

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # Naive UTC, matching the DateTime columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> TokenResponse:
        """Register a new user and sign them in."""
        existing_user = self.db.query(User).filter(
            User.email == user_data.email
        ).first()

        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists with this email"
            )

        new_user = User(
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=UserRole(user_data.role),
            phone=user_data.phone or "",
            is_active=True,
        )

        if new_user.role == UserRole.DOCTOR:
            if not user_data.has_doctor_credentials:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="All doctor verification fields are required"
                )
            new_user.specialty = user_data.specialty
            new_user.license_number = user_data.license_number
            new_user.years_of_experience = user_data.years_of_experience
            new_user.medical_school = user_data.medical_school
            # Doctors are verified on sign-up
            new_user.is_verified = True
            new_user.rating = 5.0
            new_user.review_count = 0

        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)
        logger.info(f"Registered {new_user.role.value} account {new_user.id}")

        return self._issue_tokens(new_user, "User registered successfully!")

    def authenticate_user(self, login_data: UserLogin) -> TokenResponse:
        """Check credentials and issue a fresh token pair."""
        user = self.db.query(User).filter(
            User.email == login_data.email
        ).first()

        if not user or not verify_password(login_data.password, user.password_hash):
            logger.info(f"Failed login for {login_data.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account is deactivated"
            )

        return self._issue_tokens(user, "Login successful!")

    def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """Rotate a refresh token: revoke it and issue a new pair."""
        token_payload = verify_token(refresh_token)
        if not token_payload or token_payload.token_type != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token"
            )

        stored_token = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token),
            RefreshToken.is_revoked == False,  # noqa: E712
            RefreshToken.expires_at > _utcnow()
        ).first()

        if not stored_token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired refresh token"
            )

        user = self.db.query(User).filter(
            User.id == token_payload.user_id
        ).first()

        if not user or not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found or inactive"
            )

        stored_token.is_revoked = True
        return self._issue_tokens(user)

    def logout_user(self, refresh_token: str) -> bool:
        """Revoke the given refresh token; unknown tokens are ignored."""
        stored_token = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token)
        ).first()

        if not stored_token:
            return False

        stored_token.is_revoked = True
        self.db.commit()
        return True

    def _issue_tokens(self, user: User, message: str = None) -> TokenResponse:
        tokens = create_token_pair(user.id, user.email, user.role)
        self._store_refresh_token(user.id, tokens.refresh_token)
        self.db.commit()

        return TokenResponse(
            token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            user=UserResponse.model_validate(user),
            message=message,
        )

    def _store_refresh_token(self, user_id: int, refresh_token: str):
        """Persist the sha256 hash of a refresh token with its expiry."""
        token_payload = verify_token(refresh_token)
        if token_payload and token_payload.exp:
            expires_at = datetime.fromtimestamp(token_payload.exp, tz=timezone.utc).replace(tzinfo=None)
        else:
            expires_at = _utcnow() + timedelta(days=7)

        self.db.add(RefreshToken(
            user_id=user_id,
            token_hash=hash_token(refresh_token),
            expires_at=expires_at
        ))
