from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import (
    security, verify_token, AuthenticationError,
    AuthorizationError, UserRole, TokenPayload
)
from ..models.user import User


async def get_current_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    if credentials is None:
        raise AuthenticationError("Not authorized to access this route - no token provided")

    token_payload = verify_token(credentials.credentials)
    if not token_payload:
        raise AuthenticationError("Invalid token")

    if token_payload.token_type != "access":
        raise AuthenticationError("Invalid token type")

    return token_payload


async def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from database."""
    if token_payload.user_id is None:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == token_payload.user_id).first()
    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


# Role-based access control dependencies
def require_role(*allowed_roles: UserRole):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"User role {current_user.role.value} is not authorized to access this route"
            )
        return current_user

    return role_checker


get_doctor_user = require_role(UserRole.DOCTOR)
get_patient_user = require_role(UserRole.PATIENT)


# Rate limiting
def rate_limit(scope: str, max_requests: int, window_seconds: int, detail: str = None):
    """Fixed-window request counter per client IP, kept in redis."""
    async def checker(
        request: Request,
        redis_client=Depends(get_redis)
    ) -> None:
        client_ip = request.client.host if request.client else "unknown"
        key = f"rate_limit:{scope}:{client_ip}"

        current_requests = redis_client.get(key)
        if current_requests is None:
            redis_client.setex(key, window_seconds, 1)
        elif int(current_requests) >= max_requests:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=detail or "Too many requests from this IP, please try again later."
            )
        else:
            redis_client.incr(key)

    return checker


# Applied to every router mounted under the API prefix
api_rate_limit = rate_limit(
    "api",
    max_requests=settings.API_RATE_LIMIT_PER_WINDOW,
    window_seconds=settings.API_RATE_LIMIT_WINDOW_SECONDS,
)
