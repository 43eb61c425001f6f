"""Authentication endpoints."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address

from invoicebox.config import settings
from invoicebox.models.user import Plan, User
from invoicebox.services.auth import RequireAuth, authenticate_user, create_access_token

router = APIRouter()

# Rate limiter for auth endpoints (stricter than global limit)
limiter = Limiter(key_func=get_remote_address)


class UserResponse(BaseModel):
    """Current vendor account."""

    id: str
    email: str
    full_name: str | None
    company_name: str | None
    plan: Plan
    logo_url: str | None
    is_active: bool
    created_at: datetime
    last_login: datetime | None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        """Create UserResponse from User model."""
        return cls(
            id=str(user.id),
            email=user.email,
            full_name=user.full_name,
            company_name=user.company_name,
            plan=user.plan,
            logo_url=user.logo_url,
            is_active=user.is_active,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class Token(BaseModel):
    """Token response model."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: RequireAuth) -> UserResponse:
    """Get the current authenticated user's information."""
    return UserResponse.from_user(current_user)


@router.post("/token", response_model=Token)
@limiter.limit(f"{settings.auth_rate_limit_per_minute}/minute")
async def login_token(
    request: Request,  # Required for rate limiting
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
) -> Token:
    """Login with email and password to get an access token.

    OAuth2 names the field 'username'; it carries the email.
    """
    user = await authenticate_user(
        form_data.username,
        form_data.password,
        get_remote_address(request),
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user.last_login = datetime.now(timezone.utc)
    await user.save()

    return Token(
        access_token=create_access_token(data={"sub": user.email}),
        expires_in=settings.token_expire_minutes * 60,
    )
