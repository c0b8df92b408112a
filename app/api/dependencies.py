# ============================================================================
# app/api/dependencies.py
# Salon owner authentication: JWT verification and salon scoping
# ============================================================================
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config.settings import settings

OWNER_ROLE = "OWNER"
ACCESS_TOKEN_TYPE = "access"

owner_bearer = HTTPBearer(
    scheme_name="Owner JWT",
    description="Salon owner access token carrying a salon_id claim"
)
optional_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class OwnerContext:
    """Identity of an authenticated salon owner, taken from token claims"""
    user_id: str
    salon_id: UUID


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an owner access token.

    Tokens are normally issued by the auth service; this is used by tooling
    and tests that need to act as an owner.

    Args:
        data: claims, at least 'sub', 'salon_id' and 'role'
        expires_delta: lifetime, defaults to JWT_ACCESS_TOKEN_EXPIRE_MINUTES
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {**data, "iat": issued_at, "exp": issued_at + lifetime, "type": ACCESS_TOKEN_TYPE}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_access_token(token: str) -> dict:
    """Decode a token, rejecting bad signatures, expiry and non-access tokens with 401"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise _unauthorized(f"Could not validate credentials: {str(e)}")

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized("Invalid token type")

    return payload


def owner_from_claims(payload: dict) -> OwnerContext:
    """Owner scope from verified claims; any other role is 403"""
    if payload.get("role") != OWNER_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Owner only.")

    raw_salon_id = payload.get("salon_id")
    if not raw_salon_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Salon context required")

    try:
        salon_id = UUID(str(raw_salon_id))
    except ValueError:
        raise _unauthorized("Invalid salon ID in token")

    return OwnerContext(user_id=str(payload.get("sub", "")), salon_id=salon_id)


async def get_current_owner(
        credentials: HTTPAuthorizationCredentials = Depends(owner_bearer)
) -> OwnerContext:
    """
    Require an owner token and yield its salon scope.

        @router.patch("/{appointment_id}/confirm")
        def confirm(owner: OwnerContext = Depends(get_current_owner)):
            ...
    """
    return owner_from_claims(verify_access_token(credentials.credentials))


async def optional_current_owner(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer)
) -> Optional[OwnerContext]:
    """
    Owner scope when a token is sent, None otherwise.
    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return owner_from_claims(verify_access_token(credentials.credentials))
