# ============================================================================
# FILE: app/api/dependencies.py
# Authentication and tenant-resolution dependencies
# ============================================================================
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from app.config.database import get_db
from app.config.settings import settings
from app.core.exceptions import UnauthorizedError
from app.models.business import Business
from app.services.booking.booking_lock import BookingLock
from app.services.business.business_service import BusinessService

# ============================================================================
# Security Schemes
# ============================================================================

# JWT security for business owners (tokens come from the auth service)
jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter your JWT access token"
)


# ============================================================================
# JWT Token Functions
# ============================================================================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Login flows live in the auth service; this is used by scripts and tests.

    Args:
        data: Dictionary with claims (should include 'sub' with the owner id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access"
    })

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def verify_access_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


# ============================================================================
# Dashboard Dependencies
# ============================================================================

async def get_current_owner_id(
        credentials: HTTPAuthorizationCredentials = Depends(jwt_security)
) -> str:
    """
    Owner id ('sub' claim) of the authenticated caller.

    Raises:
        HTTPException 401: If token is invalid or has no subject
    """
    payload = verify_access_token(credentials.credentials)

    owner_id: Optional[str] = payload.get("sub")
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return owner_id


def get_current_business(
        owner_id: str = Depends(get_current_owner_id),
        db: Session = Depends(get_db)
) -> Business:
    """
    Business owned by the caller.
    A caller without a business gets the same 404 as any missing resource.
    """
    business = BusinessService.get_business_by_owner(db, owner_id)
    if business is None:
        raise UnauthorizedError("Business not found")
    return business


# ============================================================================
# Booking Dependencies
# ============================================================================

def get_booking_lock(request: Request) -> BookingLock:
    """Lock backend built at startup (see app.main lifespan)"""
    return request.app.state.booking_lock
