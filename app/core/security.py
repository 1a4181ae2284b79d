"""
Security utilities for authentication and authorization
Patient identity comes from a bearer JWT issued by the auth service
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings
from .exceptions import UnauthorizedException, ForbiddenException

# Security scheme
security = HTTPBearer(auto_error=False)

class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def create_access_token(
        subject: Any,
        role: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create JWT access token"""
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=30))
        to_encode = {"sub": str(subject), "role": role, "exp": expire}
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """Decode and validate JWT token"""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise UnauthorizedException("Invalid authentication credentials")

async def get_current_patient(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> int:
    """
    Resolve the authenticated patient id

    Raises:
        UnauthorizedException: missing or invalid token
        ForbiddenException: token does not belong to a patient
    """
    if credentials is None:
        raise UnauthorizedException("Missing bearer token")

    payload = SecurityUtils.decode_token(credentials.credentials)

    if payload.get("role") != settings.PATIENT_ROLE:
        raise ForbiddenException("Patients only")

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedException("Invalid token subject")
