"""
Caller identity
Tokens are issued by an external identity provider; this module only decodes
them into a Caller (id + role) for the HTTP adapter.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from enum import Enum
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from hotel_booking.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_HOURS = 24

security = HTTPBearer()


class CallerRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Caller:
    id: str
    role: CallerRole

    @property
    def is_admin(self) -> bool:
        return self.role == CallerRole.ADMIN


def create_access_token(caller_id: str, role: CallerRole) -> str:
    """Issue a token (trusted issuers and test fixtures)"""
    expire = datetime.now(UTC) + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode = {
        "sub": str(caller_id),
        "role": CallerRole(role).value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Caller:
    payload = decode_token(credentials.credentials)

    caller_id = payload.get("sub")
    if not caller_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject"
        )

    try:
        role = CallerRole(payload.get("role", CallerRole.USER.value))
    except ValueError:
        logger.warning(f"Token for {caller_id} carries unknown role {payload.get('role')!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown role"
        )

    return Caller(id=str(caller_id), role=role)


async def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required"
        )
    return caller
