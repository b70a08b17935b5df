"""Authentication services - verifies identity-provider tokens."""
from datetime import datetime, timezone, timedelta
from typing import Optional

from fastapi import HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from auth.models import RequesterIdentity
from config import Config
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

logger = get_logger("auth.services")

security = HTTPBearer()


def _auth_error(code: ErrorCode) -> HTTPException:
    message, status_code = get_error_response(code)
    return HTTPException(status_code=status_code, detail=message)


# ---------- JWT functions ----------
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token (used by tooling and tests; the provider issues real ones)."""
    try:
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(days=Config.ACCESS_TOKEN_EXPIRE_DAYS)
        to_encode.update({"exp": int(expire.timestamp())})
        return jwt.encode(to_encode, Config.get_secret_key(), algorithm=Config.ALGORITHM)
    except ValueError:
        raise
    except Exception as e:
        logger.error(f"Error creating access token: {e}")
        raise RuntimeError("Failed to create authentication token")


def decode_token(token: str) -> dict:
    """Decode JWT token."""
    try:
        return jwt.decode(token, Config.get_secret_key(), algorithms=[Config.ALGORITHM])
    except ExpiredSignatureError:
        logger.info("JWT expired")
        raise _auth_error(ErrorCode.TOKEN_EXPIRED)
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _auth_error(ErrorCode.INVALID_TOKEN)
    except ValueError as e:
        logger.error(f"Cannot verify tokens: {e}")
        raise _auth_error(ErrorCode.CONFIGURATION_ERROR)


def identity_from_claims(payload: dict) -> RequesterIdentity:
    """Build the requester identity from token claims (sub + email)."""
    uid = payload.get("sub")
    if not uid:
        raise _auth_error(ErrorCode.MISSING_IDENTITY)
    return RequesterIdentity(id=str(uid), email=payload.get("email"))


# ---------- Auth dependency ----------
def get_current_identity(creds: HTTPAuthorizationCredentials = Depends(security)) -> RequesterIdentity:
    """Get the requester identity from the bearer token."""
    payload = decode_token(creds.credentials)
    return identity_from_claims(payload)
