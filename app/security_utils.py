"""
Security Utilities
Password hashing compatible with the legacy PHP user store, session tokens
and audit logging.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Laravel's Hash::make writes $2y$ digests with cost 10; keep writing the same
# so the PHP application can still verify passwords changed here.
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2y",
    bcrypt__rounds=10,
)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def normalize_bcrypt_hash(hashed_password: str) -> str:
    """Rewrite a PHP $2y$ digest to the equivalent $2b$ form"""
    if hashed_password.startswith("$2y$"):
        return "$2b$" + hashed_password[4:]
    return hashed_password


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt ($2y$, cost 10)"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: str) -> bool:
    """Verify password against a $2a$/$2b$/$2y$ bcrypt hash"""
    if not hashed_password or not hashed_password.startswith(BCRYPT_PREFIXES):
        logger.warning("⚠️ Stored password is not a bcrypt digest")
        return False
    try:
        return pwd_context.verify(plain_password, normalize_bcrypt_hash(hashed_password))
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# SESSION TOKENS
# ============================================================================


def create_session_token(
    login: str, level: Optional[str] = None, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Signed session token for a user login.

    Args:
        login: User login, stored as the `sub` claim
        level: Access level shown to the panel (informational only)
        expires_delta: Lifetime, ACCESS_TOKEN_EXPIRE_MINUTES when omitted
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    claims: dict[str, Any] = {"sub": login, "exp": datetime.utcnow() + lifetime}
    if level:
        claims["level"] = level
    return jose_jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    """Login carried by a session token, None when it is forged, malformed or expired"""
    try:
        claims = jose_jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"⚠️ Session token rejected: {e}")
        return None
    return claims.get("sub") or None


# ============================================================================
# AUDIT LOGGING
# ============================================================================


def log_auth_event(event: str, login: Optional[str], ip_address: Optional[str] = None, **details):
    """Audit line for login attempts (`login`, `failed_auth`)"""
    logger.info(
        f"AUTH_EVENT: event={event} login={login} ip={ip_address} "
        f"at={datetime.utcnow().isoformat()} details={details}"
    )
