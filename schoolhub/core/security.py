# schoolhub/core/security.py
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt
from passlib.context import CryptContext

from schoolhub.core.config import settings, get_jwt_settings, get_token_expires_delta
from schoolhub.core.errors import AuthenticationError
from schoolhub.core.logging import logger
from schoolhub.schemas.enums import Role


class SecurityConfig:
    """Token constants shared by issuing and verification"""
    ACCESS_TOKEN_TYPE = "access"
    TOKEN_ID_BYTES = 16


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.PASSWORD_HASH_ROUNDS
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a stored hash passlib cannot identify."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


def create_token(
    data: Dict[str, Any],
    token_type: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Sign ``data`` as a JWT of ``token_type``; the default lifetime comes from settings."""
    jwt_settings = get_jwt_settings()
    claims = {
        **data,
        "exp": datetime.now(timezone.utc) + (expires_delta or get_token_expires_delta()),
        "iss": jwt_settings["token_issuer"],
        "type": token_type,
        "jti": secrets.token_urlsafe(SecurityConfig.TOKEN_ID_BYTES),
    }
    return jwt.encode(claims, jwt_settings["secret_key"], algorithm=jwt_settings["algorithm"])


def create_access_token(user_id: Union[int, str], role: Role) -> str:
    """Session token for one account; ``role`` tells which account table ``sub`` refers to."""
    return create_token({"sub": str(user_id), "role": role.value}, SecurityConfig.ACCESS_TOKEN_TYPE)


def verify_token(token: str, token_type: Optional[str] = SecurityConfig.ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """
    Decode a token issued by :func:`create_token`.

    Raises:
        AuthenticationError: bad signature, wrong issuer, expired, or of another type
    """
    jwt_settings = get_jwt_settings()
    try:
        payload = jwt.decode(
            token,
            jwt_settings["secret_key"],
            algorithms=[jwt_settings["algorithm"]],
            issuer=jwt_settings["token_issuer"]
        )
    except JWTError as e:
        logger.info(f"Token verification failed: {str(e)}")
        raise AuthenticationError("Could not validate credentials", error_code="TOKEN_ERROR")

    if token_type and payload.get("type") != token_type:
        raise AuthenticationError(f"Invalid token type. Expected {token_type}", error_code="TOKEN_ERROR")
    return payload


def sanitize_filename(filename: str) -> str:
    """Replace anything outside ``[A-Za-z0-9._-]`` so a name cannot leave its folder"""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)
