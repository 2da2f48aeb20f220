# app/utils/security.py
from datetime import datetime, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.config.security import SecurityConfig

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with a freshly generated salt"""
    salt = bcrypt.gensalt(rounds=SecurityConfig.PASSWORDS['bcrypt_rounds'])
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a candidate password against a stored hash"""
    if not plain_password or not hashed_password:
        return False
    candidate = plain_password.encode("utf-8")
    if len(candidate) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(candidate, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(data: dict, expires_delta=None) -> str:
    to_encode = data.copy()
    lifetime = expires_delta or SecurityConfig.get_token_lifetime()
    to_encode.update({"exp": datetime.now(timezone.utc) + lifetime})
    return jwt.encode(
        to_encode,
        SecurityConfig.JWT['secret'],
        algorithm=SecurityConfig.JWT['algorithm'],
    )


def decode_access_token(token: str) -> Optional[dict]:
    """Decode a token, returning None when it is invalid or expired"""
    try:
        return jwt.decode(
            token,
            SecurityConfig.JWT['secret'],
            algorithms=[SecurityConfig.JWT['algorithm']],
        )
    except JWTError:
        return None


def create_user_token(user) -> str:
    """Issue a signed token carrying the user's id, email and role"""
    return create_access_token(
        data={"sub": user.email, "id": user.id, "email": user.email, "role": user.role}
    )
