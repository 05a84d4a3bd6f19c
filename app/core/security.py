# app/core/security.py
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import jwt
from passlib.context import CryptContext
from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
ALGORITHM = "HS256"


def _pre_hash_password(password: str) -> str:
    """
    bcrypt only looks at the first 72 bytes. Longer secrets are reduced to
    their SHA-256 hexdigest (64 chars) so the whole password counts.
    """
    if len(password.encode("utf-8")) <= 72:
        return password
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(_pre_hash_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_pre_hash_password(plain_password), hashed_password)


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    data: Optional[dict] = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    # Display claims only; authorization always re-reads the user row
    to_encode = dict(data or {})
    to_encode.update({
        "sub": str(subject),
        "exp": expire,
        "iat": now,
        "nbf": now,
    })

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    # Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError to the caller
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[ALGORITHM],
        options={"verify_exp": True}
    )
