from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from dashboard.core.config import Settings
from dashboard.core.errors import AuthError

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_TYPE = "customer"


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    # customers created from the dashboard have no password at all
    if not hashed:
        pwd_ctx.dummy_verify()
        return False
    try:
        return pwd_ctx.verify(plain, hashed)
    except ValueError:
        # unrecognised / corrupt hash
        return False


def dummy_verify() -> None:
    """Burn the same bcrypt time as a real check, for unknown emails."""
    pwd_ctx.dummy_verify()


def create_token(
    settings: Settings,
    subject: Any,
    email: str,
    role: str,
    expires_minutes: Optional[int] = None,
) -> str:
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    to_encode = {
        "sub": str(subject),
        "email": email,
        "role": role,
        "type": TOKEN_TYPE,
        "exp": expires,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(settings: Settings, token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise AuthError("Token has expired")
    except JWTError:
        raise AuthError("Invalid token")
