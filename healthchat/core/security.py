import datetime

import bcrypt
import jwt

from healthchat.core.config import get_jwt_secret, get_jwt_expire_minutes

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_token(data: dict, expires_minutes: int | None = None) -> str:
    payload = dict(data)
    minutes = expires_minutes if expires_minutes is not None else get_jwt_expire_minutes()
    payload["exp"] = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=minutes)
    return jwt.encode(payload, get_jwt_secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict | None:
    """Payload dict, or None when the token is expired or tampered with."""
    try:
        return jwt.decode(token, get_jwt_secret(), algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None
