from datetime import datetime, timedelta

import bcrypt
from jose import jwt

from skillshots.core.config import Configuration

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt"""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user_id: str, config: Configuration) -> str:
    expires = datetime.utcnow() + timedelta(days=config.jwt_expire_days)
    payload = {"sub": user_id, "exp": expires}
    return jwt.encode(payload, config.jwt_secret_key, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: Configuration) -> dict:
    """Raises JWTError for a bad signature or an expired token."""
    return jwt.decode(token, config.jwt_secret_key, algorithms=[config.jwt_algorithm])

