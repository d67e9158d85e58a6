# auth/security.py
import binascii
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError

# クライアントがトークンを載せるヘッダー
AUTH_HEADER = "x-auth-token"

PASSWORD_SCHEME = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 200_000


def hash_password(password: str, iterations: int = PASSWORD_ITERATIONS) -> str:
    """PBKDF2-SHA256 でパスワードをハッシュ化する"""
    if not password:
        raise ValueError("Password is required")
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return (
        f"{PASSWORD_SCHEME}${iterations}$"
        f"{binascii.hexlify(salt).decode('ascii')}$"
        f"{binascii.hexlify(digest).decode('ascii')}"
    )


def verify_password(password: str, stored_hash: str) -> bool:
    if not password or not stored_hash:
        return False
    try:
        scheme, iterations_raw, salt_hex, digest_hex = stored_hash.split("$", 3)
        if scheme != PASSWORD_SCHEME:
            return False
        iterations = int(iterations_raw)
        salt = binascii.unhexlify(salt_hex.encode("ascii"))
        expected = binascii.unhexlify(digest_hex.encode("ascii"))
    except (ValueError, binascii.Error):
        return False

    actual = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(actual, expected)


def create_access_token(
    user_id: UUID,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60 * 24 * 7,
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> UUID:
    """
    トークンを検証してユーザーIDを返す
    署名不正・期限切れ・sub なしはすべて JWTError
    """
    payload = jwt.decode(token, secret, algorithms=[algorithm])

    user_id = payload.get("sub")
    if not user_id:
        raise JWTError("Missing subject claim")
    try:
        return UUID(user_id)
    except ValueError as e:
        raise JWTError(f"Invalid subject claim: {e}")
