import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from auth.security import AUTH_HEADER, decode_access_token
from config import Settings
from db.database import get_db
from models.user import User

logger = logging.getLogger(__name__)

# モバイルクライアントは x-auth-token を送る。Authorization: Bearer も受け付ける
token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)
bearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
    )


def get_current_user(
    header_token: Optional[str] = Depends(token_header),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> User:
    token = header_token or (credentials.credentials if credentials else None)
    if not token:
        raise _unauthorized("Missing auth token")

    try:
        user_id = decode_access_token(token, settings.jwt_secret, settings.jwt_algorithm)
    except JWTError as e:
        logger.warning("JWT verification failed: %s", e)
        raise _unauthorized("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        # 署名は正しいがユーザーが消えている
        logger.warning("Token for unknown user %s", user_id)
        raise _unauthorized("Invalid or expired token")

    return user
