from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from auth.deps import get_current_user, get_settings
from auth.security import create_access_token
from config import Settings
from db.database import get_db
from models.user import User
from schemas.auth import Credentials, TokenResponse, UserResponse
from services.account_service import authenticate_user, register_user
from services.errors import EmailAlreadyRegisteredError, InvalidCredentialsError

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"],
)


def _issue_token(user: User, settings: Settings) -> TokenResponse:
    token = create_access_token(
        user.id,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_expires_minutes,
    )
    return TokenResponse(token=token)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: Credentials,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user = register_user(db, body.email, body.password)
    except EmailAlreadyRegisteredError:
        raise HTTPException(status_code=400, detail="User already exists")
    return _issue_token(user, settings)


@router.post("/login", response_model=TokenResponse)
def login(
    body: Credentials,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user = authenticate_user(db, body.email, body.password)
    except InvalidCredentialsError:
        raise HTTPException(status_code=400, detail="Invalid credentials")
    return _issue_token(user, settings)


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    """
    現在ログイン中のユーザー情報を返すAPI
    （トークンが正しく検証されないと動かない）
    """
    return user
