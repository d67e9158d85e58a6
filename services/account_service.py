import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from auth.security import hash_password, verify_password
from models.user import User
from services.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    StoreError,
)

logger = logging.getLogger(__name__)


def find_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email.strip().lower()).first()


def register_user(db: Session, email: str, password: str) -> User:
    """
    新規ユーザーを作成する
    同じメールアドレスがあれば EmailAlreadyRegisteredError
    """
    email = email.strip().lower()
    if find_user_by_email(db, email) is not None:
        raise EmailAlreadyRegisteredError(email)

    user = User(email=email, password_hash=hash_password(password))
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # 同時登録で unique 制約に当たった
        db.rollback()
        raise EmailAlreadyRegisteredError(email)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Could not create user")
        raise StoreError("Could not create user") from e

    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = find_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError()
    return user
