# app/services/auth_service.py
import re

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel, ROLE_USER
from app.domain.errors import AuthError, ConflictError, ValidationError
from app.repos.user_repo import UserRepo
from app.utils.settings import BCRYPT_ROUNDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9_]{4,16}$")
PASSWORD_RE = re.compile(
    r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z])(?=.*[!@#$%^&*()_+\"';\[\]])"
    r"[A-Za-z\d!@#$%^&*()_+\"';\[\]]{8,}$",
    re.ASCII,
)
#bcrypt nie przyjmuje dluzszych hasel
MAX_PASSWORD_BYTES = 72

USERNAME_MESSAGE = (
    "Username must be 4-16 characters long and can only contain letters, numbers, and underscores."
)
PASSWORD_MESSAGE = (
    "Password must be at least 8 characters long, contain at least one lowercase letter, "
    "one uppercase letter, one digit, and one special character."
)
PASSWORD_TOO_LONG_MESSAGE = f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes."
LOGIN_FAILED_MESSAGE = "Invalid username or password"


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)
        self.db = db

    def register(self, username: str, password: str) -> UserModel:
        if not USERNAME_RE.fullmatch(username):
            raise ValidationError(USERNAME_MESSAGE)

        if not PASSWORD_RE.fullmatch(password):
            raise ValidationError(PASSWORD_MESSAGE)

        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(PASSWORD_TOO_LONG_MESSAGE)

        if self.repo.get_by_username(username):
            logger.info(f"Signup rejected, username {username} taken")
            raise ConflictError("Username already taken")

        user = UserModel(
            username=username,
            password_hash=hash_password(password),
            role=ROLE_USER,
        )

        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            #dwa rownolegle signupy - unique constraint rozstrzyga
            self.db.rollback()
            raise ConflictError("Username already taken")

        logger.info(f"Zarejestrowano uzytkownika {created.id} ({created.username})")
        return created

    def authenticate(self, username: str, password: str) -> UserModel:
        user = self.repo.get_by_username(username)

        #powod logujemy, klient dostaje jeden komunikat
        if not user:
            logger.warning(f"Login failed: incorrect username {username!r}")
            raise AuthError(LOGIN_FAILED_MESSAGE)

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: incorrect password for user {user.id}")
            raise AuthError(LOGIN_FAILED_MESSAGE)

        logger.info(f"Uzytkownik {user.id} zalogowany")
        return user


def user_out(user: UserModel) -> dict:
    """Publiczny widok usera - bez password_hash."""
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "cart": [line.id for line in user.cart],
    }
