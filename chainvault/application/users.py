"""
User use cases - registration, authentication and profile updates

Для кошельков и целей пользователь важен только как владелец:
exists-проверка делается через user_exists().
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chainvault.auth import hash_password, verify_password, get_user_by_identifier
from chainvault.application.errors import (
    AuthenticationError,
    BusinessRuleError,
    InvalidIdError,
    NotFoundError,
    ValidationFailed,
)
from chainvault.domain.validation import ErrorCollector, required
from chainvault.infrastructure.db.models import User
from chainvault.utils.ids import is_valid_id

logger = logging.getLogger(__name__)

USER_TIERS = ("free", "pro", "premium")
USER_EXISTS_MESSAGE = "User with this email or username already exists"

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


class UserValidationError(ValidationFailed):
    pass


def ensure_user_id(user_id: Any) -> str:
    if not is_valid_id(user_id):
        raise InvalidIdError("Invalid user ID format")
    return user_id


def user_exists(db: Session, user_id: str) -> bool:
    return db.query(User.id).filter(User.id == user_id).first() is not None


def user_to_dict(user: User) -> dict:
    """Публичное представление пользователя (без password_hash)"""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "tier": user.tier,
        "preferences": user.preferences or {},
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    }


def get_user_by_id(db: Session, user_id: str) -> dict | None:
    ensure_user_id(user_id)
    user = db.query(User).filter(User.id == user_id).first()
    return user_to_dict(user) if user else None


def list_users(db: Session) -> list[dict]:
    return [user_to_dict(u) for u in db.query(User).order_by(User.created_at.asc()).all()]


def _email_error(email: Any) -> str | None:
    if not isinstance(email, str) or not _EMAIL_RE.fullmatch(email.strip()):
        return "Invalid email format"
    return None


def _tier_error(tier: Any) -> str | None:
    if tier not in USER_TIERS:
        return f"Tier must be one of: {', '.join(USER_TIERS)}"
    return None


class RegisterUserUseCase:
    """Use case: Зарегистрировать пользователя"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, username: str, email: str, password: str, tier: str = "free") -> dict:
        errors = ErrorCollector()
        errors.add("username", required(username, "Username"))
        errors.add("email", required(email, "Email") or _email_error(email))
        errors.add("password", required(password, "Password"))
        if isinstance(password, str) and password and len(password) < 6:
            errors.add("password", "Password must be at least 6 characters")
        errors.add("tier", _tier_error(tier))
        if errors:
            raise UserValidationError(errors.result())

        username = username.strip()
        email = email.strip().lower()

        existing = self.db.query(User).filter(
            or_(User.email == email, User.username == username)
        ).first()
        if existing:
            raise BusinessRuleError(USER_EXISTS_MESSAGE)

        now = datetime.now(timezone.utc)
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            tier=tier,
            preferences={},
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise BusinessRuleError(USER_EXISTS_MESSAGE)

        logger.info("User created: id=%s username=%s", user.id, user.username)
        return user_to_dict(user)


class AuthenticateUserUseCase:
    """Use case: Вход по username или email"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, identifier: str, password: str) -> dict:
        user = get_user_by_identifier(self.db, identifier.strip())
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid username/email or password")

        logger.info("User authenticated: id=%s", user.id)
        return user_to_dict(user)


class UpdateUserUseCase:
    """Use case: Обновить профиль (username, email, tier, preferences)"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: str, **changes) -> dict:
        ensure_user_id(user_id)
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        errors = ErrorCollector()
        if "username" in changes:
            errors.add("username", required(changes["username"], "Username"))
        if "email" in changes:
            errors.add("email", required(changes["email"], "Email") or _email_error(changes["email"]))
        if "tier" in changes:
            errors.add("tier", _tier_error(changes["tier"]))
        if "preferences" in changes and not isinstance(changes["preferences"], dict):
            errors.add("preferences", "Preferences must be an object")
        if errors:
            raise UserValidationError(errors.result())

        if "username" in changes:
            user.username = changes["username"].strip()
        if "email" in changes:
            user.email = changes["email"].strip().lower()
        if "tier" in changes:
            user.tier = changes["tier"]
        if "preferences" in changes:
            # Мержим, а не заменяем: клиент обычно шлёт один ключ (theme и т.п.)
            user.preferences = {**(user.preferences or {}), **changes["preferences"]}
        user.updated_at = datetime.now(timezone.utc)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise BusinessRuleError(USER_EXISTS_MESSAGE)

        logger.info("User updated: id=%s fields=%s", user_id, sorted(changes))
        return user_to_dict(user)


class DeleteUserUseCase:
    """Use case: Удалить пользователя"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: str) -> dict:
        ensure_user_id(user_id)
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        self.db.delete(user)
        self.db.commit()

        logger.info("User deleted: id=%s", user_id)
        return {"id": user_id, "message": "User deleted successfully"}
