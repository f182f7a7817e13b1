"""
Password hashing and credential lookup
"""
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.orm import Session

from chainvault.infrastructure.db.models import User

# pbkdf2_sha256: основная схема
# bcrypt: только проверка старых хэшей
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def get_user_by_identifier(db: Session, identifier: str) -> User | None:
    """Найти пользователя по username или email"""
    return db.query(User).filter(
        or_(User.username == identifier, User.email == identifier.lower())
    ).first()
