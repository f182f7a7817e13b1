"""
Opaque record identifiers (UUID strings)
"""
import uuid
from typing import Any


def new_id() -> str:
    """Сгенерировать новый идентификатор записи"""
    return str(uuid.uuid4())


def is_valid_id(value: Any) -> bool:
    """
    Проверить, что значение похоже на идентификатор записи

    Проверяется только форма, в БД не ходим.

    Example:
        >>> is_valid_id("0b8c5f0e-6a55-4d7a-9d3e-3c2f1f8f4a10")
        True
        >>> is_valid_id("not-an-id")
        False
    """
    if not isinstance(value, str) or not value:
        return False
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    # Только каноническая форма: в БД id хранятся именно так
    return str(parsed) == value
