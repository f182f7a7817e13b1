"""
Validation result types and shared field validators

Валидаторы не бросают исключения: они собирают все ошибки в Invalid,
а сервисный слой решает, что с ними делать.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class Ok:
    """Успешная валидация (с опционально нормализованными данными)"""
    value: dict = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    """Неуспешная валидация: список ошибок по полям"""
    errors: tuple[FieldError, ...]

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def message(self) -> str:
        """Ошибки одной строкой через ", " (для ответа API)"""
        return ", ".join(e.message for e in self.errors)

    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


ValidationResult = Union[Ok, Invalid]


class ErrorCollector:
    """
    Накопитель ошибок валидации

    Usage:
        errors = ErrorCollector()
        errors.add("label", required(payload.get("label"), "Wallet label"))
        if errors:
            return errors.result()
    """

    def __init__(self):
        self._errors: list[FieldError] = []

    def add(self, field_name: str, message: str | None) -> None:
        if message:
            self._errors.append(FieldError(field_name, message))

    def __bool__(self) -> bool:
        return bool(self._errors)

    def result(self, value: dict | None = None) -> ValidationResult:
        if self._errors:
            return Invalid(tuple(self._errors))
        return Ok(value or {})


# === Field validators: None если всё ок, иначе текст ошибки ===

def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def required(value: Any, field_name: str) -> str | None:
    if is_blank(value):
        return f"{field_name} is required"
    if not isinstance(value, str):
        return f"{field_name} must be a string"
    return None


def is_number(value: Any) -> bool:
    # bool - подкласс int, но суммой не считается; NaN и бесконечности тоже
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return isinstance(value, int) or math.isfinite(value)


def non_negative_number(value: Any, field_name: str) -> str | None:
    if not is_number(value) or value < 0:
        return f"{field_name} must be a non-negative number"
    return None


def positive_number(value: Any, field_name: str) -> str | None:
    if not is_number(value) or value <= 0:
        return f"{field_name} must be a positive number"
    return None


def number_range(value: Any, low: float, high: float, field_name: str) -> str | None:
    if not is_number(value) or value < low or value > high:
        return f"{field_name} must be between {low} and {high}"
    return None
