"""
Goal domain rules - validation, normalization and derived progress
"""
import math
from datetime import date
from typing import Any, Mapping

from chainvault.domain.chain import resolve_chain, validate_address
from chainvault.domain.validation import (
    ErrorCollector,
    Ok,
    ValidationResult,
    is_blank,
    is_number,
    non_negative_number,
    number_range,
    positive_number,
    required,
)
from chainvault.utils.ids import is_valid_id

GOAL_TYPE_REGULAR = "regular"
GOAL_TYPE_PARENT = "parent"
GOAL_TYPE_SUBGOAL = "subgoal"
GOAL_TYPES = (GOAL_TYPE_REGULAR, GOAL_TYPE_PARENT, GOAL_TYPE_SUBGOAL)

DEFAULT_STATUS = "active"

# Поля, которые можно менять через update (всё, кроме владельца и timestamps)
GOAL_PATCH_FIELDS = (
    "name", "description", "status", "progress",
    "coin", "coin_symbol", "current_amount", "target_amount", "target_date",
    "wallet_id", "wallet_address", "wallet_chain",
    "goal_type", "parent_goal_id", "is_aggregate", "milestones", "notes",
)

EXCEEDS_TARGET_MESSAGE = "Current amount cannot exceed target amount"
HAS_SUBGOALS_MESSAGE = "Cannot delete goal with subgoals. Please delete subgoals first."


def progress_percentage(current_amount: float, target_amount: float) -> int:
    """
    Процент выполнения цели: round(current / target * 100)

    Округление half-up (12.5 -> 13), а не банковское как у round().

    Example:
        >>> progress_percentage(250, 1000)
        25
        >>> progress_percentage(1, 8)
        13
    """
    return math.floor(current_amount / target_amount * 100 + 0.5)


def _goal_type_error(goal_type: Any) -> str | None:
    if goal_type not in GOAL_TYPES:
        return f"Goal type must be one of: {', '.join(GOAL_TYPES)}"
    return None


def _parent_id_error(parent_goal_id: Any) -> str | None:
    if parent_goal_id and not is_valid_id(parent_goal_id):
        return "Invalid parent goal ID format"
    return None


def _exceeds_target(current_amount: Any, target_amount: Any) -> bool:
    return is_number(current_amount) and is_number(target_amount) and current_amount > target_amount


def _parse_target_date(value: Any) -> tuple[date | None, str | None]:
    if value is None or value == "":
        return None, None
    if isinstance(value, date):
        return value, None
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10]), None
        except ValueError:
            pass
    return None, "Target date must be an ISO date (YYYY-MM-DD)"


def _wallet_link_error(wallet_address: Any, wallet_chain: Any) -> str | None:
    # Привязку проверяем только когда известны и адрес, и сеть
    if is_blank(wallet_address) or is_blank(wallet_chain):
        return None
    return validate_address(wallet_address, wallet_chain)


def _clean_optional(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    return value


def _normalize_wallet_chain(value: Any) -> Any:
    """Алиас сети (eth, matic, ...) хранится каноническим именем"""
    chain = _clean_optional(value)
    if not isinstance(chain, str):
        return chain
    resolved = resolve_chain(chain)
    return resolved.value if resolved else chain.lower()


def validate_new_goal(payload: Mapping[str, Any]) -> ValidationResult:
    """
    Проверить payload создания цели

    Все проверки независимы, ошибки собираются в один список.
    Существование пользователя и родительской цели проверяет сервис.

    Returns:
        Ok(value=нормализованная запись без id/user_id/timestamps) или Invalid
    """
    name = payload.get("name")
    coin = payload.get("coin")
    coin_symbol = payload.get("coin_symbol")
    current_amount = payload.get("current_amount")
    target_amount = payload.get("target_amount")
    goal_type = payload.get("goal_type")
    parent_goal_id = payload.get("parent_goal_id")
    progress = payload.get("progress")
    milestones = payload.get("milestones")

    errors = ErrorCollector()
    errors.add("name", required(name, "Goal name"))
    errors.add("coin", required(coin, "Coin"))
    errors.add("coin_symbol", required(coin_symbol, "Coin symbol"))
    errors.add("current_amount", non_negative_number(current_amount, "Current amount"))
    errors.add("target_amount", positive_number(target_amount, "Target amount"))
    if _exceeds_target(current_amount, target_amount):
        errors.add("current_amount", EXCEEDS_TARGET_MESSAGE)
    errors.add("goal_type", _goal_type_error(goal_type))
    errors.add("parent_goal_id", _parent_id_error(parent_goal_id))

    if progress is not None:
        errors.add("progress", number_range(progress, 0, 100, "Progress"))
    if milestones is not None and not isinstance(milestones, list):
        errors.add("milestones", "Milestones must be a list")

    target_date, date_error = _parse_target_date(payload.get("target_date"))
    errors.add("target_date", date_error)
    errors.add("wallet_address", _wallet_link_error(payload.get("wallet_address"), payload.get("wallet_chain")))

    if errors:
        return errors.result()

    name = name.strip()
    wallet_chain = _normalize_wallet_chain(payload.get("wallet_chain"))
    return Ok({
        "name": name,
        "description": payload.get("description") or "",
        "status": payload.get("status") or DEFAULT_STATUS,
        "progress": progress or 0,
        "coin": coin.strip(),
        "coin_symbol": coin_symbol.strip(),
        "current_amount": current_amount,
        "target_amount": target_amount,
        "target_date": target_date,
        "wallet_id": _clean_optional(payload.get("wallet_id")),
        "wallet_address": _clean_optional(payload.get("wallet_address")),
        "wallet_chain": wallet_chain,
        "goal_type": goal_type,
        "parent_goal_id": parent_goal_id or None,
        "is_aggregate": bool(payload.get("is_aggregate", False)),
        "milestones": milestones or [],
        "notes": payload.get("notes") or name,
    })


def validate_goal_patch(existing: Mapping[str, Any], patch: Mapping[str, Any]) -> ValidationResult:
    """
    Проверить частичное обновление цели

    Каждое присланное поле проверяется как при создании, а инвариант
    current_amount <= target_amount - на объединённой записи
    (existing + patch).

    Args:
        existing: Текущая запись цели (dict с полями модели, включая id)
        patch: Только присланные поля (ключи из GOAL_PATCH_FIELDS)

    Returns:
        Ok(value=changes) или Invalid
    """
    errors = ErrorCollector()
    changes: dict[str, Any] = {}

    for field_name, label in (("name", "Goal name"), ("coin", "Coin"), ("coin_symbol", "Coin symbol")):
        if field_name in patch:
            value = patch[field_name]
            if is_blank(value) or not isinstance(value, str):
                errors.add(field_name, f"{label} cannot be empty")
            else:
                changes[field_name] = value.strip()

    if "current_amount" in patch:
        errors.add("current_amount", non_negative_number(patch["current_amount"], "Current amount"))
        changes["current_amount"] = patch["current_amount"]

    if "target_amount" in patch:
        errors.add("target_amount", positive_number(patch["target_amount"], "Target amount"))
        changes["target_amount"] = patch["target_amount"]

    if "current_amount" in patch or "target_amount" in patch:
        merged_current = changes.get("current_amount", existing.get("current_amount"))
        merged_target = changes.get("target_amount", existing.get("target_amount"))
        if _exceeds_target(merged_current, merged_target):
            errors.add("current_amount", EXCEEDS_TARGET_MESSAGE)

    if "goal_type" in patch:
        errors.add("goal_type", _goal_type_error(patch["goal_type"]))
        changes["goal_type"] = patch["goal_type"]

    if "parent_goal_id" in patch:
        parent_goal_id = patch["parent_goal_id"] or None
        errors.add("parent_goal_id", _parent_id_error(parent_goal_id))
        if parent_goal_id is not None and parent_goal_id == existing.get("id"):
            errors.add("parent_goal_id", "A goal cannot be its own parent")
        changes["parent_goal_id"] = parent_goal_id

    if "progress" in patch:
        progress = patch["progress"]
        if progress is None:
            progress = 0
        errors.add("progress", number_range(progress, 0, 100, "Progress"))
        changes["progress"] = progress

    if "target_date" in patch:
        target_date, date_error = _parse_target_date(patch["target_date"])
        errors.add("target_date", date_error)
        changes["target_date"] = target_date

    if "milestones" in patch:
        milestones = patch["milestones"]
        if milestones is None:
            milestones = []
        if not isinstance(milestones, list):
            errors.add("milestones", "Milestones must be a list")
        changes["milestones"] = milestones

    for field_name in ("wallet_id", "wallet_address"):
        if field_name in patch:
            changes[field_name] = _clean_optional(patch[field_name])
    if "wallet_chain" in patch:
        changes["wallet_chain"] = _normalize_wallet_chain(patch["wallet_chain"])
    if "wallet_address" in patch or "wallet_chain" in patch:
        errors.add("wallet_address", _wallet_link_error(
            changes.get("wallet_address", existing.get("wallet_address")),
            changes.get("wallet_chain", existing.get("wallet_chain")),
        ))

    if "description" in patch:
        changes["description"] = patch["description"] or ""
    if "status" in patch:
        changes["status"] = patch["status"] or DEFAULT_STATUS
    if "notes" in patch:
        changes["notes"] = patch["notes"] or ""
    if "is_aggregate" in patch:
        changes["is_aggregate"] = bool(patch["is_aggregate"])

    return errors.result(changes)


def validate_progress_amount(new_amount: Any, target_amount: float) -> str | None:
    """
    Проверить новую текущую сумму для update progress

    Returns:
        None если сумму можно записать, иначе текст ошибки
    """
    if not is_number(new_amount) or new_amount < 0:
        return "New amount must be a non-negative number"
    if new_amount > target_amount:
        return EXCEEDS_TARGET_MESSAGE
    return None
