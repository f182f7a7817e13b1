"""
Goal use cases - business logic for savings goals

progress_percentage всегда пересчитывается при отдаче записи наружу
и никогда не читается из БД. Поле progress - отдельное, его задаёт клиент.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from chainvault.application.errors import (
    BusinessRuleError,
    InvalidIdError,
    NotFoundError,
    ReferenceNotFoundError,
    ValidationFailed,
)
from chainvault.application.users import ensure_user_id, user_exists
from chainvault.domain.goal import (
    HAS_SUBGOALS_MESSAGE,
    progress_percentage,
    validate_goal_patch,
    validate_new_goal,
    validate_progress_amount,
)
from chainvault.domain.validation import Invalid
from chainvault.infrastructure.db.models import GoalModel
from chainvault.utils.ids import is_valid_id

logger = logging.getLogger(__name__)


class GoalValidationError(ValidationFailed):
    """Ошибка валидации цели"""
    pass


def ensure_goal_id(goal_id: Any) -> str:
    if not is_valid_id(goal_id):
        raise InvalidIdError("Invalid goal ID format")
    return goal_id


def goal_to_dict(goal: GoalModel) -> dict:
    return {
        "id": goal.id,
        "user_id": goal.user_id,
        "name": goal.name,
        "description": goal.description,
        "status": goal.status,
        "progress": goal.progress,
        "coin": goal.coin,
        "coin_symbol": goal.coin_symbol,
        "current_amount": goal.current_amount,
        "target_amount": goal.target_amount,
        "target_date": goal.target_date.isoformat() if goal.target_date else None,
        "wallet_id": goal.wallet_id,
        "wallet_address": goal.wallet_address,
        "wallet_chain": goal.wallet_chain,
        "goal_type": goal.goal_type,
        "parent_goal_id": goal.parent_goal_id,
        "is_aggregate": goal.is_aggregate,
        "milestones": goal.milestones or [],
        "notes": goal.notes,
        "progress_percentage": progress_percentage(goal.current_amount, goal.target_amount),
        "created_at": goal.created_at.isoformat(),
        "updated_at": goal.updated_at.isoformat(),
    }


def _goal_snapshot(goal: GoalModel) -> dict:
    return {
        "id": goal.id,
        "current_amount": goal.current_amount,
        "target_amount": goal.target_amount,
        "wallet_address": goal.wallet_address,
        "wallet_chain": goal.wallet_chain,
    }


def _load_goal(db: Session, goal_id: str) -> GoalModel:
    ensure_goal_id(goal_id)
    goal = db.query(GoalModel).filter(GoalModel.id == goal_id).first()
    if not goal:
        raise NotFoundError("Goal not found")
    return goal


def _goal_exists(db: Session, goal_id: str) -> bool:
    return db.query(GoalModel.id).filter(GoalModel.id == goal_id).first() is not None


# === Queries ===

def get_goal_by_id(db: Session, goal_id: str) -> dict | None:
    ensure_goal_id(goal_id)
    goal = db.query(GoalModel).filter(GoalModel.id == goal_id).first()
    return goal_to_dict(goal) if goal else None


def list_user_goals(db: Session, user_id: str) -> list[dict]:
    ensure_user_id(user_id)
    goals = (
        db.query(GoalModel)
        .filter(GoalModel.user_id == user_id)
        .order_by(GoalModel.created_at.asc())
        .all()
    )
    return [goal_to_dict(g) for g in goals]


def list_all_goals(db: Session) -> list[dict]:
    return [goal_to_dict(g) for g in db.query(GoalModel).order_by(GoalModel.created_at.asc()).all()]


def get_goal_progress(db: Session, goal_id: str) -> dict:
    """
    Сводка прогресса цели

    Returns:
        {current_amount, target_amount, progress_percentage,
         remaining_amount, is_completed}
    """
    goal = _load_goal(db, goal_id)
    return {
        "current_amount": goal.current_amount,
        "target_amount": goal.target_amount,
        "progress_percentage": progress_percentage(goal.current_amount, goal.target_amount),
        "remaining_amount": goal.target_amount - goal.current_amount,
        "is_completed": goal.current_amount >= goal.target_amount,
    }


# === Use cases ===

class CreateGoalUseCase:
    """Use case: Создать цель накопления"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: str, **payload) -> dict:
        """
        Создать цель

        Args:
            user_id: ID владельца
            **payload: Поля цели (name, coin, coin_symbol, current_amount,
                target_amount, goal_type, parent_goal_id, ...)

        Returns:
            Созданная цель (dict) с progress_percentage

        Raises:
            GoalValidationError: ошибки полей (одной строкой)
            ReferenceNotFoundError: нет пользователя или родительской цели
        """
        result = validate_new_goal(payload)
        if isinstance(result, Invalid):
            raise GoalValidationError(result)
        fields = result.value

        ensure_user_id(user_id)
        if not user_exists(self.db, user_id):
            raise ReferenceNotFoundError("User not found")

        if fields["parent_goal_id"] and not _goal_exists(self.db, fields["parent_goal_id"]):
            raise ReferenceNotFoundError("Parent goal not found")

        now = datetime.now(timezone.utc)
        goal = GoalModel(user_id=user_id, created_at=now, updated_at=now, **fields)
        self.db.add(goal)
        self.db.commit()

        logger.info("Goal created: id=%s user_id=%s name=%s", goal.id, user_id, goal.name)
        return goal_to_dict(goal)


class UpdateGoalUseCase:
    """Use case: Частично обновить цель"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, goal_id: str, **changes) -> dict:
        goal = _load_goal(self.db, goal_id)

        result = validate_goal_patch(_goal_snapshot(goal), changes)
        if isinstance(result, Invalid):
            raise GoalValidationError(result)
        fields = result.value

        parent_goal_id = fields.get("parent_goal_id")
        if parent_goal_id and not _goal_exists(self.db, parent_goal_id):
            raise ReferenceNotFoundError("Parent goal not found")

        for key, value in fields.items():
            setattr(goal, key, value)
        goal.updated_at = datetime.now(timezone.utc)
        self.db.commit()

        logger.info("Goal updated: id=%s fields=%s", goal_id, sorted(fields))
        return goal_to_dict(goal)


class UpdateGoalProgressUseCase:
    """Use case: Обновить только current_amount"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, goal_id: str, current_amount: float) -> dict:
        goal = _load_goal(self.db, goal_id)

        error = validate_progress_amount(current_amount, goal.target_amount)
        if error:
            raise BusinessRuleError(error)

        goal.current_amount = current_amount
        goal.updated_at = datetime.now(timezone.utc)
        self.db.commit()

        data = goal_to_dict(goal)
        logger.info(
            "Goal progress updated: id=%s current_amount=%s progress_percentage=%s",
            goal_id, current_amount, data["progress_percentage"],
        )
        return data


class DeleteGoalUseCase:
    """
    Use case: Удалить цель

    Цель, на которую ссылаются подцели (parent_goal_id), удалить нельзя:
    сначала удаляются подцели. Каскада нет.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, goal_id: str) -> dict:
        goal = _load_goal(self.db, goal_id)

        has_subgoals = (
            self.db.query(GoalModel.id)
            .filter(GoalModel.parent_goal_id == goal_id)
            .first()
        ) is not None
        if has_subgoals:
            raise BusinessRuleError(HAS_SUBGOALS_MESSAGE)

        self.db.delete(goal)
        self.db.commit()

        logger.info("Goal deleted: id=%s", goal_id)
        return {"id": goal_id, "message": "Goal deleted successfully"}
