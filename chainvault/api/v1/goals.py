"""
Goal API endpoints
"""
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from chainvault.api.deps import get_db
from chainvault.api.responses import fail, ok, service_health
from chainvault.application.errors import NotFoundError
from chainvault.application.goals import (
    CreateGoalUseCase,
    DeleteGoalUseCase,
    UpdateGoalProgressUseCase,
    UpdateGoalUseCase,
    get_goal_by_id,
    get_goal_progress,
    list_all_goals,
    list_user_goals,
)


router = APIRouter(prefix="/api/v1/goals", tags=["goals"])


# === Request models ===

class GoalFields(BaseModel):
    # Суммы и progress приходят как есть (без приведения типов), проверяет их domain
    name: str | None = None
    description: str | None = None
    status: str | None = None
    progress: Any = None
    coin: str | None = None
    coin_symbol: str | None = None
    current_amount: Any = None
    target_amount: Any = None
    target_date: date | None = None
    wallet_id: str | None = None
    wallet_address: str | None = None
    wallet_chain: str | None = None
    goal_type: str | None = None
    parent_goal_id: str | None = None
    is_aggregate: bool | None = None
    milestones: list[Any] | None = None
    notes: str | None = None


class CreateGoalRequest(GoalFields):
    user_id: str


class UpdateProgressRequest(BaseModel):
    current_amount: Any = None


# === Endpoints ===

@router.get("/health")
def goals_health():
    return service_health("goals-service")


@router.post("/", status_code=201)
def create_goal(req: CreateGoalRequest, db: Session = Depends(get_db)):
    """Создать цель"""
    payload = req.model_dump(exclude={"user_id"}, exclude_none=True)
    goal = CreateGoalUseCase(db).execute(req.user_id, **payload)
    return ok(goal, message="Goal created successfully")


@router.get("/")
def all_goals(db: Session = Depends(get_db)):
    """Все цели (admin/development)"""
    goals = list_all_goals(db)
    return ok(goals, count=len(goals))


@router.get("/user/{user_id}")
def user_goals(user_id: str, db: Session = Depends(get_db)):
    goals = list_user_goals(db, user_id)
    return ok(goals, count=len(goals))


@router.get("/{goal_id}")
def get_goal(goal_id: str, db: Session = Depends(get_db)):
    goal = get_goal_by_id(db, goal_id)
    if goal is None:
        raise NotFoundError("Goal not found")
    return ok(goal)


@router.put("/{goal_id}")
def update_goal(goal_id: str, req: GoalFields, db: Session = Depends(get_db)):
    changes = req.model_dump(exclude_unset=True)
    if not changes:
        return fail("At least one field is required for update")

    goal = UpdateGoalUseCase(db).execute(goal_id, **changes)
    return ok(goal, message="Goal updated successfully")


@router.delete("/{goal_id}")
def delete_goal(goal_id: str, db: Session = Depends(get_db)):
    result = DeleteGoalUseCase(db).execute(goal_id)
    return ok(result, message="Goal deleted successfully")


@router.get("/{goal_id}/progress")
def goal_progress(goal_id: str, db: Session = Depends(get_db)):
    return ok(get_goal_progress(db, goal_id))


@router.put("/{goal_id}/progress")
def update_goal_progress(goal_id: str, req: UpdateProgressRequest, db: Session = Depends(get_db)):
    """Обновить только current_amount"""
    if req.current_amount is None:
        return fail("current_amount is required")

    goal = UpdateGoalProgressUseCase(db).execute(goal_id, req.current_amount)
    return ok(goal, message="Goal progress updated successfully")
