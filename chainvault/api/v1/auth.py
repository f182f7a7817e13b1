"""
Authentication and user account routes
"""
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from chainvault.api.deps import get_db
from chainvault.api.responses import ok, service_health
from chainvault.application.errors import NotFoundError
from chainvault.application.users import (
    AuthenticateUserUseCase,
    DeleteUserUseCase,
    RegisterUserUseCase,
    UpdateUserUseCase,
    get_user_by_id,
    list_users,
)


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    identifier: str  # username или email
    password: str


class UpdateUserRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    tier: str | None = None
    preferences: dict[str, Any] | None = None


@router.get("/health")
def auth_health():
    return service_health("auth-service")


@router.post("/register", status_code=201)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    user = RegisterUserUseCase(db).execute(
        username=req.username,
        email=req.email,
        password=req.password,
    )
    return ok(user, message="User registered successfully")


@router.post("/login")
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход по username/email + пароль

    user_id сохраняется в session (cookie)
    """
    user = AuthenticateUserUseCase(db).execute(req.identifier, req.password)
    request.session["user_id"] = user["id"]
    return ok(user, message="Login successful")


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return ok(message="Logged out")


@router.get("/users")
def all_users(db: Session = Depends(get_db)):
    """Все пользователи (admin/development)"""
    users = list_users(db)
    return ok(users, count=len(users))


@router.get("/user/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return ok(user)


@router.put("/user/{user_id}")
def update_user(user_id: str, req: UpdateUserRequest, db: Session = Depends(get_db)):
    changes = req.model_dump(exclude_unset=True)
    user = UpdateUserUseCase(db).execute(user_id, **changes)
    return ok(user, message="User updated successfully")


@router.delete("/user/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db)):
    result = DeleteUserUseCase(db).execute(user_id)
    return ok(result, message="User deleted successfully")
