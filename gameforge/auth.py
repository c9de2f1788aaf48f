# gameforge/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError

from .config import Settings
from .deps import get_storage, patch_fields, require_user
from .models import User
from .schemas import (
    AuthOut,
    ChangePasswordIn,
    DevLoginIn,
    LoginIn,
    MessageOut,
    SignupIn,
    UserOut,
    UserProfilePatch,
)
from .seed import DEFAULT_USERNAME
from .storage import Storage

log = logging.getLogger(__name__)
router = APIRouter()
dev_router = APIRouter()

# profile fields a user may reset to null
CLEARABLE_PROFILE_FIELDS = frozenset({"avatar", "banner", "job_title", "portfolio_link"})

pwd = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=Settings.from_env().bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    # seeded accounts carry a placeholder instead of a real hash
    try:
        return pwd.verify(password, hashed)
    except ValueError:
        return False


# ---------- Signup ----------
@router.post("/api/auth/signup", status_code=status.HTTP_201_CREATED, response_model=AuthOut)
def signup(body: SignupIn, request: Request, storage: Storage = Depends(get_storage)):
    if storage.get_user_by_username(body.username):
        raise HTTPException(status.HTTP_409_CONFLICT, "Username already exists")
    if storage.get_user_by_email(body.email):
        raise HTTPException(status.HTTP_409_CONFLICT, "Email already exists")

    user = User(
        username=body.username,
        email=body.email,
        password=hash_password(body.password),
        display_name=body.display_name or body.username,
        role=body.role,
    )
    try:
        user = storage.create_user(user)
    except IntegrityError:
        raise HTTPException(status.HTTP_409_CONFLICT, "Username or email already exists (race condition)")

    request.session["uid"] = user.id
    log.info("Account created: %s", user.username)
    return {"message": "Account created successfully", "user": user}


# ---------- Login / Logout ----------
@router.post("/api/auth/login", response_model=AuthOut)
def login(body: LoginIn, request: Request, storage: Storage = Depends(get_storage)):
    user = storage.get_user_by_username(body.username) or storage.get_user_by_email(body.username)
    if user is None or not verify_password(body.password, user.password):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid username or password")

    request.session["uid"] = user.id
    return {"message": "Login successful", "user": user}


@router.post("/api/auth/logout", response_model=MessageOut)
def logout(request: Request):
    request.session.clear()
    return {"message": "Logout successful"}


@router.patch("/api/auth/change-password", response_model=MessageOut)
def change_password(
    body: ChangePasswordIn,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    if not verify_password(body.current_password, user.password):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Current password is incorrect")

    storage.set_user_password(user.id, hash_password(body.new_password))
    log.info("Password changed for %s", user.username)
    return {"message": "Password changed successfully"}


# ---------- Dev login (not mounted in production) ----------
@dev_router.post("/api/auth/dev-login", response_model=AuthOut)
def dev_login(request: Request, body: DevLoginIn | None = None, storage: Storage = Depends(get_storage)):
    username = (body.username if body else None) or DEFAULT_USERNAME
    user = storage.get_user_by_username(username)
    if user is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "User not found for dev login")

    request.session["uid"] = user.id
    return {"message": "Development login successful", "user": user}


# ---------- Current user / profile ----------
@router.get("/api/user/current", response_model=UserOut)
def current_user(user: User = Depends(require_user)):
    return user


@router.patch("/api/users/{user_id}", response_model=UserOut)
def update_profile(
    user_id: str,
    body: UserProfilePatch,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    if user.id != user_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Can only update your own profile")

    updates = body.model_dump(exclude_unset=True)
    updates = {k: v for k, v in updates.items() if v is not None or k in CLEARABLE_PROFILE_FIELDS}
    updated = storage.update_user(user_id, patch_fields(updates))
    if updated is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "User not found")
    return updated
