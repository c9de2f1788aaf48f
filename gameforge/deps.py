# gameforge/deps.py
from __future__ import annotations

from typing import Any, Mapping

from fastapi import Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError

from .models import User
from .storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def session_user_id(request: Request) -> str | None:
    return request.session.get("uid")


def require_user(request: Request, storage: Storage = Depends(get_storage)) -> User:
    uid = request.session.get("uid")
    if not uid:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    user = storage.get_user(uid)
    if user is None:
        # session outlived its user (deleted, or store reset)
        request.session.clear()
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")
    return user


def invalid_reference(field: str, message: str) -> RequestValidationError:
    """A body field points at a row that does not exist; reported like any field error."""
    return RequestValidationError([{"loc": ("body", field), "msg": message, "type": "value_error"}])


def patch_fields(updates: Mapping[str, Any]) -> dict[str, Any]:
    if not updates:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "No valid update fields provided")
    return dict(updates)
