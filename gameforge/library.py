# gameforge/library.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from .deps import get_storage, patch_fields, require_user
from .models import GameLibrary, User
from .schemas import LibraryAddIn, LibraryOut, LibraryPatch
from .storage import Storage

router = APIRouter()


@router.get("/api/library", response_model=List[LibraryOut])
def list_library(user: User = Depends(require_user), storage: Storage = Depends(get_storage)):
    return storage.get_game_library_by_user_id(user.id)


@router.post("/api/library", status_code=status.HTTP_201_CREATED, response_model=LibraryOut)
def add_game(body: LibraryAddIn, user: User = Depends(require_user), storage: Storage = Depends(get_storage)):
    owned = storage.get_game_library_by_user_id(user.id)
    if any(entry.game_id == body.game_id for entry in owned):
        raise HTTPException(status.HTTP_409_CONFLICT, "Game already in your library")

    entry = GameLibrary(
        user_id=user.id,
        game_id=body.game_id,
        game_name=body.game_name,
        game_icon=body.game_icon or "🎮",
        game_description=body.game_description,
    )
    return storage.add_to_game_library(entry)


@router.patch("/api/library/{entry_id}", response_model=LibraryOut)
def update_entry(
    entry_id: str,
    body: LibraryPatch,
    user: User = Depends(require_user),
    storage: Storage = Depends(get_storage),
):
    # only the session user's own entries are visible here
    owned = {entry.id for entry in storage.get_game_library_by_user_id(user.id)}
    if entry_id not in owned:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Library entry not found")

    updates = body.model_dump(exclude_unset=True)
    # lastPlayed may be cleared; the counters may not
    updates = {k: v for k, v in updates.items() if v is not None or k == "last_played"}
    entry = storage.update_game_library_item(entry_id, patch_fields(updates))
    if entry is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Library entry not found")
    return entry
