# gameforge/chat.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from .deps import get_storage, invalid_reference, patch_fields, session_user_id
from .models import Chat, ChatMember, Message
from .schemas import (
    ChatCreate,
    ChatMemberCreate,
    ChatMemberOut,
    ChatMessageOut,
    ChatOut,
    ChatPatch,
    MessageCreate,
    MessageOut,
    MessagePatch,
)
from .storage import Storage
from .storage.base import DEFAULT_MESSAGE_LIMIT

log = logging.getLogger(__name__)
router = APIRouter()


def _chat_or_404(storage: Storage, chat_id: str) -> Chat:
    chat = storage.get_chat(chat_id)
    if chat is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Chat not found")
    return chat


# ---------- Chats ----------
@router.get("/api/chats", response_model=List[ChatOut])
def list_chats(
    created_by: Optional[str] = Query(default=None, alias="createdBy"),
    storage: Storage = Depends(get_storage),
):
    if created_by:
        return storage.get_chats_by_user_id(created_by)
    return storage.get_all_chats()


@router.get("/api/chats/{chat_id}", response_model=ChatOut)
def get_chat(chat_id: str, storage: Storage = Depends(get_storage)):
    return _chat_or_404(storage, chat_id)


@router.get("/api/users/{user_id}/chats", response_model=List[ChatOut])
def list_user_chats(user_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_user_chats(user_id)


@router.post("/api/chats", status_code=status.HTTP_201_CREATED, response_model=ChatOut)
def create_chat(body: ChatCreate, request: Request, storage: Storage = Depends(get_storage)):
    created_by = session_user_id(request) or body.created_by
    if not created_by:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
    if storage.get_user(created_by) is None:
        raise invalid_reference("createdBy", "User does not exist")

    chat = storage.create_chat(Chat(**body.model_dump(exclude={"created_by"}), created_by=created_by))
    # separate call: a failure here leaves a chat without members
    storage.add_chat_member(ChatMember(chat_id=chat.id, user_id=created_by, role="admin"))
    log.info("Chat %s created by %s", chat.id, created_by)
    return chat


@router.patch("/api/chats/{chat_id}", response_model=ChatOut)
def update_chat(chat_id: str, body: ChatPatch, storage: Storage = Depends(get_storage)):
    updates = body.model_dump(exclude_unset=True)
    updates = {k: v for k, v in updates.items() if v is not None or k == "description"}
    chat = storage.update_chat(chat_id, patch_fields(updates))
    if chat is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Chat not found")
    return chat


@router.delete("/api/chats/{chat_id}", response_model=MessageOut)
def delete_chat(chat_id: str, storage: Storage = Depends(get_storage)):
    if not storage.delete_chat(chat_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Chat not found")
    log.info("Chat %s deleted", chat_id)
    return {"message": "Chat deleted successfully"}


# ---------- Members ----------
@router.get("/api/chats/{chat_id}/members", response_model=List[ChatMemberOut])
def list_members(chat_id: str, storage: Storage = Depends(get_storage)):
    _chat_or_404(storage, chat_id)
    return storage.get_chat_members(chat_id)


@router.post("/api/chats/{chat_id}/members", status_code=status.HTTP_201_CREATED, response_model=ChatMemberOut)
def add_member(chat_id: str, body: ChatMemberCreate, storage: Storage = Depends(get_storage)):
    _chat_or_404(storage, chat_id)
    if storage.get_user(body.user_id) is None:
        raise invalid_reference("userId", "User does not exist")
    return storage.add_chat_member(ChatMember(chat_id=chat_id, user_id=body.user_id, role=body.role))


@router.delete("/api/chats/{chat_id}/members/{user_id}", response_model=MessageOut)
def remove_member(chat_id: str, user_id: str, storage: Storage = Depends(get_storage)):
    if not storage.remove_chat_member(chat_id, user_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Chat member not found")
    return {"message": "Member removed from chat"}


# ---------- Messages ----------
@router.get("/api/chats/{chat_id}/messages", response_model=List[ChatMessageOut])
def list_messages(
    chat_id: str,
    limit: int = Query(default=DEFAULT_MESSAGE_LIMIT, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    storage: Storage = Depends(get_storage),
):
    return storage.get_messages(chat_id, limit=limit, offset=offset)


@router.post("/api/chats/{chat_id}/messages", status_code=status.HTTP_201_CREATED, response_model=ChatMessageOut)
def send_message(chat_id: str, body: MessageCreate, request: Request, storage: Storage = Depends(get_storage)):
    _chat_or_404(storage, chat_id)
    user_id = body.user_id or session_user_id(request)
    if not user_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
    if storage.get_user(user_id) is None:
        raise invalid_reference("userId", "User does not exist")

    message = Message(**body.model_dump(exclude={"user_id"}), chat_id=chat_id, user_id=user_id)
    return storage.create_message(message)


@router.patch("/api/messages/{message_id}", response_model=ChatMessageOut)
def edit_message(message_id: str, body: MessagePatch, storage: Storage = Depends(get_storage)):
    message = storage.update_message(message_id, body.content)
    if message is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Message not found")
    return message


@router.delete("/api/messages/{message_id}", response_model=MessageOut)
def delete_message(message_id: str, storage: Storage = Depends(get_storage)):
    if not storage.delete_message(message_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Message not found")
    return {"message": "Message deleted successfully"}
