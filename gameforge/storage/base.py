# gameforge/storage/base.py
"""Persistence contract shared by the in-memory and database stores.

Contract, for every implementation:

* ``get_*`` returns ``None`` for an unknown id and never raises for it.
* ``create_*`` returns the stored entity with ids, defaults and timestamps set.
* ``update_*`` returns ``None`` for an unknown id, otherwise the merged entity.
  Only the fields listed in the entity's ``*_MUTABLE_FIELDS`` are applied; the
  rest of the patch (``id``, ``created_at``, ``password``, owner fields, ...) is
  dropped without an error.
* ``delete_*`` / ``remove_*`` return whether a row was actually removed.
* list operations return newest first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional

from ..models import (
    Asset,
    AssetBundle,
    CartItem,
    Chat,
    ChatMember,
    GameLibrary,
    Message,
    Metrics,
    Project,
    Purchase,
    User,
)

USER_MUTABLE_FIELDS = frozenset({
    "display_name", "role", "avatar", "banner", "bio", "job_title", "status",
    "location", "portfolio_link", "skills", "current_project", "availability",
    "settings",
})
PROJECT_MUTABLE_FIELDS = frozenset({
    "name", "description", "icon", "status", "engine", "platform",
    "team_members", "features", "screenshots",
})
METRICS_MUTABLE_FIELDS = frozenset({
    "active_projects", "team_members", "assets_created", "games_published", "revenue",
})
LIBRARY_MUTABLE_FIELDS = frozenset({"play_time", "favorite", "last_played"})
CHAT_MUTABLE_FIELDS = frozenset({"name", "description", "type", "is_main_chat"})

DEFAULT_MESSAGE_LIMIT = 50


def mutable_patch(updates: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """Keep only the allow-listed keys of ``updates``."""
    allowed = frozenset(allowed)
    return {key: value for key, value in dict(updates).items() if key in allowed}


class Storage(ABC):
    # ---------- Users ----------
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, user: User) -> User: ...

    @abstractmethod
    def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Optional[User]: ...

    @abstractmethod
    def set_user_password(self, user_id: str, password_hash: str) -> Optional[User]:
        """The only way to change a stored password hash."""

    # ---------- Projects ----------
    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def get_projects_by_user_id(self, user_id: str) -> list[Project]: ...

    @abstractmethod
    def get_all_projects(self) -> list[Project]: ...

    @abstractmethod
    def create_project(self, project: Project) -> Project: ...

    @abstractmethod
    def update_project(self, project_id: str, updates: Mapping[str, Any]) -> Optional[Project]: ...

    @abstractmethod
    def delete_project(self, project_id: str) -> bool: ...

    # ---------- Metrics ----------
    @abstractmethod
    def get_metrics_by_user_id(self, user_id: str) -> Optional[Metrics]: ...

    @abstractmethod
    def update_metrics(self, user_id: str, updates: Mapping[str, Any]) -> Metrics:
        """Upsert: creates zeroed metrics for the user when none exist."""

    # ---------- Assets / bundles ----------
    @abstractmethod
    def get_all_assets(self) -> list[Asset]: ...

    @abstractmethod
    def get_assets_by_category(self, category: str) -> list[Asset]: ...

    @abstractmethod
    def get_asset(self, asset_id: str) -> Optional[Asset]: ...

    @abstractmethod
    def create_asset(self, asset: Asset) -> Asset: ...

    @abstractmethod
    def get_all_bundles(self) -> list[AssetBundle]: ...

    @abstractmethod
    def get_bundle(self, bundle_id: str) -> Optional[AssetBundle]: ...

    @abstractmethod
    def create_bundle(self, bundle: AssetBundle) -> AssetBundle: ...

    # ---------- Cart / purchases ----------
    @abstractmethod
    def get_cart_items(self, user_id: str) -> list[CartItem]: ...

    @abstractmethod
    def add_to_cart(self, item: CartItem) -> CartItem: ...

    @abstractmethod
    def remove_from_cart(self, user_id: str, item_id: str) -> bool: ...

    @abstractmethod
    def clear_cart(self, user_id: str) -> bool: ...

    @abstractmethod
    def create_purchase(self, purchase: Purchase) -> Purchase: ...

    @abstractmethod
    def get_purchases_by_user_id(self, user_id: str) -> list[Purchase]: ...

    # ---------- Game library ----------
    @abstractmethod
    def get_game_library_by_user_id(self, user_id: str) -> list[GameLibrary]: ...

    @abstractmethod
    def add_to_game_library(self, item: GameLibrary) -> GameLibrary: ...

    @abstractmethod
    def update_game_library_item(self, item_id: str, updates: Mapping[str, Any]) -> Optional[GameLibrary]: ...

    # ---------- Chats ----------
    @abstractmethod
    def get_all_chats(self) -> list[Chat]: ...

    @abstractmethod
    def get_chat(self, chat_id: str) -> Optional[Chat]: ...

    @abstractmethod
    def get_chats_by_user_id(self, user_id: str) -> list[Chat]:
        """Chats created by the user."""

    @abstractmethod
    def create_chat(self, chat: Chat) -> Chat: ...

    @abstractmethod
    def update_chat(self, chat_id: str, updates: Mapping[str, Any]) -> Optional[Chat]: ...

    @abstractmethod
    def delete_chat(self, chat_id: str) -> bool:
        """Removes the chat together with its messages and memberships."""

    @abstractmethod
    def get_chat_members(self, chat_id: str) -> list[ChatMember]: ...

    @abstractmethod
    def add_chat_member(self, member: ChatMember) -> ChatMember:
        """Returns the existing membership when the user is already in the chat."""

    @abstractmethod
    def remove_chat_member(self, chat_id: str, user_id: str) -> bool: ...

    @abstractmethod
    def get_user_chats(self, user_id: str) -> list[Chat]:
        """Chats the user is a member of, most recently updated first."""

    # ---------- Messages ----------
    @abstractmethod
    def get_messages(self, chat_id: str, limit: int | None = None, offset: int | None = None) -> list[Message]: ...

    @abstractmethod
    def create_message(self, message: Message) -> Message: ...

    @abstractmethod
    def update_message(self, message_id: str, content: str) -> Optional[Message]: ...

    @abstractmethod
    def delete_message(self, message_id: str) -> bool: ...

    def close(self) -> None:
        pass
