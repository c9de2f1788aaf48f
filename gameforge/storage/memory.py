# gameforge/storage/memory.py
"""Dict-backed store for development and tests.

Entities are kept by reference: the objects handed out are the stored ones.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from .. import seed
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
    new_id,
    utcnow,
)
from .base import (
    CHAT_MUTABLE_FIELDS,
    DEFAULT_MESSAGE_LIMIT,
    LIBRARY_MUTABLE_FIELDS,
    METRICS_MUTABLE_FIELDS,
    PROJECT_MUTABLE_FIELDS,
    USER_MUTABLE_FIELDS,
    Storage,
    mutable_patch,
)


def _newest_first(rows: Iterable, key: Callable) -> list:
    # reversed() first so that rows with equal timestamps keep newest-inserted first
    return sorted(reversed(list(rows)), key=key, reverse=True)


def _apply(row, fields: Mapping[str, Any]):
    for name, value in fields.items():
        setattr(row, name, value)
    return row


class InMemoryStorage(Storage):
    def __init__(self, seed_data: bool = True) -> None:
        self.users: dict[str, User] = {}
        self.projects: dict[str, Project] = {}
        self.metrics: dict[str, Metrics] = {}  # keyed by user id
        self.assets: dict[str, Asset] = {}
        self.bundles: dict[str, AssetBundle] = {}
        self.cart_items: dict[str, CartItem] = {}
        self.purchases: dict[str, Purchase] = {}
        self.game_library: dict[str, GameLibrary] = {}
        self.chats: dict[str, Chat] = {}
        self.chat_members: dict[str, ChatMember] = {}
        self.messages: dict[str, Message] = {}

        if seed_data:
            self._seed()

    def _seed(self) -> None:
        for user in seed.sample_users():
            self.users[user.id] = user
        for project in seed.sample_projects():
            self.projects[project.id] = project
        for metrics in seed.sample_metrics():
            self.metrics[metrics.user_id] = metrics
        for asset in seed.sample_assets():
            self.assets[asset.id] = asset
        for bundle in seed.sample_bundles():
            self.bundles[bundle.id] = bundle

    @staticmethod
    def _stamp_new(row, *fields: str):
        if not row.id:
            row.id = new_id()
        now = utcnow()
        for name in fields:
            setattr(row, name, now)
        return row

    # ---------- Users ----------
    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, user: User) -> User:
        self._stamp_new(user, "created_at")
        self.users[user.id] = user
        return user

    def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        return _apply(user, mutable_patch(updates, USER_MUTABLE_FIELDS))

    def set_user_password(self, user_id: str, password_hash: str) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        user.password = password_hash
        return user

    # ---------- Projects ----------
    def get_project(self, project_id: str) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_projects_by_user_id(self, user_id: str) -> list[Project]:
        owned = (p for p in self.projects.values() if p.owner_id == user_id)
        return _newest_first(owned, key=lambda p: p.last_updated)

    def get_all_projects(self) -> list[Project]:
        return _newest_first(self.projects.values(), key=lambda p: p.last_updated)

    def create_project(self, project: Project) -> Project:
        self._stamp_new(project, "created_at", "last_updated")
        self.projects[project.id] = project
        return project

    def update_project(self, project_id: str, updates: Mapping[str, Any]) -> Optional[Project]:
        project = self.projects.get(project_id)
        if project is None:
            return None
        _apply(project, mutable_patch(updates, PROJECT_MUTABLE_FIELDS))
        project.last_updated = utcnow()
        return project

    def delete_project(self, project_id: str) -> bool:
        return self.projects.pop(project_id, None) is not None

    # ---------- Metrics ----------
    def get_metrics_by_user_id(self, user_id: str) -> Optional[Metrics]:
        return self.metrics.get(user_id)

    def update_metrics(self, user_id: str, updates: Mapping[str, Any]) -> Metrics:
        metrics = self.metrics.get(user_id)
        if metrics is None:
            metrics = Metrics(user_id=user_id)
            self.metrics[user_id] = metrics
        _apply(metrics, mutable_patch(updates, METRICS_MUTABLE_FIELDS))
        metrics.updated_at = utcnow()
        return metrics

    # ---------- Assets / bundles ----------
    def get_all_assets(self) -> list[Asset]:
        return _newest_first(self.assets.values(), key=lambda a: a.created_at)

    def get_assets_by_category(self, category: str) -> list[Asset]:
        matching = (a for a in self.assets.values() if a.category == category)
        return _newest_first(matching, key=lambda a: a.created_at)

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self.assets.get(asset_id)

    def create_asset(self, asset: Asset) -> Asset:
        self._stamp_new(asset, "created_at", "updated_at")
        asset.downloads = 0
        asset.rating = 0
        asset.review_count = 0
        self.assets[asset.id] = asset
        return asset

    def get_all_bundles(self) -> list[AssetBundle]:
        return _newest_first(self.bundles.values(), key=lambda b: b.created_at)

    def get_bundle(self, bundle_id: str) -> Optional[AssetBundle]:
        return self.bundles.get(bundle_id)

    def create_bundle(self, bundle: AssetBundle) -> AssetBundle:
        self._stamp_new(bundle, "created_at", "updated_at")
        bundle.downloads = 0
        bundle.rating = 0
        bundle.review_count = 0
        self.bundles[bundle.id] = bundle
        return bundle

    # ---------- Cart / purchases ----------
    def get_cart_items(self, user_id: str) -> list[CartItem]:
        items = (i for i in self.cart_items.values() if i.user_id == user_id)
        return _newest_first(items, key=lambda i: i.created_at)

    def add_to_cart(self, item: CartItem) -> CartItem:
        self._stamp_new(item, "created_at")
        self.cart_items[item.id] = item
        return item

    def remove_from_cart(self, user_id: str, item_id: str) -> bool:
        item = self.cart_items.get(item_id)
        if item is None or item.user_id != user_id:
            return False
        del self.cart_items[item_id]
        return True

    def clear_cart(self, user_id: str) -> bool:
        doomed = [item_id for item_id, item in self.cart_items.items() if item.user_id == user_id]
        for item_id in doomed:
            del self.cart_items[item_id]
        return bool(doomed)

    def create_purchase(self, purchase: Purchase) -> Purchase:
        self._stamp_new(purchase, "created_at")
        self.purchases[purchase.id] = purchase
        return purchase

    def get_purchases_by_user_id(self, user_id: str) -> list[Purchase]:
        owned = (p for p in self.purchases.values() if p.user_id == user_id)
        return _newest_first(owned, key=lambda p: p.created_at)

    # ---------- Game library ----------
    def get_game_library_by_user_id(self, user_id: str) -> list[GameLibrary]:
        owned = (g for g in self.game_library.values() if g.user_id == user_id)
        return _newest_first(owned, key=lambda g: g.purchased_at)

    def add_to_game_library(self, item: GameLibrary) -> GameLibrary:
        self._stamp_new(item, "purchased_at")
        self.game_library[item.id] = item
        return item

    def update_game_library_item(self, item_id: str, updates: Mapping[str, Any]) -> Optional[GameLibrary]:
        item = self.game_library.get(item_id)
        if item is None:
            return None
        return _apply(item, mutable_patch(updates, LIBRARY_MUTABLE_FIELDS))

    # ---------- Chats ----------
    def get_all_chats(self) -> list[Chat]:
        return _newest_first(self.chats.values(), key=lambda c: c.created_at)

    def get_chat(self, chat_id: str) -> Optional[Chat]:
        return self.chats.get(chat_id)

    def get_chats_by_user_id(self, user_id: str) -> list[Chat]:
        created = (c for c in self.chats.values() if c.created_by == user_id)
        return _newest_first(created, key=lambda c: c.created_at)

    def create_chat(self, chat: Chat) -> Chat:
        self._stamp_new(chat, "created_at", "updated_at")
        self.chats[chat.id] = chat
        return chat

    def update_chat(self, chat_id: str, updates: Mapping[str, Any]) -> Optional[Chat]:
        chat = self.chats.get(chat_id)
        if chat is None:
            return None
        _apply(chat, mutable_patch(updates, CHAT_MUTABLE_FIELDS))
        chat.updated_at = utcnow()
        return chat

    def delete_chat(self, chat_id: str) -> bool:
        for member_id in [m.id for m in self.chat_members.values() if m.chat_id == chat_id]:
            del self.chat_members[member_id]
        for message_id in [m.id for m in self.messages.values() if m.chat_id == chat_id]:
            del self.messages[message_id]
        return self.chats.pop(chat_id, None) is not None

    def get_chat_members(self, chat_id: str) -> list[ChatMember]:
        members = (m for m in self.chat_members.values() if m.chat_id == chat_id)
        return _newest_first(members, key=lambda m: m.joined_at)

    def _find_member(self, chat_id: str, user_id: str) -> Optional[ChatMember]:
        return next(
            (m for m in self.chat_members.values() if m.chat_id == chat_id and m.user_id == user_id),
            None,
        )

    def add_chat_member(self, member: ChatMember) -> ChatMember:
        existing = self._find_member(member.chat_id, member.user_id)
        if existing is not None:
            return existing
        self._stamp_new(member, "joined_at")
        self.chat_members[member.id] = member
        return member

    def remove_chat_member(self, chat_id: str, user_id: str) -> bool:
        member = self._find_member(chat_id, user_id)
        if member is None:
            return False
        del self.chat_members[member.id]
        return True

    def get_user_chats(self, user_id: str) -> list[Chat]:
        chat_ids = {m.chat_id for m in self.chat_members.values() if m.user_id == user_id}
        joined = (c for c in self.chats.values() if c.id in chat_ids)
        return _newest_first(joined, key=lambda c: c.updated_at)

    # ---------- Messages ----------
    def get_messages(self, chat_id: str, limit: int | None = None, offset: int | None = None) -> list[Message]:
        in_chat = (m for m in self.messages.values() if m.chat_id == chat_id)
        ordered = _newest_first(in_chat, key=lambda m: m.created_at)
        start = offset or 0
        return ordered[start:start + (limit or DEFAULT_MESSAGE_LIMIT)]

    def create_message(self, message: Message) -> Message:
        self._stamp_new(message, "created_at")
        message.edited_at = None
        self.messages[message.id] = message
        return message

    def update_message(self, message_id: str, content: str) -> Optional[Message]:
        message = self.messages.get(message_id)
        if message is None:
            return None
        message.content = content
        message.edited_at = utcnow()
        return message

    def delete_message(self, message_id: str) -> bool:
        return self.messages.pop(message_id, None) is not None
