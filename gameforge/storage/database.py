# gameforge/storage/database.py
"""Relational store over a pooled SQLAlchemy engine.

Every public call goes through :func:`run_with_retry`, so a transient
connection problem is retried with backoff while schema and programming
errors surface at once.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Optional, TypeVar

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from .. import seed
from ..db import init_db
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
from .retry import DEFAULT_ATTEMPTS, DEFAULT_BASE_DELAY, run_with_retry

log = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=SQLModel)


class DatabaseStorage(Storage):
    def __init__(
        self,
        engine: Engine,
        *,
        seed_data: bool = False,
        retry_attempts: int = DEFAULT_ATTEMPTS,
        retry_base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.engine = engine
        self.retry_attempts = retry_attempts
        self.retry_base_delay = retry_base_delay
        self._sleep = sleep

        init_db(engine)
        if seed_data:
            self._seed_sample_data()

    # ---------- plumbing ----------
    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def _run(self, operation: Callable[[], T], context: str) -> T:
        return run_with_retry(
            operation,
            context,
            attempts=self.retry_attempts,
            base_delay=self.retry_base_delay,
            sleep=self._sleep,
        )

    def _get(self, model: type[M], row_id: str, context: str) -> Optional[M]:
        def op():
            with self._session() as session:
                return session.get(model, row_id)

        return self._run(op, context)

    def _first(self, statement, context: str):
        def op():
            with self._session() as session:
                return session.exec(statement).first()

        return self._run(op, context)

    def _all(self, statement, context: str) -> list:
        def op():
            with self._session() as session:
                return list(session.exec(statement).all())

        return self._run(op, context)

    def _insert(self, row: M, context: str, *stamps: str) -> M:
        now = utcnow()
        for name in stamps:
            setattr(row, name, now)

        def op():
            with self._session() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return row

        return self._run(op, context)

    def _update(self, model: type[M], row_id: str, fields: Mapping[str, Any], context: str,
                stamp: str | None = None) -> Optional[M]:
        def op():
            with self._session() as session:
                row = session.get(model, row_id)
                if row is None:
                    return None
                for name, value in fields.items():
                    setattr(row, name, value)
                if stamp:
                    setattr(row, stamp, utcnow())
                session.add(row)
                session.commit()
                session.refresh(row)
                return row

        return self._run(op, context)

    def _delete(self, model: type[SQLModel], row_id: str, context: str) -> bool:
        def op():
            with self._session() as session:
                row = session.get(model, row_id)
                if row is None:
                    return False
                session.delete(row)
                session.commit()
                return True

        return self._run(op, context)

    def _seed_sample_data(self) -> None:
        try:
            with self._session() as session:
                if session.exec(select(User).limit(1)).first() is not None:
                    return
                session.add_all(seed.sample_rows())
                session.commit()
            log.info("Sample data initialized successfully")
        except Exception:
            log.exception("Error initializing sample data")

    def close(self) -> None:
        self.engine.dispose()

    # ---------- Users ----------
    def get_user(self, user_id: str) -> Optional[User]:
        return self._get(User, user_id, f"get_user({user_id})")

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._first(select(User).where(User.username == username), f"get_user_by_username({username})")

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._first(select(User).where(User.email == email), f"get_user_by_email({email})")

    def create_user(self, user: User) -> User:
        return self._insert(user, f"create_user({user.username})", "created_at")

    def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Optional[User]:
        fields = mutable_patch(updates, USER_MUTABLE_FIELDS)
        return self._update(User, user_id, fields, f"update_user({user_id})")

    def set_user_password(self, user_id: str, password_hash: str) -> Optional[User]:
        return self._update(User, user_id, {"password": password_hash}, f"set_user_password({user_id})")

    # ---------- Projects ----------
    def get_project(self, project_id: str) -> Optional[Project]:
        return self._get(Project, project_id, f"get_project({project_id})")

    def get_projects_by_user_id(self, user_id: str) -> list[Project]:
        statement = (
            select(Project).where(Project.owner_id == user_id).order_by(Project.last_updated.desc())
        )
        return self._all(statement, f"get_projects_by_user_id({user_id})")

    def get_all_projects(self) -> list[Project]:
        return self._all(select(Project).order_by(Project.last_updated.desc()), "get_all_projects")

    def create_project(self, project: Project) -> Project:
        return self._insert(project, f"create_project({project.name})", "created_at", "last_updated")

    def update_project(self, project_id: str, updates: Mapping[str, Any]) -> Optional[Project]:
        fields = mutable_patch(updates, PROJECT_MUTABLE_FIELDS)
        return self._update(Project, project_id, fields, f"update_project({project_id})", stamp="last_updated")

    def delete_project(self, project_id: str) -> bool:
        return self._delete(Project, project_id, f"delete_project({project_id})")

    # ---------- Metrics ----------
    def get_metrics_by_user_id(self, user_id: str) -> Optional[Metrics]:
        return self._first(select(Metrics).where(Metrics.user_id == user_id), f"get_metrics_by_user_id({user_id})")

    def update_metrics(self, user_id: str, updates: Mapping[str, Any]) -> Metrics:
        fields = mutable_patch(updates, METRICS_MUTABLE_FIELDS)

        def op():
            with self._session() as session:
                metrics = session.exec(select(Metrics).where(Metrics.user_id == user_id)).first()
                if metrics is None:
                    metrics = Metrics(user_id=user_id)
                for name, value in fields.items():
                    setattr(metrics, name, value)
                metrics.updated_at = utcnow()
                session.add(metrics)
                session.commit()
                session.refresh(metrics)
                return metrics

        return self._run(op, f"update_metrics({user_id})")

    # ---------- Assets / bundles ----------
    def get_all_assets(self) -> list[Asset]:
        return self._all(select(Asset).order_by(Asset.created_at.desc()), "get_all_assets")

    def get_assets_by_category(self, category: str) -> list[Asset]:
        statement = select(Asset).where(Asset.category == category).order_by(Asset.created_at.desc())
        return self._all(statement, f"get_assets_by_category({category})")

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self._get(Asset, asset_id, f"get_asset({asset_id})")

    def create_asset(self, asset: Asset) -> Asset:
        asset.downloads, asset.rating, asset.review_count = 0, 0, 0
        return self._insert(asset, f"create_asset({asset.name})", "created_at", "updated_at")

    def get_all_bundles(self) -> list[AssetBundle]:
        return self._all(select(AssetBundle).order_by(AssetBundle.created_at.desc()), "get_all_bundles")

    def get_bundle(self, bundle_id: str) -> Optional[AssetBundle]:
        return self._get(AssetBundle, bundle_id, f"get_bundle({bundle_id})")

    def create_bundle(self, bundle: AssetBundle) -> AssetBundle:
        bundle.downloads, bundle.rating, bundle.review_count = 0, 0, 0
        return self._insert(bundle, f"create_bundle({bundle.name})", "created_at", "updated_at")

    # ---------- Cart / purchases ----------
    def get_cart_items(self, user_id: str) -> list[CartItem]:
        statement = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at.desc())
        return self._all(statement, f"get_cart_items({user_id})")

    def add_to_cart(self, item: CartItem) -> CartItem:
        return self._insert(item, f"add_to_cart({item.user_id})", "created_at")

    def remove_from_cart(self, user_id: str, item_id: str) -> bool:
        def op():
            with self._session() as session:
                item = session.get(CartItem, item_id)
                if item is None or item.user_id != user_id:
                    return False
                session.delete(item)
                session.commit()
                return True

        return self._run(op, f"remove_from_cart({user_id}, {item_id})")

    def clear_cart(self, user_id: str) -> bool:
        def op():
            with self._session() as session:
                items = session.exec(select(CartItem).where(CartItem.user_id == user_id)).all()
                for item in items:
                    session.delete(item)
                session.commit()
                return bool(items)

        return self._run(op, f"clear_cart({user_id})")

    def create_purchase(self, purchase: Purchase) -> Purchase:
        return self._insert(purchase, f"create_purchase({purchase.user_id})", "created_at")

    def get_purchases_by_user_id(self, user_id: str) -> list[Purchase]:
        statement = select(Purchase).where(Purchase.user_id == user_id).order_by(Purchase.created_at.desc())
        return self._all(statement, f"get_purchases_by_user_id({user_id})")

    # ---------- Game library ----------
    def get_game_library_by_user_id(self, user_id: str) -> list[GameLibrary]:
        statement = (
            select(GameLibrary).where(GameLibrary.user_id == user_id).order_by(GameLibrary.purchased_at.desc())
        )
        return self._all(statement, f"get_game_library_by_user_id({user_id})")

    def add_to_game_library(self, item: GameLibrary) -> GameLibrary:
        return self._insert(item, f"add_to_game_library({item.user_id})", "purchased_at")

    def update_game_library_item(self, item_id: str, updates: Mapping[str, Any]) -> Optional[GameLibrary]:
        fields = mutable_patch(updates, LIBRARY_MUTABLE_FIELDS)
        return self._update(GameLibrary, item_id, fields, f"update_game_library_item({item_id})")

    # ---------- Chats ----------
    def get_all_chats(self) -> list[Chat]:
        return self._all(select(Chat).order_by(Chat.created_at.desc()), "get_all_chats")

    def get_chat(self, chat_id: str) -> Optional[Chat]:
        return self._get(Chat, chat_id, f"get_chat({chat_id})")

    def get_chats_by_user_id(self, user_id: str) -> list[Chat]:
        statement = select(Chat).where(Chat.created_by == user_id).order_by(Chat.created_at.desc())
        return self._all(statement, f"get_chats_by_user_id({user_id})")

    def create_chat(self, chat: Chat) -> Chat:
        return self._insert(chat, f"create_chat({chat.name})", "created_at", "updated_at")

    def update_chat(self, chat_id: str, updates: Mapping[str, Any]) -> Optional[Chat]:
        fields = mutable_patch(updates, CHAT_MUTABLE_FIELDS)
        return self._update(Chat, chat_id, fields, f"update_chat({chat_id})", stamp="updated_at")

    def delete_chat(self, chat_id: str) -> bool:
        def op():
            with self._session() as session:
                for message in session.exec(select(Message).where(Message.chat_id == chat_id)).all():
                    session.delete(message)
                for member in session.exec(select(ChatMember).where(ChatMember.chat_id == chat_id)).all():
                    session.delete(member)
                chat = session.get(Chat, chat_id)
                if chat is not None:
                    session.delete(chat)
                session.commit()
                return chat is not None

        return self._run(op, f"delete_chat({chat_id})")

    def get_chat_members(self, chat_id: str) -> list[ChatMember]:
        statement = (
            select(ChatMember).where(ChatMember.chat_id == chat_id).order_by(ChatMember.joined_at.desc())
        )
        return self._all(statement, f"get_chat_members({chat_id})")

    def add_chat_member(self, member: ChatMember) -> ChatMember:
        member.joined_at = utcnow()
        membership = (ChatMember.chat_id == member.chat_id, ChatMember.user_id == member.user_id)

        def op():
            with self._session() as session:
                existing = session.exec(select(ChatMember).where(*membership)).first()
                if existing is not None:
                    return existing
                session.add(member)
                try:
                    session.commit()
                except IntegrityError:
                    # lost a race against a concurrent insert of the same membership
                    session.rollback()
                    return session.exec(select(ChatMember).where(*membership)).one()
                session.refresh(member)
                return member

        return self._run(op, f"add_chat_member({member.chat_id}, {member.user_id})")

    def remove_chat_member(self, chat_id: str, user_id: str) -> bool:
        def op():
            with self._session() as session:
                member = session.exec(
                    select(ChatMember).where(ChatMember.chat_id == chat_id, ChatMember.user_id == user_id)
                ).first()
                if member is None:
                    return False
                session.delete(member)
                session.commit()
                return True

        return self._run(op, f"remove_chat_member({chat_id}, {user_id})")

    def get_user_chats(self, user_id: str) -> list[Chat]:
        statement = (
            select(Chat)
            .join(ChatMember, ChatMember.chat_id == Chat.id)
            .where(ChatMember.user_id == user_id)
            .order_by(Chat.updated_at.desc())
        )
        return self._all(statement, f"get_user_chats({user_id})")

    # ---------- Messages ----------
    def get_messages(self, chat_id: str, limit: int | None = None, offset: int | None = None) -> list[Message]:
        statement = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.desc())
            .offset(offset or 0)
            .limit(limit or DEFAULT_MESSAGE_LIMIT)
        )
        return self._all(statement, f"get_messages({chat_id})")

    def create_message(self, message: Message) -> Message:
        message.edited_at = None
        return self._insert(message, f"create_message({message.chat_id})", "created_at")

    def update_message(self, message_id: str, content: str) -> Optional[Message]:
        fields = {"content": content}
        return self._update(Message, message_id, fields, f"update_message({message_id})", stamp="edited_at")

    def delete_message(self, message_id: str) -> bool:
        return self._delete(Message, message_id, f"delete_message({message_id})")
