# gameforge/models.py — users, projects, metrics, asset store, library, chat

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field, UniqueConstraint


def utcnow():
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


def default_settings() -> Dict[str, Any]:
    return {
        "notifications": {
            "projectUpdates": True,
            "teamMessages": True,
            "communityActivity": True,
        },
        "privacy": {
            "profileVisibility": "public",
            "whoCanMessage": "everyone",
        },
    }


# ---------- Enums (plain string values on the wire) ----------
USER_ROLES = ("developer", "regular")
AVAILABILITY = ("online", "away", "busy", "offline")
PROJECT_STATUSES = ("not-started", "in-progress", "live")
GAME_ENGINES = ("unity", "unreal", "godot", "html5", "custom")
PLATFORMS = ("pc", "mobile", "console", "vr", "web")
ASSET_CATEGORIES = ("music", "graphics", "sounds", "tools", "scripts")
PURCHASE_STATUSES = ("completed", "pending", "failed")
CHAT_TYPES = ("direct", "group", "main")
MEMBER_ROLES = ("admin", "member")
MESSAGE_TYPES = ("text", "image", "file", "system")


# ---------- Users ----------
class User(SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    username: str = Field(index=True)
    password: str
    email: str = Field(index=True)
    display_name: str
    role: str = "developer"

    avatar: Optional[str] = None
    banner: Optional[str] = None
    bio: Optional[str] = None
    job_title: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    portfolio_link: Optional[str] = None
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    current_project: Optional[str] = None
    availability: str = "online"
    settings: Dict[str, Any] = Field(default_factory=default_settings, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow)


# ---------- Projects ----------
class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: str
    icon: str = "🎮"
    status: str = "not-started"
    engine: str
    platform: str
    owner_id: str = Field(index=True)
    team_members: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    screenshots: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    last_updated: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)


class Metrics(SQLModel, table=True):
    __tablename__ = "metrics"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True, unique=True)
    active_projects: int = 0
    team_members: int = 0
    assets_created: int = 0
    games_published: int = 0
    revenue: int = 0  # cents
    updated_at: datetime = Field(default_factory=utcnow)


# ---------- Asset store ----------
class Asset(SQLModel, table=True):
    __tablename__ = "assets"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: str
    category: str = Field(index=True)
    price: int  # cents
    original_price: Optional[int] = None
    thumbnail: str
    file_url: str
    preview_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    downloads: int = 0
    rating: int = 0  # stars * 100
    review_count: int = 0
    file_size: str
    format: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class AssetBundle(SQLModel, table=True):
    __tablename__ = "asset_bundles"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: str
    price: int
    original_price: Optional[int] = None
    discount: int = 0  # percent
    thumbnail: str
    asset_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    downloads: int = 0
    rating: int = 0
    review_count: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CartItem(SQLModel, table=True):
    __tablename__ = "cart_items"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    quantity: int = 1
    created_at: datetime = Field(default_factory=utcnow)


class Purchase(SQLModel, table=True):
    __tablename__ = "purchases"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    amount: int
    status: str = "completed"
    created_at: datetime = Field(default_factory=utcnow)


# ---------- Game library ----------
class GameLibrary(SQLModel, table=True):
    __tablename__ = "game_library"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    game_id: str
    game_name: str
    game_icon: str = "🎮"
    game_description: Optional[str] = None
    purchased_at: datetime = Field(default_factory=utcnow)
    last_played: Optional[datetime] = None
    play_time: int = 0  # minutes
    favorite: bool = False


# ---------- Chat ----------
class Chat(SQLModel, table=True):
    __tablename__ = "chats"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    description: Optional[str] = None
    type: str = "group"
    is_main_chat: bool = False
    created_by: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ChatMember(SQLModel, table=True):
    __tablename__ = "chat_members"
    __table_args__ = (UniqueConstraint("chat_id", "user_id", name="uq_chat_member"),)

    id: str = Field(default_factory=new_id, primary_key=True)
    chat_id: str = Field(index=True)
    user_id: str = Field(index=True)
    role: str = "member"
    joined_at: datetime = Field(default_factory=utcnow)


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: str = Field(default_factory=new_id, primary_key=True)
    chat_id: str = Field(index=True)
    user_id: str
    content: str
    type: str = "text"
    reply_to_id: Optional[str] = None
    edited_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
