# gameforge/schemas.py
# Pydantic request/response schemas. Wire names are camelCase; snake_case is
# accepted too. Input models reject unknown fields. Patch models carry only
# the fields an update is allowed to touch.

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

ProjectStatus = Literal["not-started", "in-progress", "live"]
GameEngine = Literal["unity", "unreal", "godot", "html5", "custom"]
Platform = Literal["pc", "mobile", "console", "vr", "web"]
Availability = Literal["online", "away", "busy", "offline"]
PurchaseStatus = Literal["completed", "pending", "failed"]
ChatType = Literal["direct", "group", "main"]
MemberRole = Literal["admin", "member"]
MessageType = Literal["text", "image", "file", "system"]


_http_url = TypeAdapter(AnyHttpUrl)


def _valid_urls(cls, value):
    if value is None:
        return value
    for url in value:
        try:
            _http_url.validate_python(url)
        except ValidationError:
            raise ValueError(f"Invalid URL: {url}")
    return value


def _feature_lengths(cls, value):
    if value is None:
        return value
    for feature in value:
        if not 1 <= len(feature) <= 200:
            raise ValueError("Each feature must be 1-200 characters")
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class InputModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class OneItemRef(InputModel):
    """Mixin check: exactly one of asset_id / bundle_id."""

    @model_validator(mode="after")
    def exactly_one_item(self):
        if bool(self.asset_id) == bool(self.bundle_id):
            raise ValueError("Exactly one of assetId or bundleId is required")
        return self


# ---------- Auth ----------
class SignupIn(InputModel):
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str = Field(min_length=1)
    display_name: Optional[str] = Field(default=None, max_length=100)
    role: Literal["developer", "regular"] = "developer"

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("Passwords do not match")
        return value


class LoginIn(InputModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ChangePasswordIn(InputModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)


class DevLoginIn(InputModel):
    username: Optional[str] = None


class UserProfilePatch(InputModel):
    display_name: Optional[str] = Field(default=None, max_length=100)
    avatar: Optional[str] = None
    banner: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    job_title: Optional[str] = Field(default=None, max_length=100)
    status: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=100)
    portfolio_link: Optional[str] = Field(default=None, max_length=200)
    skills: Optional[List[str]] = Field(default=None, max_length=20)
    current_project: Optional[str] = Field(default=None, max_length=100)
    availability: Optional[Availability] = None
    settings: Optional[Dict[str, Any]] = None

    @field_validator("skills")
    @classmethod
    def skill_length(cls, value):
        if value is None:
            return value
        for skill in value:
            if len(skill) > 50:
                raise ValueError("Each skill must be at most 50 characters")
        return value


class UserOut(CamelModel):
    id: str
    username: str
    email: str
    display_name: str
    role: str
    avatar: Optional[str] = None
    banner: Optional[str] = None
    bio: Optional[str] = None
    job_title: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    portfolio_link: Optional[str] = None
    skills: List[str] = []
    current_project: Optional[str] = None
    availability: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None
    created_at: datetime


class AuthOut(BaseModel):
    message: str
    user: UserOut


class MessageOut(BaseModel):
    message: str


# ---------- Projects ----------
class ProjectCreate(InputModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    icon: str = Field(default="🎮", min_length=1, max_length=10)
    status: ProjectStatus = "not-started"
    engine: GameEngine
    platform: Platform
    owner_id: Optional[str] = None
    team_members: List[str] = []
    features: List[str] = Field(default=[], max_length=20)
    screenshots: List[str] = Field(default=[], max_length=10)

    check_screenshots = field_validator("screenshots")(_valid_urls)
    check_features = field_validator("features")(_feature_lengths)


class ProjectPatch(InputModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    icon: Optional[str] = Field(default=None, min_length=1, max_length=10)
    status: Optional[ProjectStatus] = None
    engine: Optional[GameEngine] = None
    platform: Optional[Platform] = None
    team_members: Optional[List[str]] = None
    features: Optional[List[str]] = Field(default=None, max_length=20)
    screenshots: Optional[List[str]] = Field(default=None, max_length=10)

    check_screenshots = field_validator("screenshots")(_valid_urls)
    check_features = field_validator("features")(_feature_lengths)


class ProjectOut(CamelModel):
    id: str
    name: str
    description: str
    icon: str
    status: str
    engine: str
    platform: str
    owner_id: str
    team_members: List[str]
    features: List[str]
    screenshots: List[str]
    last_updated: datetime
    created_at: datetime


class MetricsPatch(InputModel):
    active_projects: Optional[int] = Field(default=None, ge=0)
    team_members: Optional[int] = Field(default=None, ge=0)
    assets_created: Optional[int] = Field(default=None, ge=0)
    games_published: Optional[int] = Field(default=None, ge=0)
    revenue: Optional[int] = Field(default=None, ge=0)


class MetricsOut(CamelModel):
    id: str
    user_id: str
    active_projects: int
    team_members: int
    assets_created: int
    games_published: int
    revenue: int
    updated_at: datetime


# ---------- Asset store ----------
class AssetOut(CamelModel):
    id: str
    name: str
    description: str
    category: str
    price: int
    original_price: Optional[int] = None
    thumbnail: str
    file_url: str
    preview_url: Optional[str] = None
    tags: List[str]
    downloads: int
    rating: int
    review_count: int
    file_size: str
    format: str
    created_at: datetime
    updated_at: datetime


class BundleOut(CamelModel):
    id: str
    name: str
    description: str
    price: int
    original_price: Optional[int] = None
    discount: int
    thumbnail: str
    asset_ids: List[str]
    downloads: int
    rating: int
    review_count: int
    created_at: datetime
    updated_at: datetime


class CartItemCreate(OneItemRef):
    user_id: str = Field(min_length=1)
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1, le=99)


class CartItemOut(CamelModel):
    id: str
    user_id: str
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    quantity: int
    created_at: datetime


class PurchaseCreate(OneItemRef):
    user_id: str = Field(min_length=1)
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    amount: int = Field(ge=0)
    status: PurchaseStatus = "completed"


class PurchaseOut(CamelModel):
    id: str
    user_id: str
    asset_id: Optional[str] = None
    bundle_id: Optional[str] = None
    amount: int
    status: str
    created_at: datetime


# ---------- Game library ----------
class LibraryAddIn(InputModel):
    game_id: str = Field(min_length=1)
    game_name: str = Field(min_length=1, max_length=200)
    game_icon: Optional[str] = Field(default=None, max_length=10)
    game_description: Optional[str] = Field(default=None, max_length=1000)


class LibraryPatch(InputModel):
    play_time: Optional[int] = Field(default=None, ge=0)
    favorite: Optional[bool] = None
    last_played: Optional[datetime] = None


class LibraryOut(CamelModel):
    id: str
    user_id: str
    game_id: str
    game_name: str
    game_icon: str
    game_description: Optional[str] = None
    purchased_at: datetime
    last_played: Optional[datetime] = None
    play_time: int
    favorite: bool


# ---------- Chat ----------
class ChatCreate(InputModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    type: ChatType = "group"
    is_main_chat: bool = False
    created_by: Optional[str] = None


class ChatPatch(InputModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    type: Optional[ChatType] = None
    is_main_chat: Optional[bool] = None


class ChatOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    type: str
    is_main_chat: bool
    created_by: str
    created_at: datetime
    updated_at: datetime


class ChatMemberCreate(InputModel):
    user_id: str = Field(min_length=1)
    role: MemberRole = "member"


class ChatMemberOut(CamelModel):
    id: str
    chat_id: str
    user_id: str
    role: str
    joined_at: datetime


class MessageCreate(InputModel):
    user_id: Optional[str] = None
    content: str = Field(min_length=1, max_length=4000)
    type: MessageType = "text"
    reply_to_id: Optional[str] = None


class MessagePatch(InputModel):
    content: str = Field(min_length=1, max_length=4000)


class ChatMessageOut(CamelModel):
    id: str
    chat_id: str
    user_id: str
    content: str
    type: str
    reply_to_id: Optional[str] = None
    edited_at: Optional[datetime] = None
    created_at: datetime
