"""
Pydantic schemas for KOL roster management.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, EmailStr, ConfigDict, field_validator
from ..db.enums import KOLStatus, SocialPlatform
from .documents import DocumentCreate, DocumentRead
from .posts import PostRead

class PlatformLinkCreate(BaseModel):
    platform: SocialPlatform
    profile_url: str = Field("", max_length=500)
    follower_count: int = Field(0, ge=0)
    username: Optional[str] = Field(None, max_length=200)

class PlatformLinkRead(BaseModel):
    id: int
    kol_id: int
    platform: SocialPlatform
    profile_url: str
    follower_count: int
    username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class KOLCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    telegram_handle: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=5000)
    status: KOLStatus = KOLStatus.REACHED
    kyc_completed: bool = False
    platforms: List[PlatformLinkCreate] = Field(default_factory=list)
    documents: List[DocumentCreate] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "Crypto Wendy",
            "email": "wendy@example.com",
            "telegram_handle": "@cryptowendy",
            "status": "in_contact",
            "platforms": [
                {"platform": "youtube", "profile_url": "https://youtube.com/@wendy", "follower_count": 258000},
                {"platform": "tiktok", "profile_url": "https://tiktok.com/@wendy", "follower_count": 299000}
            ]
        }
    })

class KOLUpdate(BaseModel):
    """Partial update. When ``platforms`` is sent, the whole set is replaced."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    telegram_handle: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=5000)
    status: Optional[KOLStatus] = None
    kyc_completed: Optional[bool] = None
    platforms: Optional[List[PlatformLinkCreate]] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    def profile_fields(self) -> dict:
        """Only the explicitly sent scalar fields, without the platform set.

        An explicit ``null`` clears optional contact fields but is ignored for
        name, status and kyc_completed, which cannot be empty.
        """
        fields = self.model_dump(exclude_unset=True, exclude={"platforms"})
        return {
            k: v for k, v in fields.items()
            if v is not None or k in {"email", "telegram_handle", "notes"}
        }

class KOLRead(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    telegram_handle: Optional[str] = None
    notes: Optional[str] = None
    status: KOLStatus
    kyc_completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    platforms: List[PlatformLinkRead] = Field(default_factory=list)
    posts: List[PostRead] = Field(default_factory=list)
    documents: List[DocumentRead] = Field(default_factory=list)

    # Derived, recomputed on every change
    total_followers: int | float
    total_impressions: int | float
    total_cost: float
    num_posts: int
    average_cpm: float

    model_config = ConfigDict(from_attributes=True)

class KOLFilters(BaseModel):
    search: Optional[str] = None
    status: Optional[List[KOLStatus]] = None
    platforms: Optional[List[SocialPlatform]] = None
    min_followers: Optional[int] = Field(None, ge=0)
    max_followers: Optional[int] = Field(None, ge=0)
    min_cpm: Optional[float] = Field(None, ge=0)
    max_cpm: Optional[float] = Field(None, ge=0)
