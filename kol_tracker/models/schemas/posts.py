"""
Pydantic schemas for content post management.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from ..db.enums import SocialPlatform

class PostCreate(BaseModel):
    platform: SocialPlatform
    url: str = Field(min_length=1)
    title: Optional[str] = Field(None, max_length=500)
    posted_date: date
    impressions: int = Field(ge=0)
    engagement: Optional[int] = Field(None, ge=0)
    clicks: Optional[int] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0, description="Amount paid for this post")
    notes: Optional[str] = Field(None, max_length=2000)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "platform": "youtube",
            "url": "https://youtube.com/watch?v=abc123",
            "title": "Wallet walkthrough",
            "posted_date": "2025-11-02",
            "impressions": 100000,
            "engagement": 4200,
            "clicks": 830,
            "cost": 1000
        }
    })

class PostUpdate(BaseModel):
    """Partial update; only fields sent are written."""
    platform: Optional[SocialPlatform] = None
    url: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, max_length=500)
    posted_date: Optional[date] = None
    impressions: Optional[int] = Field(None, ge=0)
    engagement: Optional[int] = Field(None, ge=0)
    clicks: Optional[int] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("platform", "url", "posted_date", "impressions")
    @classmethod
    def reject_null(cls, v):
        # Omitted is fine; an explicit null would blank a required column
        if v is None:
            raise ValueError("field cannot be null")
        return v

class PostRead(BaseModel):
    id: int
    kol_id: int
    platform: SocialPlatform
    url: str
    title: Optional[str] = None
    posted_date: Optional[date] = None
    impressions: int
    engagement: Optional[int] = None
    clicks: Optional[int] = None
    cost: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
