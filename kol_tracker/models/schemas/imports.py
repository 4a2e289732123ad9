"""
Pydantic schemas for spreadsheet imports.
"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict
from kol_tracker.config import IMPORT_SETTINGS
from .kols import KOLCreate, KOLRead

def _default(key: str) -> Optional[str]:
    return IMPORT_SETTINGS["default_mapping"].get(key)  # type: ignore[union-attr]

class ColumnMapping(BaseModel):
    """Which spreadsheet header feeds which KOL field. ``None`` = not present."""
    name: str = Field(default_factory=lambda: _default("name") or "Name")
    platform: Optional[str] = Field(default_factory=lambda: _default("platform"))
    profile_link: Optional[str] = Field(default_factory=lambda: _default("profile_link"))
    youtube_followers: Optional[str] = Field(default_factory=lambda: _default("youtube_followers"))
    tiktok_followers: Optional[str] = Field(default_factory=lambda: _default("tiktok_followers"))
    twitter_followers: Optional[str] = Field(default_factory=lambda: _default("twitter_followers"))
    instagram_followers: Optional[str] = Field(default_factory=lambda: _default("instagram_followers"))
    telegram_followers: Optional[str] = Field(default_factory=lambda: _default("telegram_followers"))
    email: Optional[str] = Field(default_factory=lambda: _default("email"))
    telegram_handle: Optional[str] = Field(default_factory=lambda: _default("telegram_handle"))
    notes: Optional[str] = Field(default_factory=lambda: _default("notes"))

class ImportValidationResult(BaseModel):
    valid: bool
    row_number: int
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    data: Optional[KOLCreate] = None

class ImportRowError(BaseModel):
    row: int
    message: str

class ImportRequest(BaseModel):
    rows: List[Dict[str, Any]] = Field(min_length=1)
    mapping: Optional[ColumnMapping] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "rows": [
                {
                    "Name": "Bodoggos",
                    "Platform": "TikTok",
                    "Profile Link": "https://tiktok.com/@bodoggos",
                    "TikTok Followers": "520K",
                    "Email/Contact": "bodoggos@example.com"
                }
            ]
        }
    })

class ImportResult(BaseModel):
    success: bool
    imported_count: int
    failed_count: int
    errors: List[ImportRowError] = Field(default_factory=list)
    warnings: List[ImportRowError] = Field(default_factory=list)
    kols: List[KOLRead] = Field(default_factory=list)
