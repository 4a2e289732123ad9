"""
Read schemas for derived metrics.
"""
from typing import List
from pydantic import BaseModel, ConfigDict
from ..db.enums import SocialPlatform

class EntityMetricsRead(BaseModel):
    total_followers: int | float
    total_impressions: int | float
    total_cost: float
    num_posts: int
    average_cpm: float

    model_config = ConfigDict(from_attributes=True)

class PlatformBudgetRead(BaseModel):
    platform: SocialPlatform
    amount: float

    model_config = ConfigDict(from_attributes=True)

class TopPerformerRead(BaseModel):
    kol_id: int
    name: str
    average_cpm: float
    total_cost: float
    total_impressions: int | float

    model_config = ConfigDict(from_attributes=True)

class CPMEntryRead(BaseModel):
    kol_id: int
    name: str
    average_cpm: float

    model_config = ConfigDict(from_attributes=True)

class RosterMetricsRead(BaseModel):
    total_kols: int
    total_spend: float
    total_impressions: int | float
    total_posts: int
    average_cpm: float
    total_followers_reach: int | float
    budget_by_platform: List[PlatformBudgetRead]
    top_performers: List[TopPerformerRead]

    model_config = ConfigDict(from_attributes=True)
