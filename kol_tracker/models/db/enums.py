"""Central Enum definitions for core domain states.

These replace scattered string literals to ensure consistency across
DB models, schemas, snapshots and business logic.
"""
from __future__ import annotations
import enum


class KOLStatus(str, enum.Enum):
    REACHED = "reached"
    IN_CONTACT = "in_contact"
    KYC = "kyc"
    CONTRACTED = "contracted"
    INVOICED = "invoiced"
    PAID = "paid"
    # Terminal failure state
    NOT_PAID = "not_paid"


class SocialPlatform(str, enum.Enum):
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    TELEGRAM = "telegram"


class DocumentType(str, enum.Enum):
    INVOICE = "invoice"
    MSA = "msa"
    CONTRACT = "contract"
    OTHER = "other"

# ------------------------- Budget / Invoice Enums ------------------------- #

class InvoiceStatus(str, enum.Enum):
    PENDING = "pending"
    INVOICED = "invoiced"
    PAID = "paid"
    NOT_PAID = "not_paid"
    CANCELLED = "cancelled"

class BudgetPeriod(str, enum.Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONE_TIME = "one_time"

# --------------------------- Snapshot mutations --------------------------- #

class MutationKind(str, enum.Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"

__all__ = [
    "KOLStatus",
    "SocialPlatform",
    "DocumentType",
    "InvoiceStatus",
    "BudgetPeriod",
    "MutationKind",
]
