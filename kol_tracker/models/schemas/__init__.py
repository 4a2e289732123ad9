from .kols import (
    PlatformLinkCreate, PlatformLinkRead,
    KOLCreate, KOLUpdate, KOLRead, KOLFilters,
)
from .posts import PostCreate, PostUpdate, PostRead
from .documents import DocumentCreate, DocumentRead
from .metrics import (
    EntityMetricsRead,
    PlatformBudgetRead,
    TopPerformerRead,
    CPMEntryRead,
    RosterMetricsRead,
)
from .imports import ColumnMapping, ImportValidationResult, ImportRowError, ImportRequest, ImportResult
from .invoices import InvoiceCreate, InvoiceUpdate, InvoiceRead, BudgetSummaryRead

__all__ = [
    # KOLs
    "PlatformLinkCreate",
    "PlatformLinkRead",
    "KOLCreate",
    "KOLUpdate",
    "KOLRead",
    "KOLFilters",

    # Posts
    "PostCreate",
    "PostUpdate",
    "PostRead",

    # Documents
    "DocumentCreate",
    "DocumentRead",

    # Metrics
    "EntityMetricsRead",
    "PlatformBudgetRead",
    "TopPerformerRead",
    "CPMEntryRead",
    "RosterMetricsRead",

    # Imports
    "ColumnMapping",
    "ImportValidationResult",
    "ImportRowError",
    "ImportRequest",
    "ImportResult",

    # Invoices
    "InvoiceCreate",
    "InvoiceUpdate",
    "InvoiceRead",
    "BudgetSummaryRead",
]
