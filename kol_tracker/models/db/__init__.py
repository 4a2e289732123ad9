from .kols import KOLProfile
from .kol_platforms import KOLPlatform
from .content_posts import ContentPost
from .kol_documents import KOLDocument
from .invoices import Invoice
from .enums import KOLStatus, SocialPlatform, DocumentType, InvoiceStatus, BudgetPeriod, MutationKind

__all__ = [
    "KOLProfile",
    "KOLPlatform",
    "ContentPost",
    "KOLDocument",
    "Invoice",
    "KOLStatus",
    "SocialPlatform",
    "DocumentType",
    "InvoiceStatus",
    "BudgetPeriod",
    "MutationKind",
]
