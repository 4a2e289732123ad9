"""Document helpers: default type inference from a filename."""
from __future__ import annotations

from kol_tracker.config import DOCUMENT_SETTINGS
from kol_tracker.models.db.enums import DocumentType


def infer_document_type(filename: str | None) -> DocumentType:
    """Guess a document's type from its filename.

    Checked in order: invoice ("invoice", "inv_", "bill"), msa ("msa",
    "master service"), contract ("contract", "agreement"); anything else is
    ``other``. This only supplies a default: callers may always override it.
    """
    lowered = (filename or "").lower()
    for type_value, keywords in DOCUMENT_SETTINGS["type_keywords"]:  # type: ignore[union-attr]
        if any(keyword in lowered for keyword in keywords):
            return DocumentType(type_value)
    return DocumentType(DOCUMENT_SETTINGS["fallback_type"])


__all__ = ["infer_document_type"]
