"""
Pydantic schemas for KOL document metadata.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from ..db.enums import DocumentType
from kol_tracker.utils.documents import infer_document_type

class DocumentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=300)
    type: Optional[DocumentType] = Field(None, description="Inferred from the filename when omitted")
    size: int = Field(0, ge=0, description="File size in bytes")
    url: Optional[str] = None
    file_path: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)

    def resolved_type(self) -> DocumentType:
        return self.type or infer_document_type(self.name)

class DocumentRead(BaseModel):
    id: int
    kol_id: int
    name: str
    type: DocumentType
    size: int
    url: Optional[str] = None
    file_path: Optional[str] = None
    notes: Optional[str] = None
    uploaded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
