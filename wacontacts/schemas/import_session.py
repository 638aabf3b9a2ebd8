"""
Pydantic schemas for the CSV import workflow.
"""
from typing import List, Optional, Dict
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator

from wacontacts.schemas.contact import ImportResult


class ImportStep(str, Enum):
    """Import workflow steps."""
    UPLOAD = "upload"
    MAPPING = "mapping"
    PREVIEW = "preview"
    DONE = "done"


MAPPED_FIELDS = ("phone", "name", "email", "tags")


class ColumnMapping(BaseModel):
    """Zero-based column index for each contact field, or None when unset."""
    phone: Optional[int] = Field(None, description="Column holding phone numbers")
    name: Optional[int] = Field(None, description="Column holding contact names")
    email: Optional[int] = Field(None, description="Column holding emails")
    tags: Optional[int] = Field(None, description="Column holding ';'-separated tags")

    @field_validator("phone", "name", "email", "tags")
    def validate_index(cls, v):
        """Column indices are zero-based."""
        if v is not None and v < 0:
            raise ValueError("Column index cannot be negative")
        return v

    @property
    def is_complete(self) -> bool:
        """Whether the mapping is sufficient to import."""
        return self.phone is not None

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {"phone": 1, "name": 0, "email": 2, "tags": None}
        }


class TextImportRequest(BaseModel):
    """Pasted CSV or manual contact text."""
    text: str = Field(..., description="Newline-delimited text")
    filename: Optional[str] = Field(None, description="Optional label for the pasted data")


class MappedPreviewRow(BaseModel):
    """Raw values a preview row yields under the current mapping."""
    phone: str
    name: str
    email: str
    tags: str


class ImportSessionResponse(BaseModel):
    """View of an import session."""
    id: str = Field(..., description="Import session ID")
    step: ImportStep = Field(..., description="Current workflow step")
    filename: Optional[str] = Field(None, description="Uploaded file name")
    headers: List[str] = Field(default=[], description="Parsed header row")
    row_count: int = Field(0, description="Number of non-blank data lines")
    preview_rows: List[List[str]] = Field(default=[], description="First data rows, parsed")
    mapped_preview: List[MappedPreviewRow] = Field(default=[], description="Preview rows under the mapping")
    mapping: ColumnMapping = Field(default_factory=ColumnMapping, description="Current column mapping")
    submitting: bool = Field(False, description="Whether a submission is in flight")
    last_error: Optional[Dict[str, str]] = Field(None, description="Error from the last failed submission")
    result: Optional[ImportResult] = Field(None, description="Backend result once done")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
