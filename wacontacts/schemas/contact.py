"""
Pydantic schemas for contact records exchanged with the contacts backend.
"""
from typing import List, Any
from pydantic import BaseModel, Field, field_validator


class ContactRecord(BaseModel):
    """Canonical contact produced by the import pipeline."""
    phone: str = Field(..., description="Phone number with spaces, dashes and parentheses removed")
    name: str = Field(default="", description="Contact name")
    email: str = Field(default="", description="Contact email")
    tags: List[str] = Field(default=[], description="Unique tags for categorization")

    @field_validator("phone")
    def validate_phone(cls, v):
        """Phone is mandatory for every record sent to the backend."""
        if not v or not v.strip():
            raise ValueError("Phone number is required")
        return v

    @field_validator("tags")
    def validate_tags(cls, v):
        """Remove empty tags and duplicates, keeping first-seen order."""
        return list(dict.fromkeys(tag.strip() for tag in v if tag and tag.strip()))


class ContactBulkImport(BaseModel):
    """Request body for the backend bulk import endpoint."""
    contacts: List[ContactRecord] = Field(..., description="Contacts to import in one batch")

    @field_validator("contacts")
    def validate_contacts(cls, v):
        """Validate contacts list."""
        if not v:
            raise ValueError("Contacts list cannot be empty")
        return v


class ImportResult(BaseModel):
    """Outcome of a bulk import as reported by the backend."""
    imported: int = Field(0, description="Number of contacts persisted by the backend")
    errors: List[Any] = Field(default=[], description="Per-contact errors reported by the backend")

    @field_validator("errors", mode="before")
    def none_to_list(cls, v):
        """The backend sends null when nothing failed."""
        return v or []

    @property
    def error_count(self) -> int:
        return len(self.errors)


class ExportedContact(BaseModel):
    """Contact as returned by the backend export endpoint."""
    name: str = ""
    phone: str = ""
    email: str = ""
    tags: List[str] = []

    @field_validator("name", "phone", "email", mode="before")
    def none_to_empty(cls, v):
        return v or ""

    @field_validator("tags", mode="before")
    def none_to_list(cls, v):
        return v or []
