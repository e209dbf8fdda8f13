"""
Tenant document schemas.

A `Document` is one uploaded identity or agreement artifact as returned by
the backend; its binary content is never needed by the booking core.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from rusunawa.schemas.common.base import BaseSchema, FrozenSchema
from rusunawa.schemas.common.enums import DocumentStatus

__all__ = [
    "DocumentType",
    "Document",
    "RequiredDocument",
    "MissingDocument",
]


class DocumentType:
    """Well-known document type ids."""

    KTP = 1
    AGREEMENT_LETTER = 2
    FAMILY_CARD = 3


class Document(BaseSchema):
    """One uploaded document in a tenant's document snapshot."""

    doc_type_id: int = Field(..., ge=1, description="Document kind (KTP=1, agreement=2, KK=3)")
    status: DocumentStatus = Field(..., description="Review status of the upload")
    document_id: Optional[int] = Field(None, alias="docId")
    file_name: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v == DocumentStatus.MISSING.value:
                raise ValueError("'missing' is synthesized and cannot be stored on a document")
        return v


class RequiredDocument(FrozenSchema):
    """A document type a tenant category must have approved before booking."""

    id: int
    name: str
    label: str


class MissingDocument(RequiredDocument):
    """A required document that is not (yet) approved."""

    status: DocumentStatus
