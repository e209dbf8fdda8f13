"""
Verification verdict schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from rusunawa.schemas.common.base import FrozenSchema
from rusunawa.schemas.common.enums import VerificationStatusType
from rusunawa.schemas.document import MissingDocument

__all__ = [
    "VerificationVerdict",
    "VerificationCheck",
]


class VerificationVerdict(FrozenSchema):
    """
    Computed eligibility of a tenant to book. Never persisted.

    `can_book` is true exactly when `missing_documents` is empty and every
    required document type has an approved upload.
    """

    can_book: bool = False
    status_type: VerificationStatusType
    message: str

    approved_count: int = Field(0, ge=0)
    pending_count: int = Field(0, ge=0)
    rejected_count: int = Field(0, ge=0)
    total_count: int = Field(0, ge=0)
    required_count: int = Field(0, ge=0)

    missing_documents: List[MissingDocument] = Field(default_factory=list)

    has_documents: bool = False
    all_approved: bool = False
    has_pending: bool = False
    has_rejected: bool = False
    has_all_required_approved: bool = False


class VerificationCheck(FrozenSchema):
    """
    Result of fetching and evaluating a tenant's documents.

    `fetch_failed` separates "could not verify" from "verified as
    incomplete"; the verdict shape alone does not.
    """

    verdict: VerificationVerdict
    fetch_failed: bool = False
    error: Optional[str] = None
