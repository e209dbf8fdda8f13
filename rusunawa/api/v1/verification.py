"""
Verification endpoints.

Evaluate a document snapshot without touching the backend, and list the
documents a tenant type must have approved before booking.
"""

from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import Field

from rusunawa.config.settings import settings
from rusunawa.core.logging import get_logger
from rusunawa.schemas.common.base import BaseSchema
from rusunawa.schemas.common.enums import TenantCategory
from rusunawa.schemas.document import Document, RequiredDocument
from rusunawa.schemas.verification import VerificationVerdict
from rusunawa.services.verification import evaluate_verification_status, required_documents_for

router = APIRouter(prefix="/verification")
logger = get_logger(__name__)


class VerificationRequest(BaseSchema):
    """Document snapshot plus the tenant type name (e.g. ``mahasiswa``)."""

    documents: List[Document] = Field(default_factory=list)
    tenant_type: Optional[str] = None


class RequiredDocumentsResponse(BaseSchema):
    tenant_type: Optional[str] = None
    category: TenantCategory
    required_documents: List[RequiredDocument]


def _category(tenant_type: Optional[str]) -> TenantCategory:
    return TenantCategory.from_tenant_type_name(tenant_type, settings.STUDENT_TENANT_TYPE)


@router.post("/evaluate", response_model=VerificationVerdict)
async def evaluate(request: VerificationRequest) -> VerificationVerdict:
    category = _category(request.tenant_type)
    verdict = evaluate_verification_status(request.documents, category)
    logger.debug(
        "Verification evaluated",
        extra={"category": category.value, "can_book": verdict.can_book},
    )
    return verdict


@router.get("/required-documents", response_model=RequiredDocumentsResponse)
async def required_documents(
    tenant_type: Optional[str] = Query(None, alias="tenantType"),
) -> RequiredDocumentsResponse:
    category = _category(tenant_type)
    return RequiredDocumentsResponse(
        tenant_type=tenant_type,
        category=category,
        required_documents=list(required_documents_for(category)),
    )
