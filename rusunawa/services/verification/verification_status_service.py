# rusunawa/services/verification/verification_status_service.py
"""
Document verification status.

Derives a tenant's ability to book from their document snapshot and tenant
category. The evaluation itself is pure; `VerificationStatusService` adds
the fetch step and keeps fetch failures distinguishable from incomplete
verification.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from rusunawa.core.exceptions import BackendUnavailableError
from rusunawa.core.logging import get_logger
from rusunawa.integrations.base import BookingBackend
from rusunawa.schemas.common.enums import DocumentStatus, TenantCategory, VerificationStatusType
from rusunawa.schemas.document import Document, DocumentType, MissingDocument, RequiredDocument
from rusunawa.schemas.tenant import TenantProfile
from rusunawa.schemas.verification import VerificationCheck, VerificationVerdict

logger = get_logger(__name__)

KTP = RequiredDocument(id=DocumentType.KTP, name="KTP", label="KTP (ID Card)")
AGREEMENT_LETTER = RequiredDocument(
    id=DocumentType.AGREEMENT_LETTER,
    name="Surat Perjanjian",
    label="Surat Perjanjian (Agreement Letter)",
)
FAMILY_CARD = RequiredDocument(id=DocumentType.FAMILY_CARD, name="KK", label="KK (Family Card)")

REQUIRED_DOCUMENTS = {
    TenantCategory.STUDENT: (KTP, AGREEMENT_LETTER, FAMILY_CARD),
    TenantCategory.NON_STUDENT: (KTP,),
}

MESSAGE_ALL_VERIFIED = "All required documents verified! You can now book rooms."
MESSAGE_INCOMPLETE = "Document verification incomplete"
MESSAGE_UNAVAILABLE = "Unable to verify document status"


def required_documents_for(category: TenantCategory) -> Tuple[RequiredDocument, ...]:
    """Required document set of a tenant category, in display order."""
    return REQUIRED_DOCUMENTS[category]


def _find_document(documents: Sequence[Document], doc_type_id: int) -> Optional[Document]:
    # First upload of a type wins when the snapshot holds duplicates
    return next((doc for doc in documents if doc.doc_type_id == doc_type_id), None)


def _labels(missing: Iterable[MissingDocument], status: DocumentStatus) -> List[str]:
    return [doc.label for doc in missing if doc.status is status]


def evaluate_verification_status(
    documents: Sequence[Document],
    category: TenantCategory,
) -> VerificationVerdict:
    """
    Compute the verification verdict for a document snapshot.

    Message precedence when several problems coexist: missing uploads,
    then rejected, then pending.
    """
    approved_count = sum(1 for doc in documents if doc.status is DocumentStatus.APPROVED)
    pending_count = sum(1 for doc in documents if doc.status is DocumentStatus.PENDING)
    rejected_count = sum(1 for doc in documents if doc.status is DocumentStatus.REJECTED)
    total_count = len(documents)

    required = required_documents_for(category)
    required_count = len(required)

    missing_documents: List[MissingDocument] = []
    satisfied = 0
    for required_doc in required:
        document = _find_document(documents, required_doc.id)
        if document is None:
            status = DocumentStatus.MISSING
        elif document.status is not DocumentStatus.APPROVED:
            status = document.status
        else:
            satisfied += 1
            continue
        missing_documents.append(
            MissingDocument(**required_doc.model_dump(), status=status)
        )

    has_all_required_approved = satisfied == required_count
    can_book = False

    missing_names = _labels(missing_documents, DocumentStatus.MISSING)
    rejected_names = _labels(missing_documents, DocumentStatus.REJECTED)
    pending_names = _labels(missing_documents, DocumentStatus.PENDING)

    if missing_names:
        status_type = VerificationStatusType.WARNING
        message = (
            f"Missing required documents: {', '.join(missing_names)}. "
            f"Please upload them to continue."
        )
    elif rejected_names:
        status_type = VerificationStatusType.ERROR
        message = f"Required documents rejected: {', '.join(rejected_names)}. Please re-upload them."
    elif pending_names:
        status_type = VerificationStatusType.WARNING
        message = (
            f"Required documents pending approval: {', '.join(pending_names)}. "
            f"Please wait for verification."
        )
    elif not missing_documents and has_all_required_approved:
        status_type = VerificationStatusType.SUCCESS
        message = MESSAGE_ALL_VERIFIED
        can_book = True
    else:
        status_type = VerificationStatusType.ERROR
        message = MESSAGE_INCOMPLETE

    has_documents = total_count > 0

    return VerificationVerdict(
        can_book=can_book,
        status_type=status_type,
        message=message,
        approved_count=approved_count,
        pending_count=pending_count,
        rejected_count=rejected_count,
        total_count=total_count,
        required_count=required_count,
        missing_documents=missing_documents,
        has_documents=has_documents,
        all_approved=has_documents and approved_count == total_count,
        has_pending=pending_count > 0,
        has_rejected=rejected_count > 0,
        has_all_required_approved=has_all_required_approved,
    )


def unavailable_verdict() -> VerificationVerdict:
    """Verdict to show when the document snapshot could not be fetched."""
    return VerificationVerdict(
        can_book=False,
        status_type=VerificationStatusType.ERROR,
        message=MESSAGE_UNAVAILABLE,
    )


class VerificationStatusService:
    """
    Fetch-then-evaluate wrapper used by the booking wizard.

    A failed fetch never guesses: it returns `unavailable_verdict()` flagged
    with `fetch_failed=True`.
    """

    def __init__(self, backend: BookingBackend):
        self.backend = backend

    async def check(self, tenant: TenantProfile) -> VerificationCheck:
        try:
            documents = await self.backend.get_tenant_documents(tenant.tenant_id)
        except BackendUnavailableError as e:
            logger.warning(
                f"Document fetch failed for tenant {tenant.tenant_id}: {e.message}",
                extra={"tenant_ref": tenant.tenant_id},
            )
            return VerificationCheck(
                verdict=unavailable_verdict(),
                fetch_failed=True,
                error=e.message,
            )

        verdict = evaluate_verification_status(documents, tenant.category)
        logger.debug(
            "Verification evaluated",
            extra={
                "tenant_ref": tenant.tenant_id,
                "can_book": verdict.can_book,
                "status_type": verdict.status_type.value,
            },
        )
        return VerificationCheck(verdict=verdict)
