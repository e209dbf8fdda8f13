"""
Verification service package.
"""

from rusunawa.services.verification.verification_status_service import (
    REQUIRED_DOCUMENTS,
    VerificationStatusService,
    evaluate_verification_status,
    required_documents_for,
    unavailable_verdict,
)

__all__ = [
    "REQUIRED_DOCUMENTS",
    "VerificationStatusService",
    "evaluate_verification_status",
    "required_documents_for",
    "unavailable_verdict",
]
