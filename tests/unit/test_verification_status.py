import itertools

import pytest

from conftest import FakeBackend, approved
from rusunawa.schemas.common.enums import DocumentStatus, TenantCategory, VerificationStatusType
from rusunawa.schemas.document import Document, DocumentType
from rusunawa.services.verification import (
    VerificationStatusService,
    evaluate_verification_status,
    required_documents_for,
    unavailable_verdict,
)

STATUSES = [None, "pending", "approved", "rejected"]
TYPES = [DocumentType.KTP, DocumentType.AGREEMENT_LETTER, DocumentType.FAMILY_CARD]


def snapshot(statuses):
    return [
        Document(doc_type_id=doc_type, status=status)
        for doc_type, status in zip(TYPES, statuses)
        if status is not None
    ]


class TestEvaluateVerificationStatus:

    @pytest.mark.parametrize("category", list(TenantCategory))
    def test_verdict_is_total_over_document_sets(self, category):
        for statuses in itertools.product(STATUSES, repeat=len(TYPES)):
            verdict = evaluate_verification_status(snapshot(statuses), category)

            assert verdict.status_type in set(VerificationStatusType)
            assert verdict.can_book == (not verdict.missing_documents)
            assert verdict.can_book == (verdict.status_type is VerificationStatusType.SUCCESS)

    def test_student_with_only_ktp_is_missing_agreement_and_family_card(self):
        verdict = evaluate_verification_status(approved(DocumentType.KTP), TenantCategory.STUDENT)

        assert verdict.can_book is False
        assert verdict.status_type is VerificationStatusType.WARNING
        assert [(d.id, d.status) for d in verdict.missing_documents] == [
            (DocumentType.AGREEMENT_LETTER, DocumentStatus.MISSING),
            (DocumentType.FAMILY_CARD, DocumentStatus.MISSING),
        ]
        assert verdict.message == (
            "Missing required documents: Surat Perjanjian (Agreement Letter), KK (Family Card). "
            "Please upload them to continue."
        )

    def test_non_student_needs_only_ktp(self):
        verdict = evaluate_verification_status(approved(DocumentType.KTP), TenantCategory.NON_STUDENT)

        assert verdict.can_book is True
        assert verdict.status_type is VerificationStatusType.SUCCESS
        assert verdict.required_count == 1
        assert verdict.missing_documents == []

    def test_student_with_everything_approved_can_book(self):
        verdict = evaluate_verification_status(approved(*TYPES), TenantCategory.STUDENT)

        assert verdict.can_book is True
        assert verdict.all_approved is True
        assert verdict.has_all_required_approved is True
        assert verdict.approved_count == 3

    def test_missing_takes_precedence_over_rejected_and_pending(self):
        documents = [
            Document(doc_type_id=DocumentType.KTP, status="rejected"),
            Document(doc_type_id=DocumentType.AGREEMENT_LETTER, status="pending"),
        ]
        verdict = evaluate_verification_status(documents, TenantCategory.STUDENT)

        assert verdict.status_type is VerificationStatusType.WARNING
        assert verdict.message.startswith("Missing required documents: KK (Family Card)")
        assert verdict.has_rejected and verdict.has_pending

    def test_rejected_document_is_an_error(self):
        documents = [Document(doc_type_id=DocumentType.KTP, status="rejected")]
        verdict = evaluate_verification_status(documents, TenantCategory.NON_STUDENT)

        assert verdict.status_type is VerificationStatusType.ERROR
        assert verdict.missing_documents[0].status is DocumentStatus.REJECTED
        assert "rejected" in verdict.message

    def test_pending_document_is_a_warning(self):
        documents = [Document(doc_type_id=DocumentType.KTP, status="pending")]
        verdict = evaluate_verification_status(documents, TenantCategory.NON_STUDENT)

        assert verdict.status_type is VerificationStatusType.WARNING
        assert verdict.missing_documents[0].status is DocumentStatus.PENDING

    def test_first_document_of_a_type_wins(self):
        documents = [
            Document(doc_type_id=DocumentType.KTP, status="rejected"),
            Document(doc_type_id=DocumentType.KTP, status="approved"),
        ]
        verdict = evaluate_verification_status(documents, TenantCategory.NON_STUDENT)

        assert verdict.can_book is False
        assert verdict.total_count == 2

    def test_unrelated_documents_do_not_satisfy_requirements(self):
        documents = [Document(doc_type_id=99, status="approved")]
        verdict = evaluate_verification_status(documents, TenantCategory.NON_STUDENT)

        assert verdict.can_book is False
        assert verdict.has_documents is True

    def test_missing_status_cannot_be_stored_on_a_document(self):
        with pytest.raises(ValueError):
            Document(doc_type_id=DocumentType.KTP, status="missing")

    def test_required_documents_per_category(self):
        assert [d.id for d in required_documents_for(TenantCategory.STUDENT)] == TYPES
        assert [d.id for d in required_documents_for(TenantCategory.NON_STUDENT)] == [DocumentType.KTP]


class TestTenantCategory:

    @pytest.mark.parametrize("name, expected", [
        ("mahasiswa", TenantCategory.STUDENT),
        ("  Mahasiswa ", TenantCategory.STUDENT),
        ("umum", TenantCategory.NON_STUDENT),
        (None, TenantCategory.NON_STUDENT),
    ])
    def test_from_tenant_type_name(self, name, expected):
        assert TenantCategory.from_tenant_type_name(name) is expected


class TestVerificationStatusService:

    async def test_check_evaluates_fetched_documents(self, backend, student):
        check = await VerificationStatusService(backend).check(student)

        assert check.fetch_failed is False
        assert check.verdict.can_book is True

    async def test_fetch_failure_is_not_reported_as_missing_documents(self, student):
        backend = FakeBackend(tenant=student)
        backend.fail.add("documents")

        check = await VerificationStatusService(backend).check(student)

        assert check.fetch_failed is True
        assert check.verdict == unavailable_verdict()
        assert check.verdict.can_book is False
        assert check.verdict.status_type is VerificationStatusType.ERROR
        assert check.verdict.missing_documents == []
        assert check.verdict.message == "Unable to verify document status"
