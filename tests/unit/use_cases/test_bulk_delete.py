"""Unit tests for BulkDelete use case

Tests cover:
- Paid invoices block a soft delete
- Hard delete removes rows, paid included
- Soft delete archives and stamps notes without losing them
"""

import pytest
from datetime import datetime

from src.app.use_cases.invoices.bulk_delete import BulkDelete, append_note, deletion_stamp
from src.app.use_cases.invoices.dtos import DeleteCommandDTO
from src.domain.invoice import InvoiceStatus


@pytest.fixture
def delete_use_case(mock_uow, mock_invoice_repo):
    return BulkDelete(uow=mock_uow, invoice_repo=mock_invoice_repo, default_deleted_by="system")


class TestDeletionStamp:
    """Test deletion note helpers"""

    def test_stamp_format(self):
        stamp = deletion_stamp("jane", datetime(2024, 5, 1, 10, 30, 0, 123000))
        assert stamp == "Deleted by jane on 2024-05-01T10:30:00.123Z"

    def test_append_to_empty_notes(self):
        assert append_note(None, "stamp") == "stamp"

    def test_append_keeps_existing_notes(self):
        assert append_note("Net 30", "stamp") == "Net 30\nstamp"


@pytest.mark.asyncio
class TestBulkDelete:
    """Test bulk deletion"""

    async def test_paid_invoice_blocks_soft_delete(
        self, delete_use_case, stock_invoices, make_invoice, mock_invoice_repo, mock_uow
    ):
        """
        Given: A draft and a paid invoice
        When: Soft delete is requested
        Then: BUSINESS_RULE_VIOLATION naming the paid invoice number, nothing changes
        """
        # Arrange
        draft = make_invoice(status=InvoiceStatus.DRAFT)
        paid = make_invoice(invoice_number="INV-2024-0009", status=InvoiceStatus.PAID)
        stock_invoices(draft, paid)

        # Act
        result = await delete_use_case.execute(DeleteCommandDTO(ids=[draft.id, paid.id]))

        # Assert
        assert result.is_err()
        assert result.error.code == "BUSINESS_RULE_VIOLATION"
        assert result.error.message == (
            "Cannot delete paid invoices: INV-2024-0009. Use hard delete if necessary."
        )
        mock_invoice_repo.update.assert_not_awaited()
        mock_invoice_repo.delete_many.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_hard_delete_removes_paid_invoices(
        self, delete_use_case, stock_invoices, make_invoice, mock_invoice_repo, mock_uow
    ):
        paid = make_invoice(status=InvoiceStatus.PAID)
        stock_invoices(paid)
        mock_invoice_repo.delete_many.return_value = 1

        result = await delete_use_case.execute(
            DeleteCommandDTO(ids=[paid.id], hard_delete=True)
        )

        assert result.is_ok()
        assert result.value.deleted == 1
        assert result.value.hard_delete is True
        mock_invoice_repo.delete_many.assert_awaited_once_with([paid.id])
        mock_uow.commit.assert_awaited_once()

    async def test_soft_delete_archives_and_appends_stamp(
        self, delete_use_case, stock_invoices, make_invoice, mock_invoice_repo
    ):
        # Arrange
        invoice = make_invoice(status=InvoiceStatus.SENT, notes="Net 30")
        stock_invoices(invoice)

        # Act
        result = await delete_use_case.execute(
            DeleteCommandDTO(ids=[invoice.id], deletedBy="jane")
        )

        # Assert
        assert result.is_ok()
        assert result.value.deleted == 1
        assert result.value.hard_delete is False
        assert invoice.status == InvoiceStatus.ARCHIVED
        assert invoice.deleted_by == "jane"
        assert invoice.deleted_at is not None
        assert invoice.notes.startswith("Net 30\nDeleted by jane on ")
        mock_invoice_repo.update.assert_awaited_once_with(invoice)

    async def test_soft_delete_uses_default_author(
        self, delete_use_case, stock_invoices, make_invoice
    ):
        invoice = make_invoice(status=InvoiceStatus.DRAFT)
        stock_invoices(invoice)

        result = await delete_use_case.execute(DeleteCommandDTO(ids=[invoice.id]))

        assert result.is_ok()
        assert invoice.deleted_by == "system"
        assert invoice.notes.startswith("Deleted by system on ")
