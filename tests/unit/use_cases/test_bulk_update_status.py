"""Unit tests for BulkUpdateStatus use case

Tests cover:
- All-or-nothing transition check
- paid_date stamping on PAID
- Unknown IDs are not counted
- Rollback on unexpected errors
"""

import pytest
from unittest.mock import AsyncMock

from src.app.use_cases.invoices.bulk_update_status import BulkUpdateStatus
from src.app.use_cases.invoices.dtos import UpdateStatusCommandDTO
from src.domain.invoice import InvoiceStatus


@pytest.fixture
def update_status_use_case(mock_uow, mock_invoice_repo):
    return BulkUpdateStatus(uow=mock_uow, invoice_repo=mock_invoice_repo)


@pytest.mark.asyncio
class TestBulkUpdateStatus:
    """Test bulk status updates"""

    async def test_valid_transitions_update_every_invoice(
        self, update_status_use_case, stock_invoices, make_invoice, mock_invoice_repo, mock_uow
    ):
        """
        Given: Two draft invoices
        When: Status SENT is requested
        Then: Both are updated in one statement and committed
        """
        # Arrange
        first = make_invoice(status=InvoiceStatus.DRAFT)
        second = make_invoice(invoice_number="INV-2024-0002", status=InvoiceStatus.DRAFT)
        stock_invoices(first, second)
        mock_invoice_repo.update_many.return_value = 2
        command = UpdateStatusCommandDTO(ids=[first.id, second.id], status="SENT")

        # Act
        result = await update_status_use_case.execute(command)

        # Assert
        assert result.is_ok()
        assert result.value.updated == 2
        assert result.value.success is True
        ids, values = mock_invoice_repo.update_many.call_args.args
        assert set(ids) == {first.id, second.id}
        assert values == {"status": InvoiceStatus.SENT}
        mock_uow.commit.assert_awaited_once()

    async def test_mixed_batch_is_rejected_without_changes(
        self, update_status_use_case, stock_invoices, make_invoice, mock_invoice_repo, mock_uow
    ):
        """
        Given: A draft and a paid invoice
        When: Status SENT is requested
        Then: INVALID_TRANSITION naming the paid invoice, nothing updated
        """
        # Arrange
        draft = make_invoice(status=InvoiceStatus.DRAFT)
        paid = make_invoice(invoice_number="INV-2024-0002", status=InvoiceStatus.PAID)
        stock_invoices(draft, paid)
        command = UpdateStatusCommandDTO(ids=[draft.id, paid.id], status=InvoiceStatus.SENT)

        # Act
        result = await update_status_use_case.execute(command)

        # Assert
        assert result.is_err()
        assert result.error.code == "INVALID_TRANSITION"
        assert paid.id in result.error.message
        assert draft.id not in result.error.message
        mock_invoice_repo.update_many.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_archived_invoice_blocks_batch(
        self, update_status_use_case, stock_invoices, make_invoice, mock_invoice_repo
    ):
        archived = make_invoice(status=InvoiceStatus.ARCHIVED)
        stock_invoices(archived)

        result = await update_status_use_case.execute(
            UpdateStatusCommandDTO(ids=[archived.id], status="ARCHIVED")
        )

        assert result.is_err()
        assert result.error.code == "INVALID_TRANSITION"
        mock_invoice_repo.update_many.assert_not_awaited()

    async def test_paid_status_stamps_paid_date(
        self, update_status_use_case, stock_invoices, make_invoice, mock_invoice_repo
    ):
        sent = make_invoice(status=InvoiceStatus.SENT)
        stock_invoices(sent)
        mock_invoice_repo.update_many.return_value = 1

        result = await update_status_use_case.execute(
            UpdateStatusCommandDTO(ids=[sent.id], status="paid")
        )

        assert result.is_ok()
        _, values = mock_invoice_repo.update_many.call_args.args
        assert values["status"] == InvoiceStatus.PAID
        assert values["paid_date"] is not None

    async def test_unknown_ids_are_not_counted(
        self, update_status_use_case, stock_invoices, make_invoice, mock_invoice_repo
    ):
        draft = make_invoice(status=InvoiceStatus.DRAFT)
        stock_invoices(draft)
        mock_invoice_repo.update_many.return_value = 1

        result = await update_status_use_case.execute(
            UpdateStatusCommandDTO(ids=[draft.id, "missing"], status="SENT")
        )

        assert result.is_ok()
        assert result.value.updated == 1
        ids, _ = mock_invoice_repo.update_many.call_args.args
        assert ids == [draft.id]

    async def test_repository_failure_rolls_back(
        self, update_status_use_case, mock_invoice_repo, mock_uow
    ):
        mock_invoice_repo.get_by_ids = AsyncMock(side_effect=Exception("Database error"))

        result = await update_status_use_case.execute(
            UpdateStatusCommandDTO(ids=["inv_1"], status="SENT")
        )

        assert result.is_err()
        assert result.error.code == "BULK_UPDATE_STATUS_FAILED"
        assert result.error.message == "Bulk operation failed"
        mock_uow.rollback.assert_awaited_once()
