"""BulkDelete Use Case

Soft or hard deletes a batch of invoices. Paid invoices are protected
unless a hard delete is explicitly requested.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import DeleteCommandDTO, BulkDeleteResultDTO

logger = logging.getLogger(__name__)


def deletion_stamp(deleted_by: str, deleted_at: datetime) -> str:
    return f"Deleted by {deleted_by} on {deleted_at.isoformat(timespec='milliseconds')}Z"


def append_note(notes: Optional[str], line: str) -> str:
    if notes:
        return f"{notes}\n{line}"
    return line


class BulkDelete:
    """
    Use Case: Delete several invoices

    Business Rules:
    1. If any targeted invoice is PAID and hard_delete is not set, the whole
       batch is rejected and nothing changes
    2. Hard delete permanently removes invoices, their items and payment links
    3. Soft delete archives the invoice, records deleted_at / deleted_by and
       appends a deletion stamp to the existing notes
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        default_deleted_by: str = "system",
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.default_deleted_by = default_deleted_by

    async def execute(self, command: DeleteCommandDTO) -> Result[BulkDeleteResultDTO]:
        try:
            paid_invoices = await self.invoice_repo.get_by_ids(
                command.ids, statuses=[InvoiceStatus.PAID]
            )

            if paid_invoices and not command.hard_delete:
                numbers = ", ".join(invoice.invoice_number for invoice in paid_invoices)
                return Return.err(
                    Error(
                        code="BUSINESS_RULE_VIOLATION",
                        message=f"Cannot delete paid invoices: {numbers}. "
                                f"Use hard delete if necessary.",
                        reason="Paid invoices are protected from soft deletion",
                    )
                )

            if command.hard_delete:
                deleted = await self.invoice_repo.delete_many(command.ids)
            else:
                deleted = await self._soft_delete(command)

            await self.uow.commit()

            mode = "deleted" if command.hard_delete else "soft deleted"
            logger.info(f"{mode.capitalize()} {deleted} invoices")

            return Return.ok(
                BulkDeleteResultDTO(
                    deleted=deleted,
                    hard_delete=command.hard_delete,
                    message=f"Successfully {mode} {deleted} invoices",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Bulk delete failed")
            return Return.err(
                Error(
                    code="BULK_DELETE_FAILED",
                    message="Bulk operation failed",
                    reason=str(e),
                )
            )

    async def _soft_delete(self, command: DeleteCommandDTO) -> int:
        deleted_by = command.deleted_by or self.default_deleted_by
        deleted_at = datetime.utcnow()
        stamp = deletion_stamp(deleted_by, deleted_at)

        invoices = await self.invoice_repo.get_by_ids(command.ids)
        for invoice in invoices:
            invoice.status = InvoiceStatus.ARCHIVED
            invoice.deleted_at = deleted_at
            invoice.deleted_by = deleted_by
            invoice.notes = append_note(invoice.notes, stamp)
            await self.invoice_repo.update(invoice)

        return len(invoices)
