"""BulkMarkPaid Use Case

Records payment for a batch of invoices. Invoices that were never sent are
skipped rather than failing the batch.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import MarkPaidCommandDTO, BulkMarkPaidResultDTO

logger = logging.getLogger(__name__)

PAYABLE_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


class BulkMarkPaid:
    """
    Use Case: Mark several invoices as paid

    Business Rules:
    1. Only SENT or OVERDUE invoices are eligible
    2. Ineligible (or unknown) IDs are skipped and reported in `skipped`
    3. paid_date is the given date or now
    4. notes replace the invoice notes when provided
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: MarkPaidCommandDTO) -> Result[BulkMarkPaidResultDTO]:
        try:
            eligible = await self.invoice_repo.get_by_ids(
                command.ids, statuses=list(PAYABLE_STATUSES)
            )
            eligible_ids = [invoice.id for invoice in eligible]
            skipped = len(command.ids) - len(eligible_ids)

            values = {
                "status": InvoiceStatus.PAID,
                "paid_date": command.paid_date or datetime.utcnow(),
            }
            if command.notes:
                values["notes"] = command.notes

            updated = await self.invoice_repo.update_many(eligible_ids, values)
            await self.uow.commit()

            logger.info(
                f"Marked {updated} invoices as paid, skipped {skipped} "
                f"(amount={command.paid_amount}, by={command.updated_by or 'unknown'})"
            )

            return Return.ok(
                BulkMarkPaidResultDTO(
                    updated=updated,
                    skipped=skipped,
                    message=f"Successfully marked {updated} invoices as paid",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Bulk mark paid failed")
            return Return.err(
                Error(
                    code="BULK_MARK_PAID_FAILED",
                    message="Bulk operation failed",
                    reason=str(e),
                )
            )
