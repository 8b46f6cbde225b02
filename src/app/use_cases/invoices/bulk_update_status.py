"""BulkUpdateStatus Use Case

Moves a batch of invoices to a new status, honouring the status transition
table. The batch is all-or-nothing.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus, is_valid_transition
from .dtos import UpdateStatusCommandDTO, BulkUpdateStatusResultDTO

logger = logging.getLogger(__name__)


class BulkUpdateStatus:
    """
    Use Case: Update the status of several invoices at once

    Business Rules:
    1. Every targeted invoice must be allowed to move to the requested
       status by the transition table, otherwise nothing is changed
    2. paid_date is stamped when the requested status is PAID
    3. Unknown invoice IDs are ignored and simply not counted

    Flow:
    1. Load targeted invoices
    2. Collect invoices whose transition is not permitted
    3. Reject the whole batch if any were found
    4. Update all invoices in one statement and commit
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: UpdateStatusCommandDTO) -> Result[BulkUpdateStatusResultDTO]:
        try:
            invoices = await self.invoice_repo.get_by_ids(command.ids)

            invalid_ids = [
                invoice.id
                for invoice in invoices
                if not is_valid_transition(invoice.status, command.status)
            ]
            if invalid_ids:
                return Return.err(
                    Error(
                        code="INVALID_TRANSITION",
                        message=f"Invalid status transition for invoices: {', '.join(invalid_ids)}",
                        reason=f"Transition to {command.status.value} is not permitted",
                    )
                )

            values = {"status": command.status}
            if command.status == InvoiceStatus.PAID:
                values["paid_date"] = datetime.utcnow()

            updated = await self.invoice_repo.update_many(
                [invoice.id for invoice in invoices], values
            )
            await self.uow.commit()

            logger.info(
                f"Updated {updated} invoices to {command.status.value} "
                f"(by={command.updated_by or 'unknown'}, notes={command.notes!r})"
            )

            return Return.ok(
                BulkUpdateStatusResultDTO(
                    updated=updated,
                    message=f"Successfully updated {updated} invoices to {command.status.value}",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Bulk status update failed")
            return Return.err(
                Error(
                    code="BULK_UPDATE_STATUS_FAILED",
                    message="Bulk operation failed",
                    reason=str(e),
                )
            )
