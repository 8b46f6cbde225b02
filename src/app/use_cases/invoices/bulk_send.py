"""BulkSend Use Case

Sends a batch of draft invoices. Non-draft invoices are skipped.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import SendCommandDTO, BulkSendResultDTO

logger = logging.getLogger(__name__)


class BulkSend:
    """
    Use Case: Send several invoices

    Business Rules:
    1. Only DRAFT invoices are eligible
    2. Ineligible (or unknown) IDs are skipped and reported in `skipped`
    3. sent_date is the given date or now
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: SendCommandDTO) -> Result[BulkSendResultDTO]:
        try:
            drafts = await self.invoice_repo.get_by_ids(
                command.ids, statuses=[InvoiceStatus.DRAFT]
            )
            draft_ids = [invoice.id for invoice in drafts]
            skipped = len(command.ids) - len(draft_ids)

            sent = await self.invoice_repo.update_many(
                draft_ids,
                {
                    "status": InvoiceStatus.SENT,
                    "sent_date": command.send_date or datetime.utcnow(),
                },
            )
            await self.uow.commit()

            logger.info(f"Sent {sent} invoices, skipped {skipped}")

            return Return.ok(
                BulkSendResultDTO(
                    sent=sent,
                    skipped=skipped,
                    message=f"Successfully sent {sent} invoices",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Bulk send failed")
            return Return.err(
                Error(
                    code="BULK_SEND_FAILED",
                    message="Bulk operation failed",
                    reason=str(e),
                )
            )
