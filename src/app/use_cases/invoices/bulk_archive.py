"""BulkArchive Use Case

Archives a batch of invoices regardless of their current status.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import ArchiveCommandDTO, BulkArchiveResultDTO

logger = logging.getLogger(__name__)


class BulkArchive:
    """
    Use Case: Archive several invoices

    Business Rules:
    1. No transition table check, any non-archived invoice can be archived
    2. Invoices already ARCHIVED are left untouched and not counted
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: ArchiveCommandDTO) -> Result[BulkArchiveResultDTO]:
        try:
            archived = await self.invoice_repo.update_many(
                command.ids,
                {"status": InvoiceStatus.ARCHIVED},
                exclude_statuses=[InvoiceStatus.ARCHIVED],
            )
            await self.uow.commit()

            logger.info(f"Archived {archived} invoices (by={command.updated_by or 'unknown'})")

            return Return.ok(
                BulkArchiveResultDTO(
                    archived=archived,
                    message=f"Successfully archived {archived} invoices",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Bulk archive failed")
            return Return.err(
                Error(
                    code="BULK_ARCHIVE_FAILED",
                    message="Bulk operation failed",
                    reason=str(e),
                )
            )
