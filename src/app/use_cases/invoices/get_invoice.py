"""GetInvoice Use Case

Read-only retrieval of one invoice with its related records.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import InvoiceDTO
from .invoice_details import InvoiceDetailsLoader

logger = logging.getLogger(__name__)


class GetInvoice:
    """
    Use Case: Get invoice details

    Returns the invoice with items, payment methods, company and client.
    """

    def __init__(self, invoice_repo: InvoiceRepository, details: InvoiceDetailsLoader):
        self.invoice_repo = invoice_repo
        self.details = details

    async def execute(self, invoice_id: str) -> Result[InvoiceDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if invoice is None:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice with ID {invoice_id} not found",
                        reason="Invoice does not exist",
                    )
                )

            loaded = await self.details.load([invoice])
            return Return.ok(loaded[0])

        except Exception as e:
            logger.exception(f"Failed to retrieve invoice {invoice_id}")
            return Return.err(
                Error(
                    code="GET_INVOICE_FAILED",
                    message="Failed to retrieve invoice",
                    reason=str(e),
                )
            )
