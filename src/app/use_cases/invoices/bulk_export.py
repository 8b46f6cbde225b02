"""BulkExport Use Case

Exports a batch of invoices with their company, client, payment methods and
(optionally) line items, serialized as JSON records, CSV or PDF.
"""

import base64
import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.csv_service import CsvService
from src.app.services.pdf_service import PdfService
from .dtos import BulkExportResultDTO, ExportCommandDTO, ExportFormat
from .invoice_details import InvoiceDetailsLoader

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
    ExportFormat.PDF: "application/pdf",
}


class BulkExport:
    """
    Use Case: Export several invoices

    Business Rules:
    1. Unknown invoice IDs are ignored
    2. `data` always carries the invoice records
    3. csv: `content` holds the CSV text
    4. pdf: `content` holds the base64-encoded PDF document
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        details: InvoiceDetailsLoader,
        csv_service: CsvService,
        pdf_service: PdfService,
        issuer_name: str = "Bookkeeping Platform",
    ):
        self.invoice_repo = invoice_repo
        self.details = details
        self.csv_service = csv_service
        self.pdf_service = pdf_service
        self.issuer_name = issuer_name

    async def execute(self, command: ExportCommandDTO) -> Result[BulkExportResultDTO]:
        try:
            found = await self.invoice_repo.get_by_ids(command.ids)
            by_id = {invoice.id: invoice for invoice in found}
            invoices = [by_id[invoice_id] for invoice_id in command.ids if invoice_id in by_id]

            records = await self.details.load(invoices, include_items=command.include_items)

            content = None
            filename = None
            timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
            if command.format == ExportFormat.CSV:
                content = self.csv_service.generate_invoices_csv(
                    records, include_items=command.include_items
                )
                filename = f"invoices_{timestamp}.csv"
            elif command.format == ExportFormat.PDF:
                pdf_bytes = self.pdf_service.generate_invoices_pdf(
                    records, issuer_name=self.issuer_name
                )
                content = base64.b64encode(pdf_bytes).decode("utf-8")
                filename = f"invoices_{timestamp}.pdf"

            logger.info(f"Exported {len(records)} invoices as {command.format.value}")

            return Return.ok(
                BulkExportResultDTO(
                    exported=len(records),
                    format=command.format,
                    data=records,
                    content=content,
                    content_type=CONTENT_TYPES[command.format],
                    filename=filename,
                    message=f"Successfully exported {len(records)} invoices "
                            f"as {command.format.value.upper()}",
                )
            )

        except Exception as e:
            logger.exception("Bulk export failed")
            return Return.err(
                Error(
                    code="BULK_EXPORT_FAILED",
                    message="Bulk operation failed",
                    reason=str(e),
                )
            )
