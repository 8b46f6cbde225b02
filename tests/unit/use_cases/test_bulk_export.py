"""Unit tests for BulkExport use case and the export renderers"""

import base64
import pytest
from decimal import Decimal
from unittest.mock import MagicMock

from src.adapter.services.csv_service import CsvInvoiceService
from src.adapter.services.pdf_service import ReportLabPdfService
from src.app.use_cases.invoices.bulk_export import BulkExport
from src.app.use_cases.invoices.dtos import ExportCommandDTO, ExportFormat
from src.app.use_cases.invoices.invoice_details import InvoiceDetailsLoader, to_invoice_dto
from src.domain.invoice_item import InvoiceItem


@pytest.fixture
def export_use_case(mock_invoice_repo, mock_item_repo, mock_payment_method_repo):
    details = InvoiceDetailsLoader(mock_item_repo, mock_payment_method_repo)
    return BulkExport(
        invoice_repo=mock_invoice_repo,
        details=details,
        csv_service=CsvInvoiceService(),
        pdf_service=ReportLabPdfService(),
        issuer_name="Test Books",
    )


@pytest.mark.asyncio
class TestBulkExport:
    """Test exporting invoices"""

    async def test_json_export_keeps_requested_order(
        self, export_use_case, stock_invoices, make_invoice
    ):
        first = make_invoice(invoice_number="INV-2024-0001")
        second = make_invoice(invoice_number="INV-2024-0002")
        stock_invoices(first, second)

        result = await export_use_case.execute(
            ExportCommandDTO(ids=[second.id, "missing", first.id])
        )

        assert result.is_ok()
        assert result.value.exported == 2
        assert result.value.format == ExportFormat.JSON
        assert [invoice.invoice_number for invoice in result.value.data] == [
            "INV-2024-0002",
            "INV-2024-0001",
        ]
        assert result.value.content is None
        assert result.value.content_type == "application/json"

    async def test_csv_export_has_one_row_per_item(
        self, export_use_case, stock_invoices, make_invoice, mock_item_repo
    ):
        invoice = make_invoice()
        stock_invoices(invoice)
        mock_item_repo.get_by_invoice_ids.return_value = {
            invoice.id: [
                InvoiceItem(
                    invoice_id=invoice.id,
                    product_name="Design",
                    description="Logo",
                    quantity=Decimal("1"),
                    unit_price=Decimal("60.00"),
                    currency="USD",
                    total=Decimal("60.00"),
                ),
                InvoiceItem(
                    invoice_id=invoice.id,
                    product_name="Hosting",
                    description="Annual, with SSL",
                    quantity=Decimal("1"),
                    unit_price=Decimal("40.00"),
                    currency="USD",
                    total=Decimal("40.00"),
                ),
            ]
        }

        result = await export_use_case.execute(
            ExportCommandDTO(ids=[invoice.id], format="CSV")
        )

        assert result.is_ok()
        assert result.value.content_type == "text/csv"
        assert result.value.filename.endswith(".csv")
        lines = result.value.content.strip().split("\n")
        assert lines[0].startswith("invoice_number,status,client_name")
        assert len(lines) == 3
        assert '"Annual, with SSL"' in lines[2]

    async def test_csv_export_without_items(self, export_use_case, stock_invoices, make_invoice, mock_item_repo):
        invoice = make_invoice()
        stock_invoices(invoice)

        result = await export_use_case.execute(
            ExportCommandDTO(ids=[invoice.id], format="csv", includeItems=False)
        )

        assert result.is_ok()
        assert result.value.data[0].items is None
        lines = result.value.content.strip().split("\n")
        assert len(lines) == 2
        assert "item_product_name" not in lines[0]
        mock_item_repo.get_by_invoice_ids.assert_not_awaited()

    async def test_pdf_export_is_base64_document(self, export_use_case, stock_invoices, make_invoice):
        invoice = make_invoice(notes="Pay within 30 days")
        stock_invoices(invoice)

        result = await export_use_case.execute(
            ExportCommandDTO(ids=[invoice.id], format="pdf")
        )

        assert result.is_ok()
        assert result.value.content_type == "application/pdf"
        assert base64.b64decode(result.value.content).startswith(b"%PDF")

    async def test_renderer_failure(self, mock_invoice_repo, mock_item_repo, mock_payment_method_repo, stock_invoices, make_invoice):
        invoice = make_invoice()
        stock_invoices(invoice)
        pdf_service = MagicMock()
        pdf_service.generate_invoices_pdf.side_effect = Exception("render error")
        use_case = BulkExport(
            mock_invoice_repo,
            InvoiceDetailsLoader(mock_item_repo, mock_payment_method_repo),
            CsvInvoiceService(),
            pdf_service,
        )

        result = await use_case.execute(ExportCommandDTO(ids=[invoice.id], format="pdf"))

        assert result.is_err()
        assert result.error.code == "BULK_EXPORT_FAILED"


class TestExportRenderers:
    """Test CSV and PDF renderers directly"""

    def test_csv_invoice_without_items_still_gets_a_row(self, make_invoice):
        dto = to_invoice_dto(make_invoice(), items=[])

        content = CsvInvoiceService().generate_invoices_csv([dto], include_items=True)

        rows = content.strip().split("\n")
        assert len(rows) == 2
        assert rows[1].startswith("INV-2024-0001,DRAFT,Acme Ltd")

    def test_pdf_with_no_invoices(self):
        assert ReportLabPdfService().generate_invoices_pdf([]).startswith(b"%PDF")
