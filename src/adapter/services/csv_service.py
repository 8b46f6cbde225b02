"""CSV Export Service Implementation

Renders invoices with the standard library csv writer.
"""

import csv
import io
from typing import List

from src.app.services.csv_service import CsvService
from src.app.use_cases.invoices.dtos import InvoiceDTO

INVOICE_COLUMNS = [
    "invoice_number",
    "status",
    "client_name",
    "client_email",
    "currency",
    "issue_date",
    "due_date",
    "paid_date",
    "subtotal",
    "tax_rate",
    "tax_amount",
    "total_amount",
]

ITEM_COLUMNS = [
    "item_product_name",
    "item_description",
    "item_quantity",
    "item_unit_price",
    "item_total",
]


def _format(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return str(value)


class CsvInvoiceService(CsvService):
    """
    csv module implementation of CsvService

    One row per invoice, or one row per line item (invoice columns repeated)
    when items are included. Invoices without items still get a single row.
    """

    def __init__(self, delimiter: str = ","):
        self.delimiter = delimiter

    def generate_invoices_csv(self, invoices: List[InvoiceDTO], include_items: bool = True) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")

        header = INVOICE_COLUMNS + (ITEM_COLUMNS if include_items else [])
        writer.writerow(header)

        for invoice in invoices:
            invoice_row = [_format(getattr(invoice, column)) for column in INVOICE_COLUMNS]
            if not include_items:
                writer.writerow(invoice_row)
                continue

            if not invoice.items:
                writer.writerow(invoice_row + [""] * len(ITEM_COLUMNS))
                continue

            for item in invoice.items:
                writer.writerow(
                    invoice_row
                    + [
                        item.product_name,
                        item.description,
                        _format(item.quantity),
                        _format(item.unit_price),
                        _format(item.total),
                    ]
                )

        return buffer.getvalue()
