"""ReportLab PDF Generation Service Implementation

Renders exported invoices into one PDF document using ReportLab.
"""

from io import BytesIO
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoices.dtos import InvoiceDTO

COLUMN_WIDTHS = [80 * mm, 25 * mm, 30 * mm, 35 * mm]


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    One page section per invoice: issuer header, invoice details, bill-to
    block, line items and the subtotal/tax/total summary.
    """

    def __init__(self):
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=22,
            spaceAfter=6,
            textColor=colors.HexColor("#2C3E50"),
        )
        self.status_style = ParagraphStyle(
            "StatusStyle",
            parent=styles["Heading2"],
            fontSize=13,
            textColor=colors.HexColor("#E74C3C"),
            spaceAfter=16,
        )
        self.header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )
        self.normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )
        self.bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )
        self.note_style = ParagraphStyle(
            "NoteStyle",
            parent=styles["Normal"],
            fontSize=9,
            textColor=colors.HexColor("#95A5A6"),
        )

    def generate_invoices_pdf(
        self,
        invoices: List[InvoiceDTO],
        issuer_name: str = "Bookkeeping Platform",
    ) -> bytes:
        """
        Generate a PDF with one section per invoice

        Args:
            invoices: Invoices to render
            issuer_name: Header used when an invoice has no company loaded

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title="Invoices",
        )

        elements = []
        if not invoices:
            elements.append(Paragraph(escape(issuer_name), self.title_style))
            elements.append(Paragraph("No invoices selected for export.", self.normal_style))

        for index, invoice in enumerate(invoices):
            if index:
                elements.append(PageBreak())
            elements.extend(self._invoice_elements(invoice, issuer_name))

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _invoice_elements(self, invoice: InvoiceDTO, issuer_name: str) -> list:
        elements = []
        currency = invoice.currency

        # Header - issuer and status
        if invoice.company is not None:
            elements.append(Paragraph(escape(invoice.company.trading_name), self.title_style))
            if invoice.company.address:
                elements.append(Paragraph(escape(invoice.company.address), self.header_style))
        else:
            elements.append(Paragraph(escape(issuer_name), self.title_style))
        elements.append(Spacer(1, 8 * mm))
        elements.append(Paragraph(f"INVOICE - {invoice.status.value}", self.status_style))

        details = [
            ["Invoice Number:", invoice.invoice_number],
            ["Currency:", currency],
            ["Issue Date:", invoice.issue_date.strftime("%Y-%m-%d")],
            ["Due Date:", invoice.due_date.strftime("%Y-%m-%d")],
        ]
        if invoice.sent_date:
            details.append(["Sent:", invoice.sent_date.strftime("%Y-%m-%d")])
        if invoice.paid_date:
            details.append(["Paid:", invoice.paid_date.strftime("%Y-%m-%d")])

        details_table = Table(details, colWidths=[40 * mm, 100 * mm])
        details_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(details_table)
        elements.append(Spacer(1, 8 * mm))

        # Bill to
        elements.append(Paragraph("Bill To:", self.bold_style))
        elements.append(Paragraph(escape(invoice.client_name), self.normal_style))
        elements.append(Paragraph(escape(invoice.client_email), self.normal_style))
        if invoice.client_address:
            elements.append(Paragraph(escape(invoice.client_address), self.normal_style))
        elements.append(Spacer(1, 8 * mm))

        # Line items
        line_data = [["Description", "Quantity", "Unit Price", "Total"]]
        if invoice.items:
            for item in invoice.items:
                line_data.append(
                    [
                        item.product_name or item.description,
                        f"{item.quantity:,.6f}".rstrip("0").rstrip("."),
                        f"{currency} {item.unit_price:,.2f}",
                        f"{currency} {item.total:,.2f}",
                    ]
                )
        else:
            line_data.append(
                [
                    "Invoice total",
                    "1",
                    f"{currency} {invoice.subtotal:,.2f}",
                    f"{currency} {invoice.subtotal:,.2f}",
                ]
            )

        line_table = Table(line_data, colWidths=COLUMN_WIDTHS)
        line_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#F8F9F9")],
                    ),
                ]
            )
        )
        elements.append(line_table)
        elements.append(Spacer(1, 5 * mm))

        # Summary
        summary_data = [
            ["", "", "Subtotal:", f"{currency} {invoice.subtotal:,.2f}"],
            ["", "", f"Tax ({invoice.tax_rate.normalize():f}%):", f"{currency} {invoice.tax_amount:,.2f}"],
            ["", "", "Total:", f"{currency} {invoice.total_amount:,.2f}"],
        ]
        summary_table = Table(summary_data, colWidths=COLUMN_WIDTHS)
        summary_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (2, -1), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                    ("LINEABOVE", (2, -1), (-1, -1), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(summary_table)

        if invoice.payment_methods:
            elements.append(Spacer(1, 8 * mm))
            elements.append(Paragraph("Payment Methods:", self.bold_style))
            for method in invoice.payment_methods:
                text = f"{method.name} ({method.currency})"
                if method.details:
                    text = f"{text}: {method.details}"
                elements.append(Paragraph(escape(text), self.normal_style))

        if invoice.notes:
            elements.append(Spacer(1, 8 * mm))
            elements.append(Paragraph(escape(invoice.notes).replace("\n", "<br/>"), self.note_style))

        return elements
