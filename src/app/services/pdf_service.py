"""PDF Generation Service Interface

Defines the contract for PDF generation operations.
"""

from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from src.app.use_cases.invoices.dtos import InvoiceDTO


class PdfService(ABC):
    """
    Service interface for PDF generation

    Renders exported invoices into a single PDF document.
    """

    @abstractmethod
    def generate_invoices_pdf(
        self,
        invoices: List["InvoiceDTO"],
        issuer_name: str = "Bookkeeping Platform",
    ) -> bytes:
        """
        Generate a PDF containing one section per invoice

        Args:
            invoices: Invoices to render (with items when available)
            issuer_name: Fallback issuer name when an invoice has no company

        Returns:
            PDF document as bytes
        """
        pass
