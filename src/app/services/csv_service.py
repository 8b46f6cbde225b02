"""CSV Export Service Interface"""

from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from src.app.use_cases.invoices.dtos import InvoiceDTO


class CsvService(ABC):
    """Service interface for CSV rendering of invoices"""

    @abstractmethod
    def generate_invoices_csv(self, invoices: List["InvoiceDTO"], include_items: bool = True) -> str:
        """
        Render invoices as CSV text

        Args:
            invoices: Invoices to render
            include_items: One row per line item instead of one row per invoice

        Returns:
            CSV document (header row included)
        """
        pass
