"""Invoice Item Repository Interface

Defines the contract for invoice item persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence
from src.domain.invoice_item import InvoiceItem


class InvoiceItemRepository(ABC):
    """
    Repository interface for InvoiceItem persistence

    Provides access to invoice line items.
    """

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: str) -> List[InvoiceItem]:
        """
        Retrieve all line items for an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceItem rows
        """
        pass

    @abstractmethod
    async def get_by_invoice_ids(
        self, invoice_ids: Sequence[str]
    ) -> Dict[str, List[InvoiceItem]]:
        """
        Retrieve line items for several invoices at once

        Args:
            invoice_ids: Invoice IDs

        Returns:
            Mapping invoice_id -> items (invoices without items are absent)
        """
        pass

    @abstractmethod
    async def create_many(self, items: List[InvoiceItem]) -> List[InvoiceItem]:
        """
        Persist new line items

        Args:
            items: InvoiceItem entities to persist

        Returns:
            Created items
        """
        pass
