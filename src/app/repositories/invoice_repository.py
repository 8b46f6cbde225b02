"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime
from src.domain.invoice import Invoice, InvoiceSortField, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides single-record access plus the set-based reads and writes used
    by bulk operations.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_ids(
        self,
        invoice_ids: Sequence[str],
        statuses: Optional[Sequence[InvoiceStatus]] = None,
    ) -> List[Invoice]:
        """
        Retrieve all invoices whose ID is in the given set

        Args:
            invoice_ids: Invoice IDs to look up (unknown IDs are ignored)
            statuses: Optional filter, only invoices in one of these statuses

        Returns:
            List of matching invoices
        """
        pass

    @abstractmethod
    async def get_by_invoice_number(
        self, company_id: int, invoice_number: str
    ) -> Optional[Invoice]:
        """
        Retrieve invoice by its number within a company

        Args:
            company_id: Issuing company ID
            invoice_number: Invoice number

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_invoices(
        self,
        company_id: Optional[int] = None,
        client_id: Optional[str] = None,
        status: Optional[InvoiceStatus] = None,
        currency: Optional[str] = None,
        search: Optional[str] = None,
        include_deleted: bool = False,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        sort_field: InvoiceSortField = InvoiceSortField.CREATED_AT,
        sort_descending: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Invoice]:
        """
        List invoices matching the filters

        created_from is inclusive and created_to exclusive. Ties on the sort
        key are broken by invoice number.

        Returns:
            List of invoices for the requested page
        """
        pass

    @abstractmethod
    async def count_by_status(
        self,
        company_id: Optional[int] = None,
        client_id: Optional[str] = None,
        status: Optional[InvoiceStatus] = None,
        currency: Optional[str] = None,
        search: Optional[str] = None,
        include_deleted: bool = False,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Aggregate matching invoices per status

        Returns:
            One dict per status: {"status", "count", "total_amount"}
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def update_many(
        self,
        invoice_ids: Sequence[str],
        values: Dict[str, Any],
        exclude_statuses: Optional[Sequence[InvoiceStatus]] = None,
    ) -> int:
        """
        Apply the same field values to every invoice in the ID set

        Args:
            invoice_ids: Target invoice IDs
            values: Column values to set
            exclude_statuses: Invoices currently in these statuses are left untouched

        Returns:
            Number of updated rows
        """
        pass

    @abstractmethod
    async def delete_many(self, invoice_ids: Sequence[str]) -> int:
        """
        Permanently remove invoices together with their items and payment links

        Args:
            invoice_ids: Target invoice IDs

        Returns:
            Number of deleted invoices
        """
        pass

    @abstractmethod
    async def generate_invoice_number(self, company_id: int) -> str:
        """
        Generate the next invoice number for a company in the current year

        Format: INV-YYYY-NNNN (e.g., INV-2024-0001)

        Args:
            company_id: Issuing company ID

        Returns:
            Next unused invoice number
        """
        pass
