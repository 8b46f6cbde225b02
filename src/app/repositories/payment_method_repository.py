"""Payment Method Repository Interface

Defines the contract for reading payment methods and managing their
association with invoices.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence
from src.domain.payment_method import PaymentMethod, PaymentMethodInvoice


class PaymentMethodRepository(ABC):
    """Repository interface for PaymentMethod and PaymentMethodInvoice"""

    @abstractmethod
    async def get_links_by_invoice_id(self, invoice_id: str) -> List[PaymentMethodInvoice]:
        """Retrieve payment method links of one invoice"""
        pass

    @abstractmethod
    async def get_by_invoice_ids(
        self, invoice_ids: Sequence[str]
    ) -> Dict[str, List[PaymentMethod]]:
        """
        Resolve payment methods linked to several invoices

        Returns:
            Mapping invoice_id -> linked payment methods
        """
        pass

    @abstractmethod
    async def create_links(
        self, links: List[PaymentMethodInvoice]
    ) -> List[PaymentMethodInvoice]:
        """Persist new invoice/payment method links"""
        pass
