"""SQLAlchemy Invoice Item Repository Implementation

Implements invoice item persistence using SQLAlchemy async session.
"""

from collections import defaultdict
from typing import Dict, List, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.domain.invoice_item import InvoiceItem


class SqlAlchemyInvoiceItemRepository(InvoiceItemRepository):
    """
    SQLAlchemy implementation of InvoiceItemRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_invoice_id(self, invoice_id: str) -> List[InvoiceItem]:
        """
        Retrieve all line items for an invoice

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceItem rows in creation order
        """
        statement = (
            select(InvoiceItem)
            .where(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.created_at, InvoiceItem.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_invoice_ids(
        self, invoice_ids: Sequence[str]
    ) -> Dict[str, List[InvoiceItem]]:
        if not invoice_ids:
            return {}

        statement = (
            select(InvoiceItem)
            .where(InvoiceItem.invoice_id.in_(list(invoice_ids)))
            .order_by(InvoiceItem.created_at, InvoiceItem.id)
        )
        result = await self.session.execute(statement)

        items_by_invoice: Dict[str, List[InvoiceItem]] = defaultdict(list)
        for item in result.scalars().all():
            items_by_invoice[item.invoice_id].append(item)
        return dict(items_by_invoice)

    async def create_many(self, items: List[InvoiceItem]) -> List[InvoiceItem]:
        """
        Persist new line items

        Args:
            items: InvoiceItem entities to persist

        Returns:
            Created items
        """
        if not items:
            return []

        self.session.add_all(items)
        await self.session.flush()
        for item in items:
            await self.session.refresh(item)
        return items
