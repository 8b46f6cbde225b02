"""SQLAlchemy Payment Method Repository Implementation"""

from collections import defaultdict
from typing import Dict, List, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_method_repository import PaymentMethodRepository
from src.domain.payment_method import PaymentMethod, PaymentMethodInvoice


class SqlAlchemyPaymentMethodRepository(PaymentMethodRepository):
    """SQLAlchemy implementation of PaymentMethodRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_links_by_invoice_id(self, invoice_id: str) -> List[PaymentMethodInvoice]:
        statement = (
            select(PaymentMethodInvoice)
            .where(PaymentMethodInvoice.invoice_id == invoice_id)
            .order_by(PaymentMethodInvoice.created_at, PaymentMethodInvoice.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_invoice_ids(
        self, invoice_ids: Sequence[str]
    ) -> Dict[str, List[PaymentMethod]]:
        """
        Resolve payment methods linked to several invoices

        Links pointing at a payment method that no longer exists are skipped.
        """
        if not invoice_ids:
            return {}

        statement = (
            select(PaymentMethodInvoice.invoice_id, PaymentMethod)
            .join(PaymentMethod, PaymentMethod.id == PaymentMethodInvoice.payment_method_id)
            .where(PaymentMethodInvoice.invoice_id.in_(list(invoice_ids)))
            .order_by(PaymentMethodInvoice.created_at, PaymentMethodInvoice.id)
        )
        result = await self.session.execute(statement)

        methods_by_invoice: Dict[str, List[PaymentMethod]] = defaultdict(list)
        for invoice_id, payment_method in result.all():
            methods_by_invoice[invoice_id].append(payment_method)
        return dict(methods_by_invoice)

    async def create_links(
        self, links: List[PaymentMethodInvoice]
    ) -> List[PaymentMethodInvoice]:
        if not links:
            return []

        self.session.add_all(links)
        await self.session.flush()
        return links
