"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime
from decimal import Decimal
from sqlalchemy import delete, or_, update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.company import Company
from src.domain.invoice import (
    Invoice,
    InvoiceSortField,
    InvoiceStatus,
    invoice_number_prefix,
    next_invoice_number,
)
from src.domain.invoice_item import InvoiceItem
from src.domain.payment_method import PaymentMethodInvoice

LIKE_ESCAPE = "\\"

SORT_COLUMNS = {
    InvoiceSortField.CREATED_AT: Invoice.created_at,
    InvoiceSortField.INVOICE_NUMBER: Invoice.invoice_number,
    InvoiceSortField.CLIENT: Invoice.client_name,
    InvoiceSortField.AMOUNT: Invoice.total_amount,
    InvoiceSortField.DUE_DATE: Invoice.due_date,
    InvoiceSortField.SENT_DATE: Invoice.sent_date,
    InvoiceSortField.PAID_DATE: Invoice.paid_date,
    InvoiceSortField.CURRENCY: Invoice.currency,
}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally"""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations. Writes are flushed but never
    committed here; the unit of work owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        number_prefix: str = "INV",
        number_padding: int = 4,
    ):
        self.session = session
        self.number_prefix = number_prefix
        self.number_padding = number_padding

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

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
            List of matching invoices, ordered by invoice number
        """
        if not invoice_ids:
            return []

        statement = select(Invoice).where(Invoice.id.in_(list(invoice_ids)))
        if statuses:
            statement = statement.where(Invoice.status.in_(list(statuses)))
        statement = statement.order_by(Invoice.invoice_number)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_invoice_number(
        self, company_id: int, invoice_number: str
    ) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.from_company_id == company_id)
            .where(Invoice.invoice_number == invoice_number)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    def _apply_filters(
        self,
        statement,
        company_id: Optional[int],
        client_id: Optional[str],
        status: Optional[InvoiceStatus],
        currency: Optional[str],
        search: Optional[str],
        include_deleted: bool,
        created_from: Optional[datetime],
        created_to: Optional[datetime],
    ):
        if company_id is not None:
            statement = statement.where(Invoice.from_company_id == company_id)
        if client_id:
            statement = statement.where(Invoice.client_id == client_id)
        if status:
            statement = statement.where(Invoice.status == status)
        if currency:
            statement = statement.where(Invoice.currency == currency)
        if search:
            pattern = f"%{escape_like(search.lower())}%"
            statement = statement.where(
                or_(
                    func.lower(Invoice.invoice_number).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Invoice.client_name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Invoice.client_email).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Invoice.notes).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        if created_from is not None:
            statement = statement.where(Invoice.created_at >= created_from)
        if created_to is not None:
            statement = statement.where(Invoice.created_at < created_to)
        if not include_deleted:
            statement = statement.where(Invoice.deleted_at.is_(None))
        return statement

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

        Returns:
            List of invoices for the requested page
        """
        statement = self._apply_filters(
            select(Invoice),
            company_id,
            client_id,
            status,
            currency,
            search,
            include_deleted,
            created_from,
            created_to,
        )

        if sort_field == InvoiceSortField.COMPANY:
            statement = statement.outerjoin(Company, Company.id == Invoice.from_company_id)
            sort_column = Company.trading_name
        else:
            sort_column = SORT_COLUMNS.get(sort_field, Invoice.created_at)

        if sort_descending:
            statement = statement.order_by(sort_column.desc(), Invoice.invoice_number.desc())
        else:
            statement = statement.order_by(sort_column.asc(), Invoice.invoice_number.asc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

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
        statement = select(
            Invoice.status,
            func.count(Invoice.id),
            func.coalesce(func.sum(Invoice.total_amount), 0),
        )
        statement = self._apply_filters(
            statement,
            company_id,
            client_id,
            status,
            currency,
            search,
            include_deleted,
            created_from,
            created_to,
        )
        statement = statement.group_by(Invoice.status)

        result = await self.session.execute(statement)
        return [
            {
                "status": row[0],
                "count": int(row[1]),
                "total_amount": Decimal(str(row[2])),
            }
            for row in result.all()
        ]

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

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
            values: Column values to set (updated_at is always refreshed)
            exclude_statuses: Invoices currently in these statuses are left untouched

        Returns:
            Number of updated rows
        """
        if not invoice_ids:
            return 0

        values = {"updated_at": datetime.utcnow(), **values}
        statement = update(Invoice).where(Invoice.id.in_(list(invoice_ids)))
        if exclude_statuses:
            statement = statement.where(Invoice.status.not_in(list(exclude_statuses)))
        statement = statement.values(**values).execution_options(
            synchronize_session="fetch"
        )

        result = await self.session.execute(statement)
        return result.rowcount

    async def delete_many(self, invoice_ids: Sequence[str]) -> int:
        """
        Permanently remove invoices together with their items and payment links

        Child rows are removed explicitly so the behaviour does not depend on
        the database enforcing ON DELETE CASCADE.

        Args:
            invoice_ids: Target invoice IDs

        Returns:
            Number of deleted invoices
        """
        if not invoice_ids:
            return 0

        ids = list(invoice_ids)
        await self.session.execute(
            delete(InvoiceItem)
            .where(InvoiceItem.invoice_id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(
            delete(PaymentMethodInvoice)
            .where(PaymentMethodInvoice.invoice_id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(
            delete(Invoice)
            .where(Invoice.id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def generate_invoice_number(self, company_id: int) -> str:
        """
        Generate the next invoice number for a company in the current year

        Format: INV-YYYY-NNNN (e.g., INV-2024-0001)

        All numbers sharing the company/year prefix are loaded and compared
        numerically rather than relying on string ordering.

        Args:
            company_id: Issuing company ID

        Returns:
            Next unused invoice number
        """
        year = datetime.utcnow().year
        prefix = invoice_number_prefix(year, self.number_prefix)

        statement = (
            select(Invoice.invoice_number)
            .where(Invoice.from_company_id == company_id)
            .where(Invoice.invoice_number.like(f"{escape_like(prefix)}%", escape=LIKE_ESCAPE))
        )
        result = await self.session.execute(statement)
        existing_numbers = list(result.scalars().all())

        return next_invoice_number(
            existing_numbers,
            year,
            prefix=self.number_prefix,
            padding=self.number_padding,
        )
