"""Assembles full invoice DTOs from the invoice row and its related records."""

from typing import Dict, List, Optional, Sequence

from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.company_repository import CompanyRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.payment_method_repository import PaymentMethodRepository
from src.domain.client import Client
from src.domain.company import Company
from src.domain.invoice import Invoice
from src.domain.invoice_item import InvoiceItem
from src.domain.payment_method import PaymentMethod
from .dtos import (
    ClientSummaryDTO,
    CompanySummaryDTO,
    InvoiceDTO,
    InvoiceItemDTO,
    PaymentMethodDTO,
)


def to_invoice_dto(
    invoice: Invoice,
    items: Optional[List[InvoiceItem]] = None,
    payment_methods: Optional[List[PaymentMethod]] = None,
    company: Optional[Company] = None,
    client: Optional[Client] = None,
) -> InvoiceDTO:
    """Map an Invoice entity and its relations to an InvoiceDTO"""
    return InvoiceDTO(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        from_company_id=invoice.from_company_id,
        client_id=invoice.client_id,
        client_name=invoice.client_name,
        client_email=invoice.client_email,
        client_address=invoice.client_address,
        subtotal=invoice.subtotal,
        currency=invoice.currency,
        status=invoice.status,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        paid_date=invoice.paid_date,
        sent_date=invoice.sent_date,
        tax_rate=invoice.tax_rate,
        tax_amount=invoice.tax_amount,
        total_amount=invoice.total_amount,
        template=invoice.template,
        notes=invoice.notes,
        deleted_at=invoice.deleted_at,
        deleted_by=invoice.deleted_by,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
        items=None if items is None else [
            InvoiceItemDTO(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                currency=item.currency,
                total=item.total,
            )
            for item in items
        ],
        payment_methods=[
            PaymentMethodDTO(
                id=method.id,
                type=method.type,
                name=method.name,
                currency=method.currency,
                details=method.details,
            )
            for method in (payment_methods or [])
        ],
        company=None if company is None else CompanySummaryDTO(
            id=company.id,
            legal_name=company.legal_name,
            trading_name=company.trading_name,
            address=company.address,
            email=company.email,
        ),
        client=None if client is None else ClientSummaryDTO(
            id=client.id,
            name=client.name,
            email=client.email,
            address=client.address,
        ),
    )


class InvoiceDetailsLoader:
    """
    Loads the related records of a batch of invoices in a few set queries
    and maps everything to InvoiceDTOs.
    """

    def __init__(
        self,
        invoice_item_repo: InvoiceItemRepository,
        payment_method_repo: PaymentMethodRepository,
        client_repo: Optional[ClientRepository] = None,
        company_repo: Optional[CompanyRepository] = None,
    ):
        self.invoice_item_repo = invoice_item_repo
        self.payment_method_repo = payment_method_repo
        self.client_repo = client_repo
        self.company_repo = company_repo

    async def load(
        self,
        invoices: Sequence[Invoice],
        include_items: bool = True,
        include_parties: bool = True,
    ) -> List[InvoiceDTO]:
        """
        Build DTOs for the given invoices, preserving their order

        Args:
            invoices: Invoice entities
            include_items: Attach line items
            include_parties: Attach company and client summaries

        Returns:
            List of InvoiceDTO
        """
        if not invoices:
            return []

        invoice_ids = [invoice.id for invoice in invoices]

        items: Dict[str, List[InvoiceItem]] = {}
        if include_items:
            items = await self.invoice_item_repo.get_by_invoice_ids(invoice_ids)

        payment_methods = await self.payment_method_repo.get_by_invoice_ids(invoice_ids)

        companies: Dict[int, Company] = {}
        clients: Dict[str, Client] = {}
        if include_parties and self.company_repo is not None:
            companies = await self.company_repo.get_by_ids(
                [invoice.from_company_id for invoice in invoices]
            )
        if include_parties and self.client_repo is not None:
            clients = await self.client_repo.get_by_ids(
                [invoice.client_id for invoice in invoices if invoice.client_id]
            )

        return [
            to_invoice_dto(
                invoice,
                items=items.get(invoice.id, []) if include_items else None,
                payment_methods=payment_methods.get(invoice.id, []),
                company=companies.get(invoice.from_company_id),
                client=clients.get(invoice.client_id) if invoice.client_id else None,
            )
            for invoice in invoices
        ]
