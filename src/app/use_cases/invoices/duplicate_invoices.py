"""DuplicateInvoices / DuplicateInvoice Use Cases

Clones invoices, their line items and payment method links into new draft
invoices. Source invoices are never modified.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.payment_method_repository import PaymentMethodRepository
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_item import InvoiceItem
from src.domain.payment_method import PaymentMethodInvoice
from .dtos import (
    BulkDuplicateResultDTO,
    DuplicateCommandDTO,
    DuplicateInvoiceResultDTO,
    DuplicateOptionsDTO,
)
from .invoice_details import InvoiceDetailsLoader

logger = logging.getLogger(__name__)


def duplication_stamp(original_number: str) -> str:
    return f"Duplicated from {original_number}"


class InvoiceDuplicator:
    """
    Creates one draft copy of an invoice (without committing)

    The copy gets:
    - the next sequential number, or "<original>-COPY[-n]" when renumbering
      is disabled
    - the original client fields, or those of the override client
    - status DRAFT, issue date (override or now), due date (override or
      issue date + default_due_days)
    - notes "Duplicated from <original>", after the original notes when
      copy_notes is set
    - fresh copies of every line item and payment method link
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        payment_method_repo: PaymentMethodRepository,
        default_due_days: int = 30,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo
        self.payment_method_repo = payment_method_repo
        self.default_due_days = default_due_days

    async def duplicate(
        self,
        original: Invoice,
        options: DuplicateOptionsDTO,
        new_client: Optional[Client] = None,
    ) -> Invoice:
        if options.adjust_invoice_number:
            invoice_number = await self.invoice_repo.generate_invoice_number(
                original.from_company_id
            )
        else:
            invoice_number = await self._copy_number(original)

        issue_date = options.new_issue_date or datetime.utcnow()
        due_date = options.new_due_date or issue_date + timedelta(days=self.default_due_days)

        stamp = duplication_stamp(original.invoice_number)
        if options.copy_notes and original.notes:
            notes = f"{original.notes}\n\n{stamp}"
        else:
            notes = stamp

        if new_client is not None:
            client_id = new_client.id
            client_name = new_client.name
            client_email = new_client.email
            client_address = new_client.address
        else:
            client_id = original.client_id
            client_name = original.client_name
            client_email = original.client_email
            client_address = original.client_address

        duplicated = await self.invoice_repo.create(
            Invoice(
                invoice_number=invoice_number,
                from_company_id=original.from_company_id,
                client_id=client_id,
                client_name=client_name,
                client_email=client_email,
                client_address=client_address,
                subtotal=original.subtotal,
                currency=original.currency,
                status=InvoiceStatus.DRAFT,
                issue_date=issue_date,
                due_date=due_date,
                tax_rate=original.tax_rate,
                tax_amount=original.tax_amount,
                total_amount=original.total_amount,
                template=original.template,
                notes=notes,
            )
        )

        items = await self.invoice_item_repo.get_by_invoice_id(original.id)
        await self.invoice_item_repo.create_many(
            [
                InvoiceItem(
                    invoice_id=duplicated.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    currency=item.currency,
                    total=item.total,
                )
                for item in items
            ]
        )

        links = await self.payment_method_repo.get_links_by_invoice_id(original.id)
        await self.payment_method_repo.create_links(
            [
                PaymentMethodInvoice(
                    invoice_id=duplicated.id,
                    payment_method_id=link.payment_method_id,
                )
                for link in links
            ]
        )

        return duplicated

    async def _copy_number(self, original: Invoice) -> str:
        base = f"{original.invoice_number}-COPY"
        candidate = base
        counter = 2
        while await self.invoice_repo.get_by_invoice_number(
            original.from_company_id, candidate
        ):
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate


class DuplicateInvoices:
    """
    Use Case: Duplicate several invoices (bulk operation)

    Business Rules:
    1. Every requested invoice must exist, otherwise nothing is created
    2. The override client, when given, must exist
    3. All copies are created in a single transaction; any failure rolls
       back every copy of the batch

    Flow:
    1. Load source invoices and check that none is missing
    2. Resolve the override client
    3. Duplicate each invoice in request order
    4. Commit once and return the new invoices with their items
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        payment_method_repo: PaymentMethodRepository,
        client_repo: ClientRepository,
        default_due_days: int = 30,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.duplicator = InvoiceDuplicator(
            invoice_repo, invoice_item_repo, payment_method_repo, default_due_days
        )
        self.details = InvoiceDetailsLoader(invoice_item_repo, payment_method_repo)

    async def execute(self, command: DuplicateCommandDTO) -> Result[BulkDuplicateResultDTO]:
        try:
            result = await self._duplicate(command.ids, command)
            if result.is_err():
                return result

            duplicated = result.value
            await self.uow.commit()

            logger.info(
                f"Duplicated {len(duplicated)} invoices "
                f"(by={command.updated_by or 'unknown'})"
            )

            invoices = await self.details.load(duplicated, include_parties=False)
            return Return.ok(
                BulkDuplicateResultDTO(
                    duplicated=len(invoices),
                    invoices=invoices,
                    message=f"Successfully duplicated {len(invoices)} invoices",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Bulk duplicate failed")
            return Return.err(
                Error(
                    code="BULK_DUPLICATE_FAILED",
                    message="Bulk operation failed",
                    reason=str(e),
                )
            )

    async def _duplicate(
        self, invoice_ids: List[str], options: DuplicateOptionsDTO
    ) -> Result[List[Invoice]]:
        originals = await self.invoice_repo.get_by_ids(invoice_ids)
        by_id = {invoice.id: invoice for invoice in originals}

        missing = [invoice_id for invoice_id in invoice_ids if invoice_id not in by_id]
        if missing:
            return Return.err(
                Error(
                    code="INVOICE_NOT_FOUND",
                    message=f"Invoices not found: {', '.join(missing)}",
                    reason="Duplication source does not exist",
                )
            )

        new_client = None
        if options.new_client_id:
            new_client = await self.client_repo.get_by_id(options.new_client_id)
            if new_client is None:
                return Return.err(
                    Error(
                        code="CLIENT_NOT_FOUND",
                        message=f"Client with ID {options.new_client_id} not found",
                        reason="Override client does not exist",
                    )
                )

        duplicated = []
        for invoice_id in invoice_ids:
            duplicated.append(
                await self.duplicator.duplicate(by_id[invoice_id], options, new_client)
            )
        return Return.ok(duplicated)


class DuplicateInvoice(DuplicateInvoices):
    """
    Use Case: Duplicate a single invoice

    Same rules as the bulk operation; the response also carries the source
    invoice.
    """

    async def execute_one(
        self, invoice_id: str, options: DuplicateOptionsDTO
    ) -> Result[DuplicateInvoiceResultDTO]:
        try:
            result = await self._duplicate([invoice_id], options)
            if result.is_err():
                if result.error.code == "INVOICE_NOT_FOUND":
                    result.error.message = f"Invoice with ID {invoice_id} not found"
                return result

            await self.uow.commit()

            original = await self.invoice_repo.get_by_id(invoice_id)
            original_dto, duplicated_dto = await self.details.load(
                [original, result.value[0]], include_parties=False
            )

            logger.info(
                f"Duplicated invoice {original_dto.invoice_number} "
                f"as {duplicated_dto.invoice_number}"
            )

            return Return.ok(
                DuplicateInvoiceResultDTO(
                    original_invoice=original_dto,
                    duplicated_invoice=duplicated_dto,
                    message=f"Invoice {original_dto.invoice_number} duplicated "
                            f"as {duplicated_dto.invoice_number}",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Duplicating invoice {invoice_id} failed")
            return Return.err(
                Error(
                    code="DUPLICATE_INVOICE_FAILED",
                    message="Failed to duplicate invoice",
                    reason=str(e),
                )
            )
