"""CreateInvoice Use Case

Creates an invoice with its line items and payment method links, computing
totals server side.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.payment_method_repository import PaymentMethodRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.company_repository import CompanyRepository
from src.domain.invoice import Invoice, calculate_totals
from src.domain.invoice_item import InvoiceItem, calculate_line_total
from src.domain.payment_method import PaymentMethodInvoice
from .dtos import CreateInvoiceCommandDTO, InvoiceDTO
from .invoice_details import InvoiceDetailsLoader

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice

    Business Rules:
    1. The issuing company must exist
    2. Client fields fall back to the referenced client record
    3. Invoice number is generated (INV-YYYY-NNNN) when not supplied and
       must be unique within the company
    4. item total = quantity * unit_price unless supplied
    5. subtotal = sum(item totals), tax = subtotal * tax_rate / 100,
       total = subtotal + tax

    Flow:
    1. Validate company and client
    2. Resolve invoice number
    3. Compute totals
    4. Persist invoice, items and payment method links
    5. Commit and return the full invoice
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        payment_method_repo: PaymentMethodRepository,
        client_repo: ClientRepository,
        company_repo: CompanyRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo
        self.payment_method_repo = payment_method_repo
        self.client_repo = client_repo
        self.company_repo = company_repo
        self.details = InvoiceDetailsLoader(
            invoice_item_repo, payment_method_repo, client_repo, company_repo
        )

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceDTO]:
        try:
            # Step 1: Validate company and client
            company = await self.company_repo.get_by_id(command.from_company_id)
            if company is None:
                return Return.err(
                    Error(
                        code="COMPANY_NOT_FOUND",
                        message=f"Company with ID {command.from_company_id} not found",
                        reason="Issuing company does not exist",
                    )
                )

            client = None
            if command.client_id:
                client = await self.client_repo.get_by_id(command.client_id)
                if client is None:
                    return Return.err(
                        Error(
                            code="CLIENT_NOT_FOUND",
                            message=f"Client with ID {command.client_id} not found",
                            reason="Referenced client does not exist",
                        )
                    )

            client_name = command.client_name or (client.name if client else None)
            client_email = command.client_email or (client.email if client else None)
            if not client_name or not client_email:
                return Return.err(
                    Error(
                        code="INVALID_INPUT",
                        message="Client name and email are required",
                        reason="Provide clientId or clientName and clientEmail",
                    )
                )

            # Step 2: Resolve invoice number
            if command.invoice_number:
                existing = await self.invoice_repo.get_by_invoice_number(
                    command.from_company_id, command.invoice_number
                )
                if existing is not None:
                    return Return.err(
                        Error(
                            code="INVOICE_NUMBER_EXISTS",
                            message=f"Invoice number {command.invoice_number} already exists",
                            reason="Invoice numbers are unique per company",
                        )
                    )
                invoice_number = command.invoice_number
            else:
                invoice_number = await self.invoice_repo.generate_invoice_number(
                    command.from_company_id
                )

            # Step 3: Compute totals
            line_totals = [
                item.total if item.total is not None
                else calculate_line_total(item.quantity, item.unit_price)
                for item in command.items
            ]
            subtotal, tax_amount, total_amount = calculate_totals(line_totals, command.tax_rate)

            # Step 4: Persist invoice, items and links
            invoice = await self.invoice_repo.create(
                Invoice(
                    invoice_number=invoice_number,
                    from_company_id=command.from_company_id,
                    client_id=command.client_id,
                    client_name=client_name,
                    client_email=client_email,
                    client_address=command.client_address
                    if command.client_address is not None
                    else (client.address if client else None),
                    subtotal=subtotal,
                    currency=command.currency.upper(),
                    status=command.status,
                    issue_date=command.issue_date,
                    due_date=command.due_date,
                    tax_rate=command.tax_rate,
                    tax_amount=tax_amount,
                    total_amount=total_amount,
                    template=command.template,
                    notes=command.notes,
                )
            )

            await self.invoice_item_repo.create_many(
                [
                    InvoiceItem(
                        invoice_id=invoice.id,
                        product_id=item.product_id,
                        product_name=item.product_name,
                        description=item.description,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        currency=(item.currency or command.currency).upper(),
                        total=line_total,
                    )
                    for item, line_total in zip(command.items, line_totals)
                ]
            )

            await self.payment_method_repo.create_links(
                [
                    PaymentMethodInvoice(invoice_id=invoice.id, payment_method_id=pm_id)
                    for pm_id in dict.fromkeys(command.payment_method_ids)
                ]
            )

            # Step 5: Commit
            await self.uow.commit()

            logger.info(f"Created invoice {invoice.invoice_number} for company {company.id}")

            created = await self.details.load([invoice])
            return Return.ok(created[0])

        except Exception as e:
            await self.uow.rollback()
            logger.exception("Invoice creation failed")
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
