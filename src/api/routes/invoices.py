"""Invoice API Routes

FastAPI routes for invoice creation, retrieval, bulk operations and
duplication.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError
from src.api.schemas.invoice_request import BulkOperationRequestSchema
from src.app.use_cases.invoices import (
    BulkOperationDispatcher,
    CreateInvoice,
    CreateInvoiceCommandDTO,
    DuplicateInvoice,
    DuplicateInvoiceResultDTO,
    DuplicateOptionsDTO,
    GetInvoice,
    InvoiceDetailsLoader,
    InvoiceDTO,
    InvoiceListResponseDTO,
    ListInvoices,
    ListInvoicesQueryDTO,
)
from src.app.use_cases.invoices.dtos import SortDirection, describe_validation_errors
from src.domain.invoice import InvoiceDateRange, InvoiceSortField
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_item_repository import SqlAlchemyInvoiceItemRepository
from src.adapter.repositories.payment_method_repository import SqlAlchemyPaymentMethodRepository
from src.adapter.repositories.client_repository import SqlAlchemyClientRepository
from src.adapter.repositories.company_repository import SqlAlchemyCompanyRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.csv_service import CsvInvoiceService
from src.adapter.services.pdf_service import ReportLabPdfService
from src.depends import get_session

router = APIRouter(prefix="/invoices", tags=["Invoices"])

BAD_REQUEST_CODES = {"INVALID_INPUT", "INVALID_TRANSITION", "BUSINESS_RULE_VIOLATION"}
CONFLICT_CODES = {"INVOICE_NUMBER_EXISTS"}

ERROR_RESPONSES = {
    400: {
        "description": "Invalid input, transition or business rule violation",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVALID_TRANSITION",
                        "message": "Invalid status transition for invoices: 3f6c0b1e-..."
                    }
                }
            }
        }
    },
    404: {
        "description": "Invoice or client not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVOICE_NOT_FOUND",
                        "message": "Invoice with ID 3f6c0b1e-... not found"
                    }
                }
            }
        }
    },
    500: {
        "description": "Operation failed",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "BULK_UPDATE_STATUS_FAILED",
                        "message": "Bulk operation failed"
                    }
                }
            }
        }
    },
}


def raise_client_error(error: Error):
    """Translate a use case error into the matching HTTP error"""
    if error.code.endswith("_FAILED"):
        raise ClientError(error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if error.code.endswith("_NOT_FOUND"):
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code in CONFLICT_CODES:
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)


class InvoiceRepositories:
    """Per-request repositories bound to one session"""

    def __init__(self, session: AsyncSession):
        self.uow = SqlAlchemyUnitOfWork(session)
        self.invoices = SqlAlchemyInvoiceRepository(
            session,
            number_prefix=ApplicationConfig.INVOICE_NUMBER_PREFIX,
            number_padding=int(ApplicationConfig.INVOICE_NUMBER_PADDING),
        )
        self.items = SqlAlchemyInvoiceItemRepository(session)
        self.payment_methods = SqlAlchemyPaymentMethodRepository(session)
        self.clients = SqlAlchemyClientRepository(session)
        self.companies = SqlAlchemyCompanyRepository(session)

    def details(self) -> InvoiceDetailsLoader:
        return InvoiceDetailsLoader(
            self.items, self.payment_methods, self.clients, self.companies
        )


@router.post(
    "/bulk",
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def bulk_invoice_operation(
    request: BulkOperationRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Apply one operation to many invoices.

    **Operations and their `data` fields** (camelCase or snake_case):
    - `updateStatus`: `ids`, `status`, `updatedBy?`, `notes?` (all-or-nothing)
    - `archive`: `ids`, `updatedBy?`
    - `delete`: `ids`, `hardDelete?`, `deletedBy?` (paid invoices need hardDelete)
    - `markPaid`: `ids`, `paidDate?`, `paidAmount?`, `notes?`, `updatedBy?`
    - `send`: `ids`, `sendDate?`, `updatedBy?`
    - `duplicate`: `ids`, `newIssueDate?`, `newDueDate?`, `newClientId?`,
      `adjustInvoiceNumber?`, `copyNotes?`, `updatedBy?`
    - `export`: `ids`, `format?` (json, csv, pdf), `includeItems?`

    **Returns:**
    - 200: `{success: true, message, ...counts}` per operation
    - 400: Invalid operation, IDs, status, transition or business rule
    - 404: Duplicate source or override client not found
    - 500: Operation failed (rolled back)
    """
    repos = InvoiceRepositories(session)
    dispatcher = BulkOperationDispatcher(
        repos.uow,
        repos.invoices,
        repos.items,
        repos.payment_methods,
        repos.clients,
        repos.companies,
        CsvInvoiceService(),
        ReportLabPdfService(),
        default_deleted_by=ApplicationConfig.DEFAULT_DELETED_BY,
        default_due_days=int(ApplicationConfig.INVOICE_DEFAULT_DUE_DAYS),
        issuer_name=ApplicationConfig.EXPORT_COMPANY_NAME,
    )

    result = await dispatcher.execute(request.operation, request.data)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.post(
    "/{invoice_id}/duplicate",
    response_model=DuplicateInvoiceResultDTO,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def duplicate_invoice(
    invoice_id: str,
    options: Optional[DuplicateOptionsDTO] = Body(default=None),
    session: AsyncSession = Depends(get_session)
):
    """
    Duplicate a single invoice as a new draft.

    **Request body (optional):** `newIssueDate`, `newDueDate`, `newClientId`,
    `adjustInvoiceNumber` (default true), `copyNotes` (default false)

    **Returns:**
    - 201: Source and duplicated invoice
    - 404: Invoice or override client not found
    """
    repos = InvoiceRepositories(session)
    use_case = DuplicateInvoice(
        repos.uow,
        repos.invoices,
        repos.items,
        repos.payment_methods,
        repos.clients,
        default_due_days=int(ApplicationConfig.INVOICE_DEFAULT_DUE_DAYS),
    )

    result = await use_case.execute_one(invoice_id, options or DuplicateOptionsDTO())

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.post(
    "",
    response_model=InvoiceDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        409: {
            "description": "Invoice number already used by the company",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_NUMBER_EXISTS",
                            "message": "Invoice number INV-2024-0001 already exists"
                        }
                    }
                }
            }
        },
    },
)
async def create_invoice(
    command: CreateInvoiceCommandDTO,
    session: AsyncSession = Depends(get_session)
):
    """
    Create an invoice with its line items.

    Totals are computed from the items and tax rate; the invoice number is
    generated (INV-YYYY-NNNN) when omitted.

    **Returns:**
    - 201: Created invoice
    - 404: Company or client not found
    - 409: Invoice number already exists
    """
    repos = InvoiceRepositories(session)
    use_case = CreateInvoice(
        repos.uow,
        repos.invoices,
        repos.items,
        repos.payment_methods,
        repos.clients,
        repos.companies,
    )

    result = await use_case.execute(command)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "",
    response_model=InvoiceListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    company_id: Optional[int] = Query(default=None, alias="companyId"),
    client_id: Optional[str] = Query(default=None, alias="clientId"),
    invoice_status: Optional[str] = Query(default=None, alias="status"),
    currency: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    include_deleted: bool = Query(default=False, alias="includeDeleted"),
    date_range: Optional[str] = Query(default=None, alias="dateRange"),
    sort_field: Optional[str] = Query(default=None, alias="sortField"),
    sort_direction: Optional[str] = Query(default=None, alias="sortDirection"),
    skip: int = Query(default=0, ge=0),
    take: int = Query(default=20, ge=1, le=200),
    session: AsyncSession = Depends(get_session)
):
    """
    List invoices, newest first by default, with per-status statistics,
    overdue analysis and collection rate.

    **Query parameters:** `companyId`, `clientId`, `status`, `currency`,
    `search` (number, client name, email, notes), `includeDeleted`,
    `dateRange` (all, thisMonth, lastMonth, thisYear, lastYear),
    `sortField` (createdAt, invoiceNumber, client, amount, dueDate, company,
    sentDate, paidDate, currency), `sortDirection` (asc, desc),
    `skip`, `take` (max 200)
    """
    try:
        query = ListInvoicesQueryDTO(
            company_id=company_id,
            client_id=client_id,
            status=invoice_status,
            currency=currency,
            search=search,
            include_deleted=include_deleted,
            date_range=date_range or InvoiceDateRange.ALL,
            sort_field=sort_field or InvoiceSortField.CREATED_AT,
            sort_direction=sort_direction or SortDirection.DESC,
            skip=skip,
            take=take,
        )
    except ValidationError as e:
        raise ClientError(
            Error(
                code="INVALID_INPUT",
                message=describe_validation_errors(e.errors()),
                reason=str(e),
            )
        )

    repos = InvoiceRepositories(session)
    result = await ListInvoices(repos.invoices, repos.details()).execute(query)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "/{invoice_id}",
    response_model=InvoiceDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def get_invoice(
    invoice_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Get one invoice with items, payment methods, company and client.

    **Returns:**
    - 200: Invoice details
    - 404: Invoice not found
    """
    repos = InvoiceRepositories(session)
    result = await GetInvoice(repos.invoices, repos.details()).execute(invoice_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value
