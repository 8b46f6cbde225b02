"""Data Transfer Objects for Invoice Use Cases

Pydantic models for command inputs and response outputs. Command DTOs accept
both camelCase (as sent by the web client) and snake_case keys.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.domain.invoice import InvoiceDateRange, InvoiceSortField, InvoiceStatus


class ExportFormat(str, Enum):
    """Supported bulk export formats"""
    JSON = "json"
    CSV = "csv"
    PDF = "pdf"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class CommandDTO(BaseModel):
    """Base for command DTOs, accepts camelCase aliases"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class BulkCommandDTO(CommandDTO):
    """
    Base command for bulk operations

    Every bulk operation targets a non-empty list of invoice IDs.
    """

    ids: List[str] = Field(
        ...,
        min_length=1,
        description="Target invoice IDs (non-empty)"
    )

    @field_validator("ids")
    @classmethod
    def validate_ids(cls, v):
        """Reject blank IDs and drop duplicates while keeping order"""
        if any(not isinstance(i, str) or not i.strip() for i in v):
            raise ValueError("Invoice IDs must be non-empty strings")
        return list(dict.fromkeys(v))


def _naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC, like datetime.utcnow()"""
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


def _normalize_status(v):
    if isinstance(v, str):
        return v.strip().upper()
    return v


class UpdateStatusCommandDTO(BulkCommandDTO):
    """Command DTO for the bulk status update operation"""

    status: InvoiceStatus = Field(
        ...,
        description="Requested status (DRAFT, SENT, PAID, OVERDUE, ARCHIVED)"
    )

    updated_by: Optional[str] = Field(default=None, description="Who requested the change")

    notes: Optional[str] = Field(default=None, description="Audit note for the change")

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_status(v)

    class Config:
        json_schema_extra = {
            "example": {
                "ids": ["inv_1", "inv_2"],
                "status": "SENT",
                "updatedBy": "jane@example.com",
            }
        }


class ArchiveCommandDTO(BulkCommandDTO):
    """Command DTO for the bulk archive operation"""

    updated_by: Optional[str] = Field(default=None, description="Who requested the change")


class DeleteCommandDTO(BulkCommandDTO):
    """Command DTO for the bulk delete operation"""

    hard_delete: bool = Field(
        default=False,
        description="Permanently remove rows instead of archiving them"
    )

    deleted_by: Optional[str] = Field(default=None, description="Who deleted the invoices")


class MarkPaidCommandDTO(BulkCommandDTO):
    """Command DTO for the bulk mark-paid operation"""

    paid_date: Optional[datetime] = Field(default=None, description="Payment date (defaults to now)")

    paid_amount: Optional[Decimal] = Field(default=None, ge=0, description="Amount received")

    notes: Optional[str] = Field(default=None, description="Replaces the invoice notes when given")

    updated_by: Optional[str] = Field(default=None, description="Who recorded the payment")

    @field_validator("paid_date")
    @classmethod
    def paid_date_utc(cls, v):
        return _naive_utc(v)


class SendCommandDTO(BulkCommandDTO):
    """Command DTO for the bulk send operation"""

    send_date: Optional[datetime] = Field(default=None, description="Send date (defaults to now)")

    updated_by: Optional[str] = Field(default=None, description="Who sent the invoices")

    @field_validator("send_date")
    @classmethod
    def send_date_utc(cls, v):
        return _naive_utc(v)


class DuplicateOptionsDTO(CommandDTO):
    """Overrides applied when duplicating invoices"""

    new_issue_date: Optional[datetime] = Field(default=None, description="Issue date of the copy (defaults to now)")

    new_due_date: Optional[datetime] = Field(default=None, description="Due date of the copy (defaults to issue + 30 days)")

    new_client_id: Optional[str] = Field(default=None, description="Bill the copy to another client")

    adjust_invoice_number: bool = Field(
        default=True,
        description="Assign the next sequential number (otherwise derive a -COPY number)"
    )

    copy_notes: bool = Field(
        default=False,
        description="Keep the original notes before the duplication stamp"
    )

    updated_by: Optional[str] = Field(default=None, description="Who requested the duplication")

    @field_validator("new_issue_date", "new_due_date")
    @classmethod
    def dates_utc(cls, v):
        return _naive_utc(v)

    @model_validator(mode="after")
    def validate_dates(self):
        if (
            self.new_issue_date is not None
            and self.new_due_date is not None
            and self.new_due_date < self.new_issue_date
        ):
            raise ValueError("newDueDate must not be before newIssueDate")
        return self


class DuplicateCommandDTO(DuplicateOptionsDTO, BulkCommandDTO):
    """Command DTO for the bulk duplicate operation"""
    pass


class ExportCommandDTO(BulkCommandDTO):
    """Command DTO for the bulk export operation"""

    format: ExportFormat = Field(default=ExportFormat.JSON, description="json, csv or pdf")

    include_items: bool = Field(default=True, description="Include line items")

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class CreateInvoiceItemDTO(CommandDTO):
    """Line item of a new invoice"""

    product_id: Optional[str] = None

    product_name: str = Field(default="", max_length=255)

    description: str = ""

    quantity: Decimal = Field(default=Decimal("1"), gt=0)

    unit_price: Decimal = Field(default=Decimal("0"), ge=0)

    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)

    total: Optional[Decimal] = Field(default=None, ge=0, description="Defaults to quantity * unit_price")


class CreateInvoiceCommandDTO(CommandDTO):
    """Command DTO for creating an invoice"""

    from_company_id: int = Field(..., description="Issuing company ID")

    invoice_number: Optional[str] = Field(default=None, max_length=50, description="Generated when omitted")

    client_id: Optional[str] = None

    client_name: Optional[str] = Field(default=None, description="Taken from the client record when omitted")

    client_email: Optional[str] = None

    client_address: Optional[str] = None

    currency: str = Field(default="USD", min_length=3, max_length=3)

    status: InvoiceStatus = InvoiceStatus.DRAFT

    issue_date: datetime

    due_date: datetime

    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    template: str = "professional"

    notes: Optional[str] = None

    items: List[CreateInvoiceItemDTO] = Field(default_factory=list)

    payment_method_ids: List[str] = Field(default_factory=list)

    @field_validator("issue_date", "due_date")
    @classmethod
    def dates_utc(cls, v):
        return _naive_utc(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_status(v)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.due_date < self.issue_date:
            raise ValueError("dueDate must not be before issueDate")
        return self


class ListInvoicesQueryDTO(BaseModel):
    """Filters and pagination for listing invoices"""

    company_id: Optional[int] = None
    client_id: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    currency: Optional[str] = None
    search: Optional[str] = None
    include_deleted: bool = False
    date_range: InvoiceDateRange = InvoiceDateRange.ALL
    sort_field: InvoiceSortField = InvoiceSortField.CREATED_AT
    sort_direction: SortDirection = SortDirection.DESC
    skip: int = Field(default=0, ge=0)
    take: int = Field(default=20, ge=1, le=200)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_status(v)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if v else v

    @field_validator("sort_direction", mode="before")
    @classmethod
    def lower_direction(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ---------------------------------------------------------------------------
# Response DTOs
# ---------------------------------------------------------------------------


class InvoiceItemDTO(BaseModel):
    id: str
    product_id: Optional[str] = None
    product_name: str
    description: str
    quantity: Decimal
    unit_price: Decimal
    currency: str
    total: Decimal


class PaymentMethodDTO(BaseModel):
    id: str
    type: str
    name: str
    currency: str
    details: str = ""


class CompanySummaryDTO(BaseModel):
    id: int
    legal_name: str
    trading_name: str
    address: str = ""
    email: str = ""


class ClientSummaryDTO(BaseModel):
    id: str
    name: str
    email: str
    address: str = ""


class InvoiceDTO(BaseModel):
    """Full invoice representation returned by the API"""

    id: str
    invoice_number: str
    from_company_id: int
    client_id: Optional[str] = None
    client_name: str
    client_email: str
    client_address: Optional[str] = None
    subtotal: Decimal
    currency: str
    status: InvoiceStatus
    issue_date: datetime
    due_date: datetime
    paid_date: Optional[datetime] = None
    sent_date: Optional[datetime] = None
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    template: str
    notes: Optional[str] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: Optional[List[InvoiceItemDTO]] = None
    payment_methods: List[PaymentMethodDTO] = Field(default_factory=list)
    company: Optional[CompanySummaryDTO] = None
    client: Optional[ClientSummaryDTO] = None


class BulkResultDTO(BaseModel):
    success: bool = True
    message: str


class BulkUpdateStatusResultDTO(BulkResultDTO):
    updated: int


class BulkArchiveResultDTO(BulkResultDTO):
    archived: int


class BulkDeleteResultDTO(BulkResultDTO):
    deleted: int
    hard_delete: bool


class BulkMarkPaidResultDTO(BulkResultDTO):
    updated: int
    skipped: int


class BulkSendResultDTO(BulkResultDTO):
    sent: int
    skipped: int


class BulkDuplicateResultDTO(BulkResultDTO):
    duplicated: int
    invoices: List[InvoiceDTO]


class BulkExportResultDTO(BulkResultDTO):
    exported: int
    format: ExportFormat
    data: List[InvoiceDTO]
    content: Optional[str] = Field(
        default=None,
        description="CSV text, or base64 PDF document, for csv/pdf exports"
    )
    content_type: str
    filename: Optional[str] = None


class DuplicateInvoiceResultDTO(BulkResultDTO):
    original_invoice: InvoiceDTO
    duplicated_invoice: InvoiceDTO


class StatusStatisticsDTO(BaseModel):
    count: int
    value: Decimal


class PaginationDTO(BaseModel):
    total: int
    skip: int
    take: int
    has_more: bool


class OverdueStatisticsDTO(BaseModel):
    count: int = 0
    total_value: Decimal = Decimal("0")
    average_value: Decimal = Decimal("0")
    percentage: Decimal = Field(default=Decimal("0"), description="Share of matching invoices that are overdue")


class InvoiceStatisticsDTO(BaseModel):
    total: int
    total_value: Decimal
    status_stats: Dict[str, StatusStatisticsDTO]
    overdue: OverdueStatisticsDTO = Field(default_factory=OverdueStatisticsDTO)
    collection_rate: Decimal = Field(
        default=Decimal("0"),
        description="Paid value as a percentage of paid plus overdue value"
    )


class InvoiceListResponseDTO(BaseModel):
    data: List[InvoiceDTO]
    pagination: PaginationDTO
    statistics: InvoiceStatisticsDTO


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Turn pydantic error entries into the short messages returned to callers"""
    if not errors:
        return "Invalid operation data"
    first = errors[0]
    field = first.get("loc", ("",))[0] if first.get("loc") else ""
    if field == "ids":
        return "Invalid invoice IDs"
    if field == "status":
        return "Invalid status"
    if field == "format":
        return "Invalid export format"
    if field == "date_range":
        return "Invalid date range"
    if field == "sort_field":
        return "Invalid sort field"
    if field == "sort_direction":
        return "Invalid sort direction"
    message = first.get("msg", "invalid value")
    if field:
        return f"Invalid {field}: {message}"
    return message
