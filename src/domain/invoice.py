"""Invoice Domain Entity

Tracks customer invoices, their totals and lifecycle status.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, Integer, Numeric, String, Text, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid

CENT = Decimal("0.01")


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    ARCHIVED = "ARCHIVED"


# Allowed status moves. ARCHIVED is terminal.
STATUS_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.ARCHIVED}),
    InvoiceStatus.SENT: frozenset(
        {InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.ARCHIVED}
    ),
    InvoiceStatus.PAID: frozenset({InvoiceStatus.ARCHIVED}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID, InvoiceStatus.ARCHIVED}),
    InvoiceStatus.ARCHIVED: frozenset(),
}


def _coerce_status(value) -> Optional[InvoiceStatus]:
    if isinstance(value, InvoiceStatus):
        return value
    try:
        return InvoiceStatus(value)
    except ValueError:
        return None


def is_valid_transition(current, requested) -> bool:
    """
    Check whether an invoice may move from one status to another

    Args:
        current: Current status (InvoiceStatus or its string value)
        requested: Requested status (InvoiceStatus or its string value)

    Returns:
        True if the transition table permits the move, False otherwise
        (including unknown statuses on either side)
    """
    current_status = _coerce_status(current)
    requested_status = _coerce_status(requested)
    if current_status is None or requested_status is None:
        return False
    return requested_status in STATUS_TRANSITIONS.get(current_status, frozenset())


def calculate_tax_amount(subtotal: Decimal, tax_rate: Decimal) -> Decimal:
    """tax_amount = subtotal * tax_rate / 100, rounded to cents"""
    return (Decimal(subtotal) * Decimal(tax_rate) / Decimal(100)).quantize(
        CENT, rounding=ROUND_HALF_UP
    )


def calculate_totals(line_totals: Iterable[Decimal], tax_rate: Decimal):
    """
    Compute invoice subtotal, tax amount and total amount

    Args:
        line_totals: Totals of every invoice line item
        tax_rate: Tax rate as a percentage (e.g. 20 for 20%)

    Returns:
        Tuple (subtotal, tax_amount, total_amount)
    """
    subtotal = sum((Decimal(t) for t in line_totals), Decimal("0")).quantize(
        CENT, rounding=ROUND_HALF_UP
    )
    tax_amount = calculate_tax_amount(subtotal, tax_rate)
    return subtotal, tax_amount, subtotal + tax_amount


class InvoiceDateRange(str, Enum):
    """Creation date windows for invoice listing"""
    ALL = "all"
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    THIS_YEAR = "thisYear"
    LAST_YEAR = "lastYear"


class InvoiceSortField(str, Enum):
    """Sort keys accepted by invoice listing"""
    CREATED_AT = "createdAt"
    INVOICE_NUMBER = "invoiceNumber"
    CLIENT = "client"
    AMOUNT = "amount"
    DUE_DATE = "dueDate"
    COMPANY = "company"
    SENT_DATE = "sentDate"
    PAID_DATE = "paidDate"
    CURRENCY = "currency"


def date_range_bounds(
    date_range: InvoiceDateRange, now: datetime
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Resolve a date window into [start, end) creation timestamps

    Args:
        date_range: Requested window
        now: Reference time (naive UTC)

    Returns:
        Tuple (start, end); end is exclusive and None for open windows
    """
    month_start = datetime(now.year, now.month, 1)
    year_start = datetime(now.year, 1, 1)

    if date_range == InvoiceDateRange.THIS_MONTH:
        return month_start, None
    if date_range == InvoiceDateRange.LAST_MONTH:
        if now.month == 1:
            return datetime(now.year - 1, 12, 1), month_start
        return datetime(now.year, now.month - 1, 1), month_start
    if date_range == InvoiceDateRange.THIS_YEAR:
        return year_start, None
    if date_range == InvoiceDateRange.LAST_YEAR:
        return datetime(now.year - 1, 1, 1), year_start
    return None, None


def invoice_number_prefix(year: int, prefix: str = "INV") -> str:
    return f"{prefix}-{year}-"


def parse_invoice_sequence(invoice_number: str, number_prefix: str) -> Optional[int]:
    """
    Extract the numeric sequence from an invoice number

    Args:
        invoice_number: Full invoice number (e.g., INV-2024-0012)
        number_prefix: Company/year prefix (e.g., INV-2024-)

    Returns:
        Sequence as int, or None when the suffix is not a plain number
    """
    if not invoice_number.startswith(number_prefix):
        return None
    suffix = invoice_number[len(number_prefix):]
    if not (suffix.isascii() and suffix.isdigit()):
        return None
    return int(suffix)


def next_invoice_number(
    existing_numbers: Iterable[str],
    year: int,
    prefix: str = "INV",
    padding: int = 4,
) -> str:
    """
    Compute the next invoice number for a year

    Suffixes are compared numerically, so the sequence keeps growing past
    the zero padding width (INV-2024-9999 -> INV-2024-10000).

    Args:
        existing_numbers: Invoice numbers already used by the company
        year: Calendar year of the new number
        prefix: Number prefix (default INV)
        padding: Minimum number of digits of the sequence

    Returns:
        Next invoice number, starting at 1 when no parseable number exists
    """
    number_prefix = invoice_number_prefix(year, prefix)
    sequences = [
        seq
        for seq in (parse_invoice_sequence(n, number_prefix) for n in existing_numbers)
        if seq is not None
    ]
    next_sequence = max(sequences) + 1 if sequences else 1
    return f"{number_prefix}{next_sequence:0{padding}d}"


class Invoice(BaseModel, table=True):
    """
    Invoice - Customer invoice issued by a company

    Domain Rules:
    - invoice_number is unique per issuing company (INV-YYYY-NNNN)
    - Status transitions follow STATUS_TRANSITIONS, ARCHIVED is terminal
    - tax_amount = subtotal * tax_rate / 100
    - total_amount = subtotal + tax_amount
    - paid_date is set when status becomes PAID
    - Soft deleted invoices are ARCHIVED with deleted_at/deleted_by set
    """

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint(
            "from_company_id", "invoice_number", name="uq_invoices_company_number"
        ),
        Index("ix_invoices_from_company_id", "from_company_id"),
        Index("ix_invoices_status", "status"),
        Index("ix_invoices_client_id", "client_id"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique invoice identifier (UUID)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Invoice number, unique per company (e.g., INV-2024-0001)"
    )

    from_company_id: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Issuing company ID"
    )

    client_id: Optional[str] = Field(
        default=None,
        description="Client ID (optional, client fields are denormalized)"
    )

    client_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Client name at time of invoicing"
    )

    client_email: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Client email at time of invoicing"
    )

    client_address: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Client address at time of invoicing"
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Sum of line item totals"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (DRAFT, SENT, PAID, OVERDUE, ARCHIVED)"
    )

    issue_date: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Issue date"
    )

    due_date: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Payment due date"
    )

    paid_date: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Timestamp when invoice was paid"
    )

    sent_date: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Timestamp when invoice was sent"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(9, 4), nullable=False),
        description="Tax rate in percent"
    )

    tax_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Tax amount (subtotal * tax_rate / 100)"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Total amount (subtotal + tax_amount)"
    )

    template: str = Field(
        default="professional",
        sa_column=Column(String(50), nullable=False),
        description="Rendering template name"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-text notes"
    )

    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Soft delete timestamp"
    )

    deleted_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Who soft deleted the invoice"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
        description="Last update timestamp"
    )

    def can_transition_to(self, status: InvoiceStatus) -> bool:
        return is_valid_transition(self.status, status)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "6f1c2a9e-1d2b-4c7a-9a51-0f7c1b2d3e4f",
                "invoice_number": "INV-2024-0001",
                "from_company_id": 1,
                "client_id": "c5a1e0b2-7d3f-4e8a-b6c9-1a2b3c4d5e6f",
                "client_name": "Acme Ltd",
                "client_email": "billing@acme.test",
                "client_address": "1 Main Street",
                "subtotal": "100.00",
                "currency": "USD",
                "status": "DRAFT",
                "issue_date": "2024-02-01T00:00:00Z",
                "due_date": "2024-03-02T00:00:00Z",
                "paid_date": None,
                "tax_rate": "20.0000",
                "tax_amount": "20.00",
                "total_amount": "120.00",
                "notes": None,
            }
        }
