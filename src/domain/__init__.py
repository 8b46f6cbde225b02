from .base import BaseModel, generate_uuid
from .company import Company
from .client import Client
from .invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceDateRange,
    InvoiceSortField,
    STATUS_TRANSITIONS,
    date_range_bounds,
    is_valid_transition,
    calculate_totals,
    next_invoice_number,
)
from .invoice_item import InvoiceItem, calculate_line_total
from .payment_method import PaymentMethod, PaymentMethodInvoice

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Company",
    "Client",
    "Invoice",
    "InvoiceStatus",
    "InvoiceDateRange",
    "InvoiceSortField",
    "STATUS_TRANSITIONS",
    "date_range_bounds",
    "is_valid_transition",
    "calculate_totals",
    "next_invoice_number",
    "InvoiceItem",
    "calculate_line_total",
    "PaymentMethod",
    "PaymentMethodInvoice",
]
