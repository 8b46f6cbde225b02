from .invoice_repository import InvoiceRepository
from .invoice_item_repository import InvoiceItemRepository
from .payment_method_repository import PaymentMethodRepository
from .client_repository import ClientRepository
from .company_repository import CompanyRepository

__all__ = [
    "InvoiceRepository",
    "InvoiceItemRepository",
    "PaymentMethodRepository",
    "ClientRepository",
    "CompanyRepository",
]
