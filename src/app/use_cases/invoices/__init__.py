"""Invoice lifecycle use cases"""
from .bulk_update_status import BulkUpdateStatus
from .bulk_archive import BulkArchive
from .bulk_delete import BulkDelete
from .bulk_mark_paid import BulkMarkPaid
from .bulk_send import BulkSend
from .bulk_export import BulkExport
from .duplicate_invoices import DuplicateInvoices, DuplicateInvoice, InvoiceDuplicator
from .bulk_operations import BulkOperation, BulkOperationDispatcher
from .create_invoice import CreateInvoice
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .invoice_details import InvoiceDetailsLoader
from .dtos import (
    ExportFormat,
    UpdateStatusCommandDTO,
    ArchiveCommandDTO,
    DeleteCommandDTO,
    MarkPaidCommandDTO,
    SendCommandDTO,
    DuplicateOptionsDTO,
    DuplicateCommandDTO,
    ExportCommandDTO,
    CreateInvoiceCommandDTO,
    CreateInvoiceItemDTO,
    ListInvoicesQueryDTO,
    InvoiceDTO,
    InvoiceListResponseDTO,
    DuplicateInvoiceResultDTO,
)

__all__ = [
    "BulkUpdateStatus",
    "BulkArchive",
    "BulkDelete",
    "BulkMarkPaid",
    "BulkSend",
    "BulkExport",
    "DuplicateInvoices",
    "DuplicateInvoice",
    "InvoiceDuplicator",
    "BulkOperation",
    "BulkOperationDispatcher",
    "CreateInvoice",
    "GetInvoice",
    "ListInvoices",
    "InvoiceDetailsLoader",
    "ExportFormat",
    "UpdateStatusCommandDTO",
    "ArchiveCommandDTO",
    "DeleteCommandDTO",
    "MarkPaidCommandDTO",
    "SendCommandDTO",
    "DuplicateOptionsDTO",
    "DuplicateCommandDTO",
    "ExportCommandDTO",
    "CreateInvoiceCommandDTO",
    "CreateInvoiceItemDTO",
    "ListInvoicesQueryDTO",
    "InvoiceDTO",
    "InvoiceListResponseDTO",
    "DuplicateInvoiceResultDTO",
]
