"""Bulk Operation Dispatcher

Routes a named bulk operation and its raw payload to the matching use case.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type
from pydantic import BaseModel, ValidationError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.csv_service import CsvService
from src.app.services.pdf_service import PdfService
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.repositories.payment_method_repository import PaymentMethodRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.company_repository import CompanyRepository
from .bulk_update_status import BulkUpdateStatus
from .bulk_archive import BulkArchive
from .bulk_delete import BulkDelete
from .bulk_mark_paid import BulkMarkPaid
from .bulk_send import BulkSend
from .bulk_export import BulkExport
from .duplicate_invoices import DuplicateInvoices
from .invoice_details import InvoiceDetailsLoader
from .dtos import (
    ArchiveCommandDTO,
    DeleteCommandDTO,
    DuplicateCommandDTO,
    ExportCommandDTO,
    MarkPaidCommandDTO,
    SendCommandDTO,
    UpdateStatusCommandDTO,
    describe_validation_errors,
)

logger = logging.getLogger(__name__)


class BulkOperation(str, Enum):
    """Bulk operation names as sent by the web client"""
    UPDATE_STATUS = "updateStatus"
    ARCHIVE = "archive"
    DELETE = "delete"
    MARK_PAID = "markPaid"
    SEND = "send"
    DUPLICATE = "duplicate"
    EXPORT = "export"


class BulkOperationDispatcher:
    """
    Dispatches bulk invoice operations

    Validation of the operation name and payload happens here, before any
    repository is touched. Each operation then applies its own policy:

    - updateStatus, delete, duplicate: all-or-nothing
    - archive: unconditional, already archived invoices are not counted
    - markPaid, send: skip-and-continue, ineligible IDs reported as `skipped`
    - export: read only
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        payment_method_repo: PaymentMethodRepository,
        client_repo: ClientRepository,
        company_repo: CompanyRepository,
        csv_service: CsvService,
        pdf_service: PdfService,
        default_deleted_by: str = "system",
        default_due_days: int = 30,
        issuer_name: str = "Bookkeeping Platform",
    ):
        details = InvoiceDetailsLoader(
            invoice_item_repo, payment_method_repo, client_repo, company_repo
        )
        self._handlers: Dict[BulkOperation, Tuple[Type[BaseModel], Any]] = {
            BulkOperation.UPDATE_STATUS: (
                UpdateStatusCommandDTO,
                BulkUpdateStatus(uow, invoice_repo),
            ),
            BulkOperation.ARCHIVE: (
                ArchiveCommandDTO,
                BulkArchive(uow, invoice_repo),
            ),
            BulkOperation.DELETE: (
                DeleteCommandDTO,
                BulkDelete(uow, invoice_repo, default_deleted_by=default_deleted_by),
            ),
            BulkOperation.MARK_PAID: (
                MarkPaidCommandDTO,
                BulkMarkPaid(uow, invoice_repo),
            ),
            BulkOperation.SEND: (
                SendCommandDTO,
                BulkSend(uow, invoice_repo),
            ),
            BulkOperation.DUPLICATE: (
                DuplicateCommandDTO,
                DuplicateInvoices(
                    uow,
                    invoice_repo,
                    invoice_item_repo,
                    payment_method_repo,
                    client_repo,
                    default_due_days=default_due_days,
                ),
            ),
            BulkOperation.EXPORT: (
                ExportCommandDTO,
                BulkExport(
                    invoice_repo,
                    details,
                    csv_service,
                    pdf_service,
                    issuer_name=issuer_name,
                ),
            ),
        }

    async def execute(self, operation: str, data: Optional[Dict[str, Any]]) -> Result:
        """
        Execute a bulk operation

        Args:
            operation: Operation name (updateStatus, archive, delete, markPaid,
                send, duplicate, export)
            data: Operation payload, always containing `ids`

        Returns:
            Result with the operation specific response DTO, or an error
            (INVALID_INPUT, INVALID_TRANSITION, BUSINESS_RULE_VIOLATION,
            INVOICE_NOT_FOUND, CLIENT_NOT_FOUND, *_FAILED)
        """
        try:
            bulk_operation = BulkOperation(operation)
        except ValueError:
            return Return.err(
                Error(
                    code="INVALID_INPUT",
                    message="Invalid bulk operation",
                    reason=f"Unknown operation {operation!r}",
                )
            )

        if not isinstance(data, dict):
            return Return.err(
                Error(
                    code="INVALID_INPUT",
                    message="Invalid invoice IDs",
                    reason="Operation data must be an object containing ids",
                )
            )

        command_type, use_case = self._handlers[bulk_operation]
        try:
            command = command_type.model_validate(data)
        except ValidationError as e:
            return Return.err(
                Error(
                    code="INVALID_INPUT",
                    message=describe_validation_errors(e.errors()),
                    reason=str(e),
                )
            )

        logger.info(f"Running bulk {bulk_operation.value} on {len(command.ids)} invoices")
        return await use_case.execute(command)
