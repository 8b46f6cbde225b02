from .unit_of_work import SqlAlchemyUnitOfWork
from .pdf_service import ReportLabPdfService
from .csv_service import CsvInvoiceService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "ReportLabPdfService",
    "CsvInvoiceService",
]
