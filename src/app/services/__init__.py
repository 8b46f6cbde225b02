from .unit_of_work import UnitOfWork
from .pdf_service import PdfService
from .csv_service import CsvService

__all__ = [
    "UnitOfWork",
    "PdfService",
    "CsvService",
]
