"""ListInvoices Use Case

Filtered, sorted, paginated invoice listing with per-status statistics.
"""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus, date_range_bounds
from .dtos import (
    InvoiceListResponseDTO,
    InvoiceStatisticsDTO,
    ListInvoicesQueryDTO,
    OverdueStatisticsDTO,
    PaginationDTO,
    SortDirection,
    StatusStatisticsDTO,
)
from .invoice_details import InvoiceDetailsLoader

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    if not whole:
        return Decimal("0")
    return (Decimal(part) * 100 / Decimal(whole)).quantize(CENT, rounding=ROUND_HALF_UP)


def build_statistics(status_rows: List[Dict[str, Any]]) -> InvoiceStatisticsDTO:
    """
    Aggregate per-status rows into listing statistics

    collection_rate is the paid value over paid plus overdue value.
    """
    total = sum(row["count"] for row in status_rows)
    total_value = sum((row["total_amount"] for row in status_rows), Decimal("0"))
    status_stats = {
        InvoiceStatus(row["status"]).value.lower(): StatusStatisticsDTO(
            count=row["count"], value=row["total_amount"]
        )
        for row in status_rows
    }

    overdue = status_stats.get("overdue", StatusStatisticsDTO(count=0, value=Decimal("0")))
    paid = status_stats.get("paid", StatusStatisticsDTO(count=0, value=Decimal("0")))
    average_overdue = (
        (overdue.value / overdue.count).quantize(CENT, rounding=ROUND_HALF_UP)
        if overdue.count
        else Decimal("0")
    )

    return InvoiceStatisticsDTO(
        total=total,
        total_value=total_value,
        status_stats=status_stats,
        overdue=OverdueStatisticsDTO(
            count=overdue.count,
            total_value=overdue.value,
            average_value=average_overdue,
            percentage=_percentage(overdue.count, total),
        ),
        collection_rate=_percentage(paid.value, paid.value + overdue.value),
    )


class ListInvoices:
    """
    Use Case: List invoices

    Business Rules:
    1. Soft deleted invoices are hidden unless include_deleted is set
    2. Results are ordered newest first unless another sort is requested
    3. Date ranges apply to the creation timestamp
    4. Statistics cover every matching invoice, not only the current page
    """

    def __init__(self, invoice_repo: InvoiceRepository, details: InvoiceDetailsLoader):
        self.invoice_repo = invoice_repo
        self.details = details

    async def execute(self, query: ListInvoicesQueryDTO) -> Result[InvoiceListResponseDTO]:
        try:
            created_from, created_to = date_range_bounds(query.date_range, datetime.utcnow())
            filters = dict(
                company_id=query.company_id,
                client_id=query.client_id,
                status=query.status,
                currency=query.currency,
                search=query.search,
                include_deleted=query.include_deleted,
                created_from=created_from,
                created_to=created_to,
            )

            invoices = await self.invoice_repo.list_invoices(
                **filters,
                sort_field=query.sort_field,
                sort_descending=query.sort_direction == SortDirection.DESC,
                limit=query.take,
                offset=query.skip,
            )
            status_rows = await self.invoice_repo.count_by_status(**filters)

            statistics = build_statistics(status_rows)
            data = await self.details.load(invoices, include_items=False)

            return Return.ok(
                InvoiceListResponseDTO(
                    data=data,
                    pagination=PaginationDTO(
                        total=statistics.total,
                        skip=query.skip,
                        take=query.take,
                        has_more=query.skip + query.take < statistics.total,
                    ),
                    statistics=statistics,
                )
            )

        except Exception as e:
            logger.exception("Invoice listing failed")
            return Return.err(
                Error(
                    code="LIST_INVOICES_FAILED",
                    message="Failed to fetch invoices",
                    reason=str(e),
                )
            )
