"""Integration tests for entity mappings"""

import pytest
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, select

from src.domain.company import Company
from src.domain.invoice import Invoice


class TestTimestampColumns:
    """Timestamps are stored as naive UTC"""

    def test_every_datetime_column_is_naive(self):
        for table in SQLModel.metadata.sorted_tables:
            for column in table.columns:
                if isinstance(column.type, DateTime):
                    assert column.type.timezone is False, f"{table.name}.{column.name}"

    def test_audit_timestamps_are_mapped_explicitly(self):
        for table_name in ("companies", "clients", "invoices", "invoice_items", "payment_methods"):
            table = SQLModel.metadata.tables[table_name]
            for column_name in ("created_at", "updated_at"):
                column = table.columns[column_name]
                assert isinstance(column.type, DateTime)
                assert column.nullable is False

    @pytest.mark.asyncio
    async def test_naive_timestamps_round_trip(self, db_session, company, seed_invoice):
        invoice = await seed_invoice("INV-2024-0001")

        stored = (
            await db_session.execute(select(Invoice).where(Invoice.id == invoice.id))
        ).scalar_one()
        loaded_company = await db_session.get(Company, company.id)

        assert isinstance(stored.created_at, datetime)
        assert stored.created_at.tzinfo is None
        assert loaded_company.updated_at.tzinfo is None
