import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.invoice import Invoice, InvoiceStatus


@pytest.fixture
def mock_uow():
    """Mock unit of work with async commit / rollback"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_invoice_repo():
    """Mock invoice repository"""
    repo = MagicMock()
    repo.get_by_ids = AsyncMock(return_value=[])
    repo.update_many = AsyncMock(return_value=0)
    repo.delete_many = AsyncMock(return_value=0)
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    repo.create = AsyncMock(side_effect=lambda invoice: invoice)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_invoice_number = AsyncMock(return_value=None)
    repo.generate_invoice_number = AsyncMock(return_value="INV-2024-0001")
    return repo


@pytest.fixture
def mock_item_repo():
    """Mock invoice item repository"""
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=[])
    repo.get_by_invoice_ids = AsyncMock(return_value={})
    repo.create_many = AsyncMock(side_effect=lambda items: items)
    return repo


@pytest.fixture
def mock_payment_method_repo():
    """Mock payment method repository"""
    repo = MagicMock()
    repo.get_links_by_invoice_id = AsyncMock(return_value=[])
    repo.get_by_invoice_ids = AsyncMock(return_value={})
    repo.create_links = AsyncMock(side_effect=lambda links: links)
    return repo


@pytest.fixture
def mock_client_repo():
    """Mock client repository"""
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_ids = AsyncMock(return_value={})
    return repo


@pytest.fixture
def mock_company_repo():
    """Mock company repository"""
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_ids = AsyncMock(return_value={})
    return repo


@pytest.fixture
def make_invoice():
    """Factory for in-memory Invoice entities"""

    def _make(**overrides) -> Invoice:
        issue_date = datetime(2024, 3, 1)
        values = dict(
            invoice_number="INV-2024-0001",
            from_company_id=1,
            client_id="client_1",
            client_name="Acme Ltd",
            client_email="billing@acme.test",
            client_address="1 Main Street",
            subtotal=Decimal("100.00"),
            currency="USD",
            status=InvoiceStatus.DRAFT,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=30),
            tax_rate=Decimal("20"),
            tax_amount=Decimal("20.00"),
            total_amount=Decimal("120.00"),
            template="professional",
            notes=None,
        )
        values.update(overrides)
        return Invoice(**values)

    return _make


@pytest.fixture
def stock_invoices(mock_invoice_repo):
    """Make the mocked invoice repository serve the given invoices"""

    def _stock(*invoices: Invoice):
        async def get_by_ids(invoice_ids, statuses=None):
            return [
                invoice
                for invoice in invoices
                if invoice.id in invoice_ids and (not statuses or invoice.status in statuses)
            ]

        async def get_by_id(invoice_id):
            return next((invoice for invoice in invoices if invoice.id == invoice_id), None)

        mock_invoice_repo.get_by_ids.side_effect = get_by_ids
        mock_invoice_repo.get_by_id.side_effect = get_by_id
        return mock_invoice_repo

    return _stock
