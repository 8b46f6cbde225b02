import pytest_asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import get_session
from src.domain.client import Client
from src.domain.company import Company
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_item import InvoiceItem
from src.domain.payment_method import PaymentMethod, PaymentMethodInvoice


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create an in-memory SQLite engine with a fresh schema per test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def company(db_session):
    company = Company(legal_name="Books Ltd", trading_name="Books", address="10 Ledger Lane")
    db_session.add(company)
    await db_session.commit()
    await db_session.refresh(company)
    return company


@pytest_asyncio.fixture
async def acme(db_session, company):
    acme = Client(company_id=company.id, name="Acme Ltd", email="billing@acme.test", address="1 Main St")
    db_session.add(acme)
    await db_session.commit()
    return acme


@pytest_asyncio.fixture
async def bank_transfer(db_session, company):
    method = PaymentMethod(
        company_id=company.id,
        type="bank_transfer",
        name="Main account",
        currency="USD",
        details="IBAN GB00 0000",
    )
    db_session.add(method)
    await db_session.commit()
    return method


@pytest_asyncio.fixture
def seed_invoice(db_session, company, acme):
    """Factory persisting an invoice with one line item"""

    async def _seed(
        invoice_number: str,
        status: InvoiceStatus = InvoiceStatus.DRAFT,
        notes=None,
        payment_method=None,
    ) -> Invoice:
        issue_date = datetime.utcnow().replace(microsecond=0)
        invoice = Invoice(
            invoice_number=invoice_number,
            from_company_id=company.id,
            client_id=acme.id,
            client_name=acme.name,
            client_email=acme.email,
            client_address=acme.address,
            subtotal=Decimal("100.00"),
            currency="USD",
            status=status,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=30),
            tax_rate=Decimal("10"),
            tax_amount=Decimal("10.00"),
            total_amount=Decimal("110.00"),
            notes=notes,
        )
        db_session.add(invoice)
        await db_session.flush()
        db_session.add(
            InvoiceItem(
                invoice_id=invoice.id,
                product_name="Consulting",
                description="Monthly retainer",
                quantity=Decimal("2"),
                unit_price=Decimal("50.00"),
                currency="USD",
                total=Decimal("100.00"),
            )
        )
        if payment_method is not None:
            db_session.add(
                PaymentMethodInvoice(invoice_id=invoice.id, payment_method_id=payment_method.id)
            )
        await db_session.commit()
        return invoice

    return _seed
