"""Payment Method Domain Entities

Payment methods (bank transfer, card, crypto wallet...) a company accepts,
and their association with invoices.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from src.domain.base import BaseModel, generate_uuid


class PaymentMethod(BaseModel, table=True):
    """PaymentMethod - Way a company accepts payment"""

    __tablename__ = "payment_methods"
    __table_args__ = (
        Index('ix_payment_methods_company_id', 'company_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique payment method identifier (UUID)"
    )

    company_id: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Owning company ID"
    )

    type: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Payment method type (e.g., BANK, CARD, CRYPTO)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(10), nullable=False),
        description="Currency accepted"
    )

    details: str = Field(
        default="",
        sa_column=Column(Text, nullable=False),
        description="Free-form payment instructions (IBAN, wallet address...)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )


class PaymentMethodInvoice(BaseModel, table=True):
    """PaymentMethodInvoice - Link between an invoice and an accepted payment method"""

    __tablename__ = "payment_method_invoices"
    __table_args__ = (
        Index('ix_payment_method_invoices_invoice_id', 'invoice_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique link identifier (UUID)"
    )

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    payment_method_id: str = Field(
        sa_column=Column(String(36), nullable=False),
        description="Payment method ID"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )
