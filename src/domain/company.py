"""Company Domain Entity

Issuing company (tenant) that owns invoices, clients and payment methods.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import DateTime, Integer, String, Text
from src.domain.base import BaseModel


class Company(BaseModel, table=True):
    """Company - Issuer of invoices"""

    __tablename__ = "companies"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
        description="Unique company identifier (auto-increment)"
    )

    legal_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Registered legal name"
    )

    trading_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Trading name shown on invoices"
    )

    base_currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
        description="Base currency code (ISO 4217)"
    )

    address: str = Field(
        default="",
        sa_column=Column(Text, nullable=False),
        description="Registered address"
    )

    email: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False),
        description="Contact email"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )
