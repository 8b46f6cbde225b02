"""Client Domain Entity

Customer billed by a company. Invoices keep a denormalized copy of the
client's name, email and address.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, String, Text
from src.domain.base import BaseModel, generate_uuid


class Client(BaseModel, table=True):
    """Client - Invoice recipient"""

    __tablename__ = "clients"
    __table_args__ = (
        Index('ix_clients_company_id', 'company_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique client identifier (UUID)"
    )

    company_id: Optional[int] = Field(
        default=None,
        description="Owning company ID"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Client name"
    )

    email: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Billing email"
    )

    address: str = Field(
        default="",
        sa_column=Column(Text, nullable=False),
        description="Billing address"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )
