"""SQLAlchemy ORM models for the finance tracker"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class FinancialProfileRecord(Base):
    """Per-owner income figures and benefit balances"""

    __tablename__ = "financial_profile"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Text, nullable=False, unique=True, index=True)
    fixed_income = Column(Float, nullable=False, default=0.0)
    variable_income_avg = Column(Float, nullable=False, default=0.0)
    # [{"type": "VR", "value": 450.0}, ...]
    benefits = Column(JSON, nullable=False, default=list)
    has_stock = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class RecurringCostRecord(Base):
    """Fixed or one-off cost definition"""

    __tablename__ = "recurring_cost"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    frequency = Column(String(16), nullable=False, default="MONTHLY")
    is_fixed = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Stored transaction; installment siblings share installment_group_id"""

    __tablename__ = "ledger_transaction"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    type = Column(String(16), nullable=False)
    category = Column(String(32), nullable=False)
    payment_method = Column(String(16), nullable=False)
    date = Column(Date, nullable=False, index=True)
    installments = Column(Integer, nullable=True)
    current_installment = Column(Integer, nullable=True)
    installment_group_id = Column(Text, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SubscriptionRecord(Base):
    __tablename__ = "subscription"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    next_due_date = Column(Date, nullable=True)


class StockItemRecord(Base):
    __tablename__ = "stock_item"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    min_quantity = Column(Float, nullable=False, default=0.0)
    cost_price = Column(Float, nullable=False, default=0.0)
    sale_price = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)
