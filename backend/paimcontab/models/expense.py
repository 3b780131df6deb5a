from enum import Enum

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Numeric, String, func

from paimcontab.core.database import Base
from paimcontab.models.shared import UUIDType, generate_uuid


class ExpenseStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    CANCELED = "canceled"


class PaymentMethod(str, Enum):
    PIX = "PIX"
    CASH = "Dinheiro"
    DEBIT_CARD = "Cartão Débito"
    CREDIT_CARD = "Cartão Crédito"
    BANK_TRANSFER = "Transferência"
    BOLETO = "Boleto"


class Expense(Base):
    """An expense entry (despesa) of a company."""

    __tablename__ = "expenses"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    description = Column(String(255), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    category = Column(String(100), nullable=False)
    supplier = Column(String(255), nullable=True)
    invoice_number = Column(String(100), nullable=True)
    payment_method = Column(String(50), nullable=False, default=PaymentMethod.PIX.value)
    status = Column(String(20), nullable=False, default=ExpenseStatus.PAID.value, index=True)
    is_deductible = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
