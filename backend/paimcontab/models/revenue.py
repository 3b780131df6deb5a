from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, func

from paimcontab.core.database import Base
from paimcontab.models.shared import UUIDType, generate_uuid


class RevenueStatus(str, Enum):
    RECEIVED = "received"
    PENDING = "pending"
    CANCELED = "canceled"


class Revenue(Base):
    """A revenue entry (receita) of a company."""

    __tablename__ = "revenues"

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
    client_name = Column(String(255), nullable=True)
    payment_method = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=RevenueStatus.RECEIVED.value, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
