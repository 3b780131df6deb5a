"""Monthly DAS obligation of a company."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
    func,
)

from paimcontab.core.database import Base
from paimcontab.models.shared import UUIDType, generate_uuid


class TaxObligation(Base):
    __tablename__ = "tax_obligations"
    __table_args__ = (
        UniqueConstraint("company_id", "period", name="uq_tax_obligation_company_period"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # Competência as "YYYY-MM"
    period = Column(String(7), nullable=False, index=True)
    gross_revenue = Column(Numeric(12, 2), nullable=False)
    tax_amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
