from sqlalchemy import Column, DateTime, ForeignKey, String, func

from paimcontab.core.database import Base
from paimcontab.models.shared import UUIDType, generate_uuid


class Company(Base):
    """An MEI company owned by an account."""

    __tablename__ = "companies"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(
        UUIDType,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    cnpj = Column(String(18), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
