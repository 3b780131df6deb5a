from sqlalchemy import Column, DateTime, Numeric, String, Text, func

from paimcontab.core.database import Base


class Plan(Base):
    __tablename__ = "plans"

    # Catalog code, e.g. "essencial"
    id = Column(String(50), primary_key=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
