from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    func,
    text,
)

from paimcontab.core.database import Base
from paimcontab.models.shared import UUIDType, generate_uuid


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        # At most one active row per account.
        Index(
            "uq_subscriptions_active_account",
            "account_id",
            unique=True,
            sqlite_where=text("active = 1"),
            postgresql_where=text("active"),
        ),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    account_id = Column(
        UUIDType,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    plan_id = Column(
        String(50),
        ForeignKey("plans.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    active = Column(Boolean, nullable=False, default=True)
    checkout_ref = Column(String(255), unique=True, index=True, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
