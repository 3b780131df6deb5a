from enum import Enum

from sqlalchemy import Column, DateTime, String, func

from paimcontab.core.database import Base
from paimcontab.models.shared import UUIDType, generate_uuid


class AccountRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Account(Base):
    __tablename__ = "accounts"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False, default=AccountRole.USER.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
