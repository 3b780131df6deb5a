from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from paimcontab.models.account import AccountRole


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    role: AccountRole = AccountRole.USER


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: AccountRole
    created_at: datetime
