from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CompanyCreate(BaseModel):
    account_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    cnpj: str | None = Field(default=None, max_length=18)


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    account_id: UUID
    name: str
    cnpj: str | None = None
    created_at: datetime
