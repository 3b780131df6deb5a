from uuid import UUID

from sqlalchemy.orm import Session

from paimcontab.models.company import Company
from paimcontab.schemas.company import CompanyCreate


class CompanyRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, company_id: UUID) -> Company | None:
        return self.db.query(Company).filter(Company.id == company_id).first()

    def create(self, data: CompanyCreate) -> Company:
        company = Company(
            account_id=data.account_id,
            name=data.name,
            cnpj=data.cnpj,
        )
        self.db.add(company)
        self.db.commit()
        self.db.refresh(company)
        return company

    def cnpj_exists(self, cnpj: str) -> bool:
        query = self.db.query(Company).filter(Company.cnpj == cnpj)
        return query.first() is not None
