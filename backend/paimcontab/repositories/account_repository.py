from uuid import UUID

from sqlalchemy.orm import Session

from paimcontab.models.account import Account, AccountRole
from paimcontab.schemas.account import AccountCreate


class AccountRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, account_id: UUID, for_update: bool = False) -> Account | None:
        query = self.db.query(Account).filter(Account.id == account_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_by_email(self, email: str, for_update: bool = False) -> Account | None:
        query = self.db.query(Account).filter(Account.email == email.strip().lower())
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_admins(self) -> list[Account]:
        return (
            self.db.query(Account)
            .filter(Account.role == AccountRole.ADMIN.value)
            .order_by(Account.created_at)
            .all()
        )

    def create(self, data: AccountCreate) -> Account:
        account = Account(
            name=data.name,
            email=data.email.strip().lower(),
            role=data.role.value,
        )
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        return account

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None
