from decimal import Decimal

from sqlalchemy.orm import Session

from paimcontab.models.plan import Plan


class PlanRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Plan]:
        return self.db.query(Plan).order_by(Plan.price.asc()).all()

    def get_by_id(self, plan_id: str) -> Plan | None:
        return self.db.query(Plan).filter(Plan.id == plan_id).first()

    def add(
        self,
        plan_id: str,
        name: str,
        price: Decimal,
        description: str | None = None,
    ) -> Plan:
        """Stage a new plan in the current transaction. Caller commits."""
        plan = Plan(id=plan_id, name=name, price=price, description=description)
        self.db.add(plan)
        self.db.flush()
        return plan

    def create(
        self,
        plan_id: str,
        name: str,
        price: Decimal,
        description: str | None = None,
    ) -> Plan:
        plan = self.add(plan_id, name, price, description)
        self.db.commit()
        self.db.refresh(plan)
        return plan

    def update(self, plan: Plan, name: str, price: Decimal, description: str | None) -> Plan:
        plan.name = name  # type: ignore[assignment]
        plan.price = price  # type: ignore[assignment]
        plan.description = description  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(plan)
        return plan
