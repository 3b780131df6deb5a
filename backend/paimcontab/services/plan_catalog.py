"""Static catalog of purchasable subscription plans."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from paimcontab.models.plan import Plan
from paimcontab.repositories.plan_repository import PlanRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogPlan:
    id: str
    name: str
    price: Decimal
    description: str


PLAN_CATALOG: dict[str, CatalogPlan] = {
    plan.id: plan
    for plan in (
        CatalogPlan(
            id="essencial",
            name="Essencial",
            price=Decimal("19.00"),
            description="O básico para começar a organizar seu MEI com autonomia.",
        ),
        CatalogPlan(
            id="profissional",
            name="Profissional",
            price=Decimal("39.00"),
            description="Automação, controle avançado e suporte personalizado para crescer.",
        ),
        CatalogPlan(
            id="premium",
            name="Premium",
            price=Decimal("69.00"),
            description="Solução completa e personalizada, com mentoria e relatórios sob medida.",
        ),
    )
}


def get_catalog_plan(plan_id: str) -> CatalogPlan | None:
    return PLAN_CATALOG.get(plan_id)


def seed_plans(db: Session) -> list[Plan]:
    """Insert or refresh every catalog plan. Existing subscriptions keep their plan ids."""
    repo = PlanRepository(db)
    plans: list[Plan] = []
    for entry in PLAN_CATALOG.values():
        plan = repo.get_by_id(entry.id)
        if plan is None:
            plan = repo.create(entry.id, entry.name, entry.price, entry.description)
            logger.info("Created plan %s (R$ %s)", plan.name, plan.price)
        else:
            plan = repo.update(plan, entry.name, entry.price, entry.description)
            logger.info("Updated plan %s (R$ %s)", plan.name, plan.price)
        plans.append(plan)
    return plans
