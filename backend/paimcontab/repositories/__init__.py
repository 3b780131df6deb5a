from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.repositories.company_repository import CompanyRepository
from paimcontab.repositories.expense_repository import ExpenseRepository
from paimcontab.repositories.plan_repository import PlanRepository
from paimcontab.repositories.revenue_repository import RevenueRepository
from paimcontab.repositories.subscription_repository import SubscriptionRepository
from paimcontab.repositories.tax_obligation_repository import TaxObligationRepository

__all__ = [
    "AccountRepository",
    "CompanyRepository",
    "ExpenseRepository",
    "PlanRepository",
    "RevenueRepository",
    "SubscriptionRepository",
    "TaxObligationRepository",
]
