from paimcontab.models.account import Account, AccountRole
from paimcontab.models.company import Company
from paimcontab.models.expense import Expense, ExpenseStatus, PaymentMethod
from paimcontab.models.plan import Plan
from paimcontab.models.revenue import Revenue, RevenueStatus
from paimcontab.models.subscription import Subscription
from paimcontab.models.tax_obligation import TaxObligation

__all__ = [
    "Account",
    "AccountRole",
    "Company",
    "Expense",
    "ExpenseStatus",
    "PaymentMethod",
    "Plan",
    "Revenue",
    "RevenueStatus",
    "Subscription",
    "TaxObligation",
]
