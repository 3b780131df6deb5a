import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from paimcontab.core.config import settings
from paimcontab.routers import (
    accounts,
    companies,
    das,
    expenses,
    payments,
    revenues,
    subscriptions,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

OPENAPI_TAGS = [
    {"name": "Accounts", "description": "Create and read user and admin accounts."},
    {"name": "Companies", "description": "Register MEI companies owned by accounts."},
    {"name": "Revenues", "description": "Record and query a company's revenues (receitas)."},
    {"name": "Expenses", "description": "Record and query a company's expenses (despesas)."},
    {"name": "DAS", "description": "Calculate, list and settle monthly DAS obligations."},
    {"name": "Payments", "description": "List plans, create checkouts and receive webhooks."},
    {"name": "Subscriptions", "description": "Back-office view of account subscriptions."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Bookkeeping API for Brazilian MEI micro-entrepreneurs. "
        "Tracks revenues and expenses, computes the monthly DAS and manages plan subscriptions."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

app.include_router(accounts.router, prefix="/v1/accounts", tags=["Accounts"])
app.include_router(companies.router, prefix="/v1/companies", tags=["Companies"])
app.include_router(revenues.router, prefix="/v1", tags=["Revenues"])
app.include_router(expenses.router, prefix="/v1", tags=["Expenses"])
app.include_router(das.router, prefix="/v1", tags=["DAS"])
app.include_router(payments.router, prefix="/v1/payments", tags=["Payments"])
app.include_router(subscriptions.router, prefix="/v1/subscriptions", tags=["Subscriptions"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
