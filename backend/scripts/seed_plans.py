"""Create or refresh the subscription plans in the configured database.

Usage: python scripts/seed_plans.py
"""

import logging

from paimcontab.core.config import settings
from paimcontab.core.database import SessionLocal, init_db
from paimcontab.services.plan_catalog import seed_plans

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db()
    db = SessionLocal()
    try:
        plans = seed_plans(db)
    finally:
        db.close()
    logger.info("Seeded %d plans", len(plans))


if __name__ == "__main__":
    main()
