"""Tests for TaxObligationService (DAS lifecycle)."""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest

from paimcontab.core.exceptions import (
    AlreadyPaidError,
    InvalidInputError,
    NotFoundError,
    StorageConflictError,
)
from paimcontab.models.revenue import RevenueStatus
from paimcontab.models.tax_obligation import TaxObligation
from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.repositories.company_repository import CompanyRepository
from paimcontab.repositories.revenue_repository import RevenueRepository
from paimcontab.repositories.tax_obligation_repository import TaxObligationRepository
from paimcontab.schemas.account import AccountCreate
from paimcontab.schemas.company import CompanyCreate
from paimcontab.schemas.revenue import RevenueCreate
from paimcontab.services.tax_obligation_service import TaxObligationService


@pytest.fixture
def service(db_session):
    return TaxObligationService(db_session)


@pytest.fixture
def company(db_session):
    account = AccountRepository(db_session).create(
        AccountCreate(name="Maria MEI", email="maria@example.com")
    )
    return CompanyRepository(db_session).create(
        CompanyCreate(account_id=account.id, name="Maria Doces", cnpj="12.345.678/0001-90")
    )


def _add_revenue(db_session, company, value, on, status=RevenueStatus.RECEIVED):
    return RevenueRepository(db_session).create(
        company.id,
        RevenueCreate(
            description="Venda",
            value=Decimal(value),
            date=on,
            category="vendas",
            status=status,
        ),
    )


def _count(db_session, company):
    return db_session.query(TaxObligation).filter(TaxObligation.company_id == company.id).count()


class TestUpsertObligation:
    def test_creates_obligation(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("5000"))

        assert obligation.period == "2024-03"
        assert obligation.gross_revenue == Decimal("5000.00")
        assert obligation.tax_amount == Decimal("300.00")
        assert obligation.due_date == date(2024, 4, 20)
        assert obligation.paid is False
        assert obligation.paid_at is None

    def test_recomputes_unpaid_in_place(self, db_session, service, company):
        first = service.upsert_obligation(company.id, "2024-03", Decimal("5000"))
        second = service.upsert_obligation(company.id, "2024-03", Decimal("8000"))

        assert second.id == first.id
        assert second.gross_revenue == Decimal("8000.00")
        assert second.tax_amount == Decimal("480.00")
        assert _count(db_session, company) == 1

    def test_identical_upserts_are_idempotent(self, db_session, service, company):
        first = service.upsert_obligation(company.id, "2024-03", Decimal("2000"))
        snapshot = (first.id, first.gross_revenue, first.tax_amount, first.due_date, first.paid)

        second = service.upsert_obligation(company.id, "2024-03", Decimal("2000"))

        assert (second.id, second.gross_revenue, second.tax_amount, second.due_date, second.paid) == (
            snapshot
        )
        assert _count(db_session, company) == 1

    def test_paid_obligation_is_not_recomputed(self, db_session, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("5000"))
        service.mark_paid(obligation.id)

        result = service.upsert_obligation(company.id, "2024-03", Decimal("9000"))

        assert result.id == obligation.id
        assert result.paid is True
        assert result.gross_revenue == Decimal("5000.00")
        assert result.tax_amount == Decimal("300.00")
        assert _count(db_session, company) == 1

    def test_negative_revenue_writes_nothing(self, db_session, service, company):
        with pytest.raises(InvalidInputError):
            service.upsert_obligation(company.id, "2024-03", Decimal("-1"))
        assert _count(db_session, company) == 0

    def test_invalid_period(self, service, company):
        with pytest.raises(InvalidInputError):
            service.upsert_obligation(company.id, "2024-13", Decimal("100"))

    def test_unknown_company(self, service):
        with pytest.raises(NotFoundError):
            service.upsert_obligation(uuid4(), "2024-03", Decimal("100"))

    def test_periods_are_independent(self, db_session, service, company):
        service.upsert_obligation(company.id, "2024-03", Decimal("100"))
        service.upsert_obligation(company.id, "2024-04", Decimal("100"))
        assert _count(db_session, company) == 2


class TestCalculateForMonth:
    def test_sums_received_revenue_of_the_month(self, db_session, service, company):
        _add_revenue(db_session, company, "1000", date(2024, 3, 1))
        _add_revenue(db_session, company, "2000", date(2024, 3, 31))
        _add_revenue(db_session, company, "500", date(2024, 3, 10), RevenueStatus.PENDING)
        _add_revenue(db_session, company, "700", date(2024, 3, 11), RevenueStatus.CANCELED)
        _add_revenue(db_session, company, "9000", date(2024, 4, 1))

        obligation = service.calculate_for_month(company.id, "2024-03")

        assert obligation.gross_revenue == Decimal("3000.00")
        assert obligation.tax_amount == Decimal("180.00")

    def test_custom_revenue_overrides_sum(self, db_session, service, company):
        _add_revenue(db_session, company, "1000", date(2024, 3, 1))

        obligation = service.calculate_for_month(company.id, "2024-03", Decimal("2000"))

        assert obligation.gross_revenue == Decimal("2000.00")
        assert obligation.tax_amount == Decimal("120.00")

    def test_month_without_revenue_pays_minimum(self, service, company):
        obligation = service.calculate_for_month(company.id, "2024-05")
        assert obligation.gross_revenue == Decimal("0.00")
        assert obligation.tax_amount == Decimal("66.60")

    def test_unknown_company(self, service):
        with pytest.raises(NotFoundError):
            service.calculate_for_month(uuid4(), "2024-03")


class TestAutoCalculate:
    def test_one_obligation_per_month_with_revenue(self, db_session, service, company):
        _add_revenue(db_session, company, "1000", date(2024, 1, 5))
        _add_revenue(db_session, company, "4000", date(2024, 3, 5))
        _add_revenue(db_session, company, "1000", date(2023, 12, 5))

        results = service.auto_calculate(company.id, 2024)

        assert [o.period for o in results] == ["2024-01", "2024-03"]
        assert results[1].tax_amount == Decimal("240.00")
        assert _count(db_session, company) == 2

    def test_paid_months_keep_their_values(self, db_session, service, company):
        january = service.upsert_obligation(company.id, "2024-01", Decimal("1000"))
        service.mark_paid(january.id)
        _add_revenue(db_session, company, "8000", date(2024, 1, 5))

        results = service.auto_calculate(company.id, 2024)

        assert len(results) == 1
        assert results[0].paid is True
        assert results[0].gross_revenue == Decimal("1000.00")

    def test_no_revenue(self, service, company):
        assert service.auto_calculate(company.id, 2024) == []


class TestMarkPaid:
    def test_marks_paid(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("100"))

        result = service.mark_paid(obligation.id)

        assert result.paid is True
        assert result.paid_at is not None

    def test_uses_payment_date(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("100"))

        result = service.mark_paid(obligation.id, datetime(2024, 4, 18, 10, 0))

        assert result.paid_at.replace(tzinfo=None) == datetime(2024, 4, 18, 10, 0)

    def test_double_payment_rejected(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("100"))
        first = service.mark_paid(obligation.id, datetime(2024, 4, 18, 10, 0))
        paid_at = first.paid_at

        with pytest.raises(AlreadyPaidError):
            service.mark_paid(obligation.id)

        assert service.get_obligation(obligation.id).paid_at == paid_at

    def test_unknown_obligation(self, service):
        with pytest.raises(NotFoundError):
            service.mark_paid(uuid4())


class TestMarkPending:
    def test_reverses_payment(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("100"))
        service.mark_paid(obligation.id)

        result = service.mark_pending(obligation.id)

        assert result.paid is False
        assert result.paid_at is None

    def test_idempotent(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("100"))
        assert service.mark_pending(obligation.id).paid is False
        assert service.mark_pending(obligation.id).paid is False

    def test_can_pay_again_after_pending(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("100"))
        service.mark_paid(obligation.id)
        service.mark_pending(obligation.id)
        assert service.mark_paid(obligation.id).paid is True

    def test_pending_obligation_is_recomputed_again(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("1000"))
        service.mark_paid(obligation.id)
        service.mark_pending(obligation.id)

        result = service.upsert_obligation(company.id, "2024-03", Decimal("5000"))

        assert result.tax_amount == Decimal("300.00")

    def test_unknown_obligation(self, service):
        with pytest.raises(NotFoundError):
            service.mark_pending(uuid4())


class TestListAndStats:
    def test_list_filters(self, service, company):
        for period in ("2023-12", "2024-01", "2024-02"):
            service.upsert_obligation(company.id, period, Decimal("100"))
        paid = service.upsert_obligation(company.id, "2024-03", Decimal("100"))
        service.mark_paid(paid.id)

        items, total = service.list_obligations(company.id, year=2024)
        assert total == 3
        assert [o.period for o in items] == ["2024-03", "2024-02", "2024-01"]

        items, total = service.list_obligations(company.id, year=2024, paid=False)
        assert total == 2

        items, total = service.list_obligations(company.id, skip=1, limit=2)
        assert total == 4
        assert len(items) == 2

    def test_get_obligation_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.get_obligation(uuid4())

    def test_stats(self, service, company):
        january = service.upsert_obligation(company.id, "2024-01", Decimal("5000"))
        service.upsert_obligation(company.id, "2024-02", Decimal("1000"))
        service.upsert_obligation(company.id, "2024-03", Decimal("2000"))
        service.mark_paid(january.id)

        stats = service.get_stats(company.id, 2024, today=date(2024, 4, 1))

        assert stats.year == 2024
        assert stats.totals.overall.count == 3
        assert stats.totals.overall.tax_amount == Decimal("486.60")
        assert stats.totals.overall.gross_revenue == Decimal("8000.00")
        assert stats.totals.paid.count == 1
        assert stats.totals.paid.tax_amount == Decimal("300.00")
        assert stats.totals.pending.count == 2
        # February is due 2024-03-20, March on 2024-04-20
        assert stats.alerts.overdue.count == 1
        assert stats.alerts.overdue.tax_amount == Decimal("66.60")
        assert stats.alerts.due_soon.count == 1
        assert stats.alerts.due_soon.tax_amount == Decimal("120.00")
        assert [m.period for m in stats.by_month] == ["2024-01", "2024-02", "2024-03"]

    def test_stats_empty_year(self, service, company):
        stats = service.get_stats(company.id, 2020, today=date(2024, 4, 1))
        assert stats.totals.overall.count == 0
        assert stats.totals.overall.tax_amount == Decimal("0")
        assert stats.by_month == []


class TestOversizedRevenue:
    def test_rejected_before_write(self, db_session, service, company):
        with pytest.raises(InvalidInputError):
            service.upsert_obligation(company.id, "2024-03", Decimal("1e10"))
        assert _count(db_session, company) == 0

    def test_largest_storable_revenue(self, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("9999999999.99"))
        assert obligation.tax_amount == Decimal("600000000.00")


class TestConcurrentWrites:
    def test_recompute_loses_to_concurrent_settlement(self, db_session, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("1000"))

        # The compare-and-swap finds the row no longer unpaid.
        with patch.object(TaxObligationRepository, "update_unpaid", return_value=False):
            result = service.upsert_obligation(company.id, "2024-03", Decimal("9000"))

        assert result.id == obligation.id
        db_session.expire_all()
        stored = service.get_obligation(obligation.id)
        assert stored.gross_revenue == Decimal("1000.00")
        assert stored.tax_amount == Decimal("66.60")
        assert _count(db_session, company) == 1

    def test_settlement_loses_to_concurrent_settlement(self, db_session, service, company):
        obligation = service.upsert_obligation(company.id, "2024-03", Decimal("1000"))

        with (
            patch.object(TaxObligationRepository, "set_paid", return_value=False),
            pytest.raises(AlreadyPaidError),
        ):
            service.mark_paid(obligation.id)

        db_session.expire_all()
        stored = service.get_obligation(obligation.id)
        assert stored.paid is False
        assert stored.paid_at is None

    def test_concurrent_first_insert_is_a_storage_conflict(self, db_session, service, company):
        existing = service.upsert_obligation(company.id, "2024-03", Decimal("1000"))

        # The lookup misses the row another request just created, so the insert
        # hits the (company_id, period) unique key.
        with (
            patch.object(TaxObligationRepository, "get_by_company_period", return_value=None),
            pytest.raises(StorageConflictError),
        ):
            service.upsert_obligation(company.id, "2024-03", Decimal("5000"))

        db_session.expire_all()
        assert _count(db_session, company) == 1
        stored = service.get_obligation(existing.id)
        assert stored.gross_revenue == Decimal("1000.00")
