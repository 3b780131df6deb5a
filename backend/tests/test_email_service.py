"""Tests for EmailService: composition, SMTP sending and no-op behavior."""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from paimcontab.models.account import AccountRole
from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.schemas.account import AccountCreate
from paimcontab.services.email_service import EmailService, _format_amount, _format_date
from paimcontab.services.plan_catalog import seed_plans
from paimcontab.services.subscription_reconciler import SubscriptionReconciler


def _make_account(**overrides):  # type: ignore[no-untyped-def]
    defaults = {"name": "Pedro MEI", "email": "pedro@example.com"}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_plan(**overrides):  # type: ignore[no-untyped-def]
    defaults = {"name": "Profissional", "price": Decimal("39.00")}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_subscription(**overrides):  # type: ignore[no-untyped-def]
    defaults = {"id": "sub-001", "started_at": datetime(2024, 3, 5, 9, 30), "active": True}
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


class TestFormatHelpers:
    def test_amount_none(self) -> None:
        assert _format_amount(None) == "0.00"

    def test_amount_decimal(self) -> None:
        assert _format_amount(Decimal("19")) == "19.00"

    def test_date_none(self) -> None:
        assert _format_date(None) == ""

    def test_date(self) -> None:
        assert _format_date(datetime(2024, 3, 5)) == "05/03/2024"


class TestSendEmail:
    @pytest.mark.asyncio
    async def test_noop_when_smtp_unconfigured(self) -> None:
        mock_send = AsyncMock()
        with (
            patch("paimcontab.services.email_service.settings") as mock_settings,
            patch("aiosmtplib.send", mock_send),
        ):
            mock_settings.SMTP_HOST = ""
            result = await EmailService().send_email(
                to=["admin@example.com"], subject="Test", html_body="<p>Olá</p>"
            )
        assert result is True
        mock_send.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_via_smtp(self) -> None:
        mock_send = AsyncMock()
        with (
            patch("paimcontab.services.email_service.settings") as mock_settings,
            patch("aiosmtplib.send", mock_send),
        ):
            mock_settings.SMTP_HOST = "smtp.example.com"
            mock_settings.SMTP_PORT = 587
            mock_settings.SMTP_USERNAME = ""
            mock_settings.SMTP_PASSWORD = ""
            mock_settings.SMTP_FROM_EMAIL = "noreply@example.com"
            mock_settings.SMTP_FROM_NAME = "PaimContab"
            mock_settings.SMTP_USE_TLS = True

            result = await EmailService().send_email(
                to=["a@example.com", "b@example.com"], subject="Assunto", html_body="<p>Oi</p>"
            )

        assert result is True
        mock_send.assert_awaited_once()
        msg = mock_send.call_args[0][0]
        assert msg["To"] == "a@example.com, b@example.com"
        kwargs = mock_send.call_args[1]
        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["username"] is None
        assert kwargs["password"] is None
        assert kwargs["start_tls"] is True


class TestNewSubscriptionEmail:
    @pytest.mark.asyncio
    async def test_composes_message(self) -> None:
        service = EmailService()
        with patch.object(service, "send_email", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = True
            result = await service.send_new_subscription_email(
                _make_subscription(), _make_account(), _make_plan(), ["admin@example.com"]
            )

        assert result is True
        kwargs = mock_send.call_args[1]
        assert kwargs["to"] == ["admin@example.com"]
        assert kwargs["subject"] == "Nova Assinatura - Profissional"
        assert "Pedro MEI" in kwargs["html_body"]
        assert "R$ 39.00" in kwargs["html_body"]
        assert "05/03/2024" in kwargs["html_body"]
        assert "Ativo" in kwargs["html_body"]

    @pytest.mark.asyncio
    async def test_skipped_without_admins(self) -> None:
        service = EmailService()
        with patch.object(service, "send_email", new_callable=AsyncMock) as mock_send:
            result = await service.send_new_subscription_email(
                _make_subscription(), _make_account(), _make_plan(), []
            )
        assert result is False
        mock_send.assert_not_called()

    @pytest.mark.asyncio
    async def test_notify_admins(self, db_session) -> None:
        repo = AccountRepository(db_session)
        repo.create(AccountCreate(name="Admin", email="admin@example.com", role=AccountRole.ADMIN))
        customer = repo.create(AccountCreate(name="Pedro MEI", email="pedro@example.com"))
        seed_plans(db_session)
        subscription = SubscriptionReconciler(db_session).confirm_payment(
            customer.id, "premium", "cs_1"
        )

        service = EmailService()
        with patch.object(service, "send_email", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = True
            assert await service.notify_admins_of_subscription(db_session, subscription) is True

        kwargs = mock_send.call_args[1]
        assert kwargs["to"] == ["admin@example.com"]
        assert kwargs["subject"] == "Nova Assinatura - Premium"
