"""Email service for sending back-office notifications via SMTP."""

from __future__ import annotations

import logging
from email.message import EmailMessage
from typing import TYPE_CHECKING

from paimcontab.core.config import settings
from paimcontab.repositories.account_repository import AccountRepository
from paimcontab.repositories.plan_repository import PlanRepository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from paimcontab.models.account import Account
    from paimcontab.models.plan import Plan
    from paimcontab.models.subscription import Subscription

logger = logging.getLogger(__name__)


def _format_amount(value: object) -> str:
    """Format a monetary amount to two decimal places."""
    if value is None:
        return "0.00"
    from decimal import Decimal

    return f"{Decimal(str(value)):.2f}"


def _format_date(dt: object) -> str:
    """Format a date as DD/MM/YYYY, or return empty string if None."""
    if dt is None:
        return ""
    return dt.strftime("%d/%m/%Y")  # type: ignore[attr-defined]


class EmailService:
    """Service for sending transactional emails via SMTP."""

    async def send_email(self, to: list[str], subject: str, html_body: str) -> bool:
        """Send an email via SMTP.

        Args:
            to: Recipient email addresses.
            subject: Email subject line.
            html_body: HTML content of the email.

        Returns:
            True if sent successfully (or no-op when SMTP unconfigured).
        """
        if not settings.SMTP_HOST:
            logger.info("SMTP not configured, skipping email to %s: %s", ", ".join(to), subject)
            return True

        import aiosmtplib

        msg = EmailMessage()
        msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
        msg["To"] = ", ".join(to)
        msg["Subject"] = subject
        msg.set_content("Please view this email in an HTML-capable client.")
        msg.add_alternative(html_body, subtype="html")

        await aiosmtplib.send(
            msg,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME or None,
            password=settings.SMTP_PASSWORD or None,
            start_tls=settings.SMTP_USE_TLS,
        )
        logger.info("Email sent to %s: %s", ", ".join(to), subject)
        return True

    async def send_new_subscription_email(
        self,
        subscription: Subscription,
        account: Account,
        plan: Plan,
        admin_emails: list[str],
    ) -> bool:
        """Tell the admins that an account subscribed to a plan."""
        if not admin_emails:
            logger.warning("No admin accounts, skipping subscription email for %s", subscription.id)
            return False

        html_body = (
            f"<h2>Nova Assinatura Realizada!</h2>"
            f"<p><strong>Cliente:</strong> {account.name}</p>"
            f"<p><strong>Email:</strong> {account.email}</p>"
            f"<p><strong>Plano:</strong> {plan.name}</p>"
            f"<p><strong>Valor:</strong> R$ {_format_amount(plan.price)}</p>"
            f"<p><strong>Data de Início:</strong> {_format_date(subscription.started_at)}</p>"
            f"<p><strong>Status:</strong> {'Ativo' if subscription.active else 'Inativo'}</p>"
            f"<hr><p>Acesse o painel administrativo para mais detalhes.</p>"
        )
        return await self.send_email(
            to=admin_emails,
            subject=f"Nova Assinatura - {plan.name}",
            html_body=html_body,
        )

    async def notify_admins_of_subscription(self, db: Session, subscription: Subscription) -> bool:
        """Look up the subscription's account, plan and the admins, then notify."""
        account_repo = AccountRepository(db)
        account = account_repo.get_by_id(subscription.account_id)  # type: ignore[arg-type]
        plan = PlanRepository(db).get_by_id(subscription.plan_id)  # type: ignore[arg-type]
        if account is None or plan is None:
            logger.warning("Subscription %s has no account or plan, skipping email", subscription.id)
            return False
        admin_emails = [str(admin.email) for admin in account_repo.get_admins()]
        return await self.send_new_subscription_email(subscription, account, plan, admin_emails)
