"""
Templated email delivery (Jinja2 + aiosmtplib).

A `Mailer` is built once per process in the app lifespan and injected into
handlers with `get_mailer`. Each named template in `templates/` renders into
`layout.html`.

Transport failures (bad credentials, unreachable relay) raise
`MailDeliveryError` with `is_transport_error=True` so handlers can show a
friendlier message; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path
from typing import Any

import aiosmtplib
from fastapi import Request
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from jinja2.exceptions import TemplateError
from markupsafe import Markup

from core.config import admin_email, app_name, client_url, env_bool, env_int, env_str

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (
    aiosmtplib.SMTPAuthenticationError,
    aiosmtplib.SMTPConnectError,
    aiosmtplib.SMTPConnectTimeoutError,
    aiosmtplib.SMTPServerDisconnected,
    aiosmtplib.SMTPTimeoutError,
    OSError,
)


class MailDeliveryError(RuntimeError):
    def __init__(self, message: str, *, is_transport_error: bool = False) -> None:
        super().__init__(message)
        self.is_transport_error = is_transport_error


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    username: str
    password: str
    use_tls: bool
    start_tls: bool
    timeout_s: int
    from_name: str
    from_address: str

    @classmethod
    def from_env(cls) -> "SmtpSettings":
        port = env_int("SMTP_PORT", 587)
        return cls(
            host=env_str("SMTP_HOST", "localhost"),
            port=port,
            username=env_str("SMTP_USERNAME"),
            password=env_str("SMTP_PASSWORD"),
            # 465 is implicit TLS, 587 upgrades with STARTTLS.
            use_tls=env_bool("SMTP_USE_TLS", port == 465),
            start_tls=env_bool("SMTP_START_TLS", port == 587),
            timeout_s=env_int("SMTP_TIMEOUT_S", 30),
            from_name=env_str("EMAIL_FROM_NAME", app_name()),
            from_address=env_str("EMAIL_FROM_ADDRESS", "no-reply@localhost"),
        )


class Mailer:
    def __init__(self, settings: SmtpSettings, *, template_dir: Path = TEMPLATE_DIR) -> None:
        self.settings = settings
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
        )

    def render(self, template: str, subject: str, context: dict[str, Any]) -> str:
        body = self._env.get_template(f"{template}.html").render(**context)
        layout_context = {
            "app_name": app_name(),
            "current_year": datetime.now().year,
            **context,
            "title": subject,
            "body": Markup(body),
        }
        return self._env.get_template("layout.html").render(**layout_context)

    def _build_message(self, *, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.settings.from_name, self.settings.from_address))
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    async def send_templated_email(
        self,
        *,
        to: str,
        subject: str,
        template: str,
        context: dict[str, Any],
    ) -> None:
        try:
            html = self.render(template, subject, context)
        except TemplateError as exc:
            raise MailDeliveryError(f"Email template '{template}' failed to render: {exc}") from exc

        message = self._build_message(to=to, subject=subject, html=html)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.host,
                port=self.settings.port,
                username=self.settings.username or None,
                password=self.settings.password or None,
                use_tls=self.settings.use_tls,
                start_tls=self.settings.start_tls,
                timeout=self.settings.timeout_s,
            )
        except _TRANSPORT_ERRORS as exc:
            logger.error("email_transport_failed template=%s to=%s error=%s", template, to, exc)
            raise MailDeliveryError(str(exc), is_transport_error=True) from exc
        except aiosmtplib.SMTPException as exc:
            logger.error("email_rejected template=%s to=%s error=%s", template, to, exc)
            raise MailDeliveryError(str(exc)) from exc

        logger.info("email_sent template=%s to=%s message_id=%s", template, to, message["Message-ID"])

    async def send_verification_email(self, email: str, verification_code: str) -> None:
        await self.send_templated_email(
            to=email,
            subject="Verify Your Email Address",
            template="verification",
            context={"verification_code": verification_code},
        )

    async def send_welcome_email(self, email: str) -> None:
        await self.send_templated_email(
            to=email,
            subject="Welcome to Our Platform",
            template="welcome",
            context={"login_url": f"{client_url()}/login"},
        )

    async def send_password_reset_email(self, email: str, reset_url: str) -> None:
        await self.send_templated_email(
            to=email,
            subject="Password Reset Request",
            template="password-reset",
            context={"reset_url": reset_url},
        )

    async def send_contact_form_email(self, contact: dict[str, Any]) -> None:
        await self.send_templated_email(
            to=admin_email(),
            subject="New Contact Form Submission",
            template="contact-form",
            context={
                "first_name": contact["first_name"],
                "last_name": contact["last_name"],
                "email": contact["email"],
                "phone": contact.get("phone"),
                "message": contact["message"],
                "submission_date": datetime.now().strftime("%Y-%m-%d %H:%M"),
            },
        )

    async def send_contact_acknowledgement_email(self, contact: dict[str, Any]) -> None:
        await self.send_templated_email(
            to=contact["email"],
            subject="Thank you for contacting us - Message Received",
            template="contact-acknowledgement",
            context={
                "first_name": contact["first_name"],
                "last_name": contact["last_name"],
                "support_email": admin_email(),
            },
        )

    async def send_newsletter_confirmation_email(self, email: str, first_name: str | None) -> None:
        await self.send_templated_email(
            to=email,
            subject="Newsletter Subscription Confirmed",
            template="newsletter-confirmation",
            context={
                "first_name": first_name or "Subscriber",
                "unsubscribe_url": f"{client_url()}/newsletter/unsubscribe",
            },
        )

    async def send_newsletter_issue_email(
        self, email: str, *, first_name: str | None, subject: str, content: str
    ) -> None:
        await self.send_templated_email(
            to=email,
            subject=subject,
            template="newsletter-issue",
            context={
                "first_name": first_name or "Subscriber",
                "content": content,
                "unsubscribe_url": f"{client_url()}/newsletter/unsubscribe",
            },
        )


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer
