import asyncio

import aiosmtplib
import pytest
from jinja2.exceptions import UndefinedError

from notifications.mailer import MailDeliveryError, Mailer, SmtpSettings


def _settings(**overrides):
    values = dict(
        host="smtp.test",
        port=587,
        username="user",
        password="secret",
        use_tls=False,
        start_tls=True,
        timeout_s=5,
        from_name="Alenalki",
        from_address="no-reply@alenalki.test",
    )
    values.update(overrides)
    return SmtpSettings(**values)


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    async def fake_send(message, **kwargs):
        sent.append((message, kwargs))

    monkeypatch.setattr(aiosmtplib, "send", fake_send)
    return sent


def test_render_wraps_template_in_layout():
    html = Mailer(_settings()).render("verification", "Verify Your Email Address", {"verification_code": "482913"})
    assert "482913" in html
    assert "Verify Your Email Address" in html
    assert "<html" in html.lower()


def test_render_escapes_user_content():
    html = Mailer(_settings()).render(
        "contact-acknowledgement",
        "Thanks",
        {"first_name": "<script>x</script>", "last_name": "L", "support_email": "info@example.com"},
    )
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html


def test_render_missing_variable_is_an_error():
    with pytest.raises(UndefinedError):
        Mailer(_settings()).render("verification", "Verify", {})


def test_send_builds_html_message(outbox, monkeypatch):
    monkeypatch.setenv("CLIENT_URL", "https://alenalki.test")
    asyncio.run(Mailer(_settings()).send_welcome_email("new@example.com"))

    message, kwargs = outbox[0]
    assert message["To"] == "new@example.com"
    assert message["Subject"] == "Welcome to Our Platform"
    assert kwargs["hostname"] == "smtp.test"
    assert kwargs["start_tls"] is True
    html = message.get_body(preferencelist=("html",)).get_content()
    assert "https://alenalki.test/login" in html


def test_every_sender_renders(outbox):
    mailer = Mailer(_settings())
    contact = {
        "first_name": "Sara",
        "last_name": "Lind",
        "email": "sara@example.com",
        "phone": None,
        "message": "Hello",
    }

    async def send_all():
        await mailer.send_verification_email("a@example.com", "123456")
        await mailer.send_password_reset_email("a@example.com", "https://x.test/reset-password/abc")
        await mailer.send_contact_form_email(contact)
        await mailer.send_contact_acknowledgement_email(contact)
        await mailer.send_newsletter_confirmation_email("a@example.com", None)
        await mailer.send_newsletter_issue_email("a@example.com", first_name="A", subject="News", content="Body")

    asyncio.run(send_all())
    assert len(outbox) == 6


def test_transport_errors_are_flagged(monkeypatch):
    async def refuse(message, **kwargs):
        raise aiosmtplib.SMTPConnectError("connection refused")

    monkeypatch.setattr(aiosmtplib, "send", refuse)
    with pytest.raises(MailDeliveryError) as excinfo:
        asyncio.run(Mailer(_settings()).send_welcome_email("a@example.com"))
    assert excinfo.value.is_transport_error is True


def test_rejected_recipient_is_not_a_transport_error(monkeypatch):
    async def reject(message, **kwargs):
        raise aiosmtplib.SMTPRecipientsRefused([])

    monkeypatch.setattr(aiosmtplib, "send", reject)
    with pytest.raises(MailDeliveryError) as excinfo:
        asyncio.run(Mailer(_settings()).send_welcome_email("a@example.com"))
    assert excinfo.value.is_transport_error is False


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SMTP_HOST", "mail.example.com")
    monkeypatch.setenv("SMTP_PORT", "465")
    settings = SmtpSettings.from_env()
    assert settings.host == "mail.example.com"
    assert settings.use_tls is True
    assert settings.start_tls is False
