from conftest import API
from notifications.mailer import MailDeliveryError

FORM = {
    "firstName": "Sara",
    "lastName": "Lind",
    "email": "sara@example.com",
    "phone": "+46 70 000 00 00",
    "message": "Is the venue accessible?",
}


def test_contact_sends_both_emails(client, mailer):
    response = client.post(f"{API}/contact", json=FORM)
    assert response.status_code == 200
    assert response.json()["message"].startswith("Dear Sara,")
    assert sorted(mailer.templates()) == ["contact-acknowledgement", "contact-form"]
    assert mailer.last("contact-acknowledgement")[0] == "sara@example.com"
    assert mailer.last("contact-form")[1]["message"] == "Is the venue accessible?"


def test_contact_missing_field(client, mailer):
    body = {key: value for key, value in FORM.items() if key != "message"}
    response = client.post(f"{API}/contact", json=body)
    assert response.status_code == 400
    assert mailer.sent == []


def test_contact_bad_email(client):
    response = client.post(f"{API}/contact", json={**FORM, "email": "sara"})
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide a valid email address"


def test_contact_transport_failure(client, mailer):
    mailer.fail_with = MailDeliveryError("connection refused", is_transport_error=True)
    response = client.post(f"{API}/contact", json=FORM)
    assert response.status_code == 500
    assert response.json()["message"] == "Email service is currently unavailable. Please try again later."
