"""
Contact form: one email to the site admin, one acknowledgement to the sender.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import HTTPException, status

from notifications.mailer import MailDeliveryError, Mailer

from . import schemas

logger = logging.getLogger(__name__)

EMAIL_UNAVAILABLE = "Email service is currently unavailable. Please try again later."
SEND_FAILED = "Error sending your message. Please try again."


async def submit(mailer: Mailer, payload: schemas.ContactRequest) -> None:
    contact = payload.model_dump()
    try:
        await asyncio.gather(
            mailer.send_contact_form_email(contact),
            mailer.send_contact_acknowledgement_email(contact),
        )
    except MailDeliveryError as exc:
        logger.error("contact_email_failed transport=%s", exc.is_transport_error)
        detail = EMAIL_UNAVAILABLE if exc.is_transport_error else SEND_FAILED
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail) from exc
    logger.info("contact_form_submitted")
