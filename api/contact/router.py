from __future__ import annotations

from fastapi import APIRouter, Depends

from core.responses import ok
from notifications.mailer import Mailer, get_mailer

from . import schemas, service

router = APIRouter()


@router.post("/contact")
async def submit_contact_form(payload: schemas.ContactRequest, mailer: Mailer = Depends(get_mailer)) -> dict:
    await service.submit(mailer, payload)
    return ok(
        message=(
            f"Dear {payload.first_name}, Your message has been sent successfully. "
            "You will receive a confirmation email shortly."
        )
    )
