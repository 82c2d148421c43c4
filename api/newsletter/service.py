"""
Newsletter subscriptions and bulk sends.

A bulk send walks the active subscribers in id order, one page of
`NEWSLETTER_BATCH_SIZE` at a time, and mails every subscriber of a page
concurrently. It stops after the first page that comes back short.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import HTTPException, status

from core import crud
from core.config import env_int
from core.db import Database, UniqueViolation
from core.filters import WhereBuilder
from core.pagination import PageParams, Pagination
from notifications.mailer import MailDeliveryError, Mailer

from . import schemas
from .repository import SUBSCRIBERS, active_after, active_since, admin_filter, get_by_email

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
RECENT_WINDOW = timedelta(days=30)

ALREADY_SUBSCRIBED = "This email is already subscribed to our newsletter"
CONFIRMATION_FAILED = "Subscription saved but confirmation email could not be sent. Please contact support."


def batch_size() -> int:
    return max(1, env_int("NEWSLETTER_BATCH_SIZE", DEFAULT_BATCH_SIZE))


async def _send_confirmation(mailer: Mailer, email: str, first_name: str | None) -> None:
    try:
        await mailer.send_newsletter_confirmation_email(email, first_name)
    except MailDeliveryError as exc:
        detail = CONFIRMATION_FAILED if exc.is_transport_error else "Error processing your subscription. Please try again."
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail) from exc


async def subscribe(db: Database, mailer: Mailer, payload: schemas.SubscribeRequest) -> tuple[dict[str, Any], bool]:
    """
    Returns `(subscriber, created)`. An inactive subscriber is reactivated;
    supplied names replace the stored ones, missing ones keep them.
    """
    existing = await get_by_email(db, payload.email)
    if existing is not None and existing["is_active"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_SUBSCRIBED)

    if existing is not None:
        row = await crud.update(
            db,
            SUBSCRIBERS,
            int(existing["id"]),
            {
                "is_active": True,
                "first_name": payload.first_name or existing["first_name"],
                "last_name": payload.last_name or existing["last_name"],
                "country_code": payload.country_code or existing["country_code"],
            },
        )
        if row is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=SUBSCRIBERS.not_found)
        logger.info("newsletter_reactivated subscriber_id=%s", row["id"])
        await _send_confirmation(mailer, row["email"], row["first_name"])
        return row, False

    try:
        row = await crud.insert(
            db,
            SUBSCRIBERS,
            {
                "email": payload.email,
                "first_name": payload.first_name or None,
                "last_name": payload.last_name or None,
                "country_code": payload.country_code or None,
            },
        )
    except UniqueViolation as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_SUBSCRIBED) from exc

    logger.info("newsletter_subscribed subscriber_id=%s", row["id"])
    await _send_confirmation(mailer, row["email"], row["first_name"])
    return row, True


async def unsubscribe(db: Database, payload: schemas.UnsubscribeRequest) -> dict[str, Any]:
    existing = await get_by_email(db, payload.email)
    if existing is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Email address not found in our newsletter list",
        )
    if not existing["is_active"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This email is already unsubscribed")

    row = await crud.update_or_404(db, SUBSCRIBERS, int(existing["id"]), {"is_active": False})
    logger.info("newsletter_unsubscribed subscriber_id=%s", row["id"])
    return row


async def stats(db: Database, *, now: datetime | None = None) -> dict[str, int]:
    now = now or datetime.now(timezone.utc)
    total, active, recent = await asyncio.gather(
        crud.count(db, SUBSCRIBERS, WhereBuilder()),
        crud.count(db, SUBSCRIBERS, WhereBuilder().equals("is_active", True)),
        crud.count(db, SUBSCRIBERS, active_since(now - RECENT_WINDOW)),
    )
    return {
        "totalSubscribers": total,
        "activeSubscribers": active,
        "inactiveSubscribers": total - active,
        "recentSubscribers": recent,
    }


async def list_subscribers(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    is_active: bool | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = admin_filter(search=search, is_active=is_active)
    return await crud.list_page(db, SUBSCRIBERS, where, params=params, order_by=SUBSCRIBERS.order_by())


async def send_issue(
    db: Database,
    mailer: Mailer,
    issue: schemas.NewsletterIssue,
    *,
    size: int | None = None,
) -> dict[str, int]:
    size = size or batch_size()
    sent = 0
    batches = 0
    last_id = 0

    while True:
        page = await crud.list_all(
            db,
            SUBSCRIBERS,
            active_after(last_id),
            order_by=SUBSCRIBERS.order_by("id", "asc"),
            limit=size,
        )
        if not page:
            break

        try:
            await asyncio.gather(
                *(
                    mailer.send_newsletter_issue_email(
                        row["email"],
                        first_name=row["first_name"],
                        subject=issue.subject,
                        content=issue.content,
                    )
                    for row in page
                )
            )
        except MailDeliveryError as exc:
            logger.error("newsletter_batch_failed page=%s sent=%s", batches + 1, sent)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error sending newsletter. Please try again.",
            ) from exc

        batches += 1
        sent += len(page)
        last_id = int(page[-1]["id"])
        logger.info("newsletter_batch_sent page=%s count=%s", batches, len(page))

        if len(page) < size:
            break

    return {"sent": sent, "batches": batches}
