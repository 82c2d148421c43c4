from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from auth import dependencies as auth_dependencies
from core.db import Database, get_db
from core.filters import parse_bool_param
from core.pagination import PageParams, page_params
from core.responses import ok, serialize_many
from notifications.mailer import Mailer, get_mailer

from . import schemas, service

router = APIRouter(prefix="/newsletter")


@router.post("/subscribe")
async def subscribe(
    payload: schemas.SubscribeRequest,
    response: Response,
    db: Database = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> dict:
    row, created = await service.subscribe(db, mailer, payload)
    if not created:
        return ok(message="Welcome back! Your newsletter subscription has been reactivated.")
    response.status_code = status.HTTP_201_CREATED
    return ok(
        data={"id": row["id"], "email": row["email"]},
        message="Thank you for subscribing! You will receive a confirmation email shortly.",
    )


@router.post("/unsubscribe")
async def unsubscribe(payload: schemas.UnsubscribeRequest, db: Database = Depends(get_db)) -> dict:
    await service.unsubscribe(db, payload)
    return ok(message="You have been successfully unsubscribed from our newsletter")


@router.get("/stats")
async def get_newsletter_stats(
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return ok(data=await service.stats(db))


@router.get("/subscribers")
async def get_subscribers(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    active: str | None = Query(default=None),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    rows, pagination = await service.list_subscribers(
        db,
        params,
        search=search,
        is_active=parse_bool_param(active),
    )
    return ok(
        data={"subscribers": serialize_many(rows), "pagination": pagination.to_dict()},
        message="Subscribers retrieved successfully",
    )


@router.post("/send")
async def send_newsletter(
    issue: schemas.NewsletterIssue,
    db: Database = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    result = await service.send_issue(db, mailer, issue)
    return ok(data=result, message=f"Newsletter sent to {result['sent']} subscribers")
