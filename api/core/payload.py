"""
Request body helpers for endpoints that accept either JSON or a multipart
form carrying an optional file.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status
from starlette.datastructures import UploadFile


async def read_body(request: Request, *, file_field: str | None = None) -> tuple[dict[str, Any], UploadFile | None]:
    """
    Return `(fields, file)`. JSON bodies never carry a file.
    """
    content_type = (request.headers.get("content-type") or "").lower()

    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body.") from exc
        if not isinstance(data, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request JSON payload must be an object.",
            )
        return data, None

    form = await request.form()
    fields: dict[str, Any] = {}
    upload: UploadFile | None = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == file_field:
                upload = value
            continue
        fields[key] = value
    return fields, upload
