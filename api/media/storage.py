"""
Object storage for uploaded media (S3-compatible, boto3).

Files arrive as in-memory buffers from multipart uploads and are written with
`put_object`; the returned URL is what gets stored on the entity. The boto3
client is synchronous, so uploads run in the threadpool.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from core.config import env_int, env_str

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB

KIND_IMAGE = "image"
KIND_PDF = "pdf"

# kind -> (folder, default extension, default content type)
_KINDS = {
    KIND_IMAGE: ("news_images", "", "application/octet-stream"),
    KIND_PDF: ("blog_pdfs", ".pdf", "application/pdf"),
}

logger = logging.getLogger(__name__)


class MediaUploadError(RuntimeError):
    pass


def max_upload_bytes() -> int:
    return env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)


async def read_upload(file: UploadFile, max_bytes: int | None = None) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    limit = max_bytes if max_bytes is not None else max_upload_bytes()
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > limit:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {limit} bytes.",
            )

    return bytes(buf)


def object_key(kind: str, filename: str | None = None) -> str:
    if kind not in _KINDS:
        raise MediaUploadError(f"Unsupported media kind '{kind}'.")
    folder, default_ext, _ = _KINDS[kind]
    ext = ""
    if filename and "." in filename:
        ext = "." + filename.rsplit(".", 1)[1].lower()
    return f"{folder}/{uuid.uuid4().hex}{ext or default_ext}"


@dataclass
class ObjectStorage:
    bucket: str
    region: str | None = None
    endpoint_url: str | None = None
    public_base_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None

    def __post_init__(self):
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=Config(signature_version="s3v4"),
        )

    @classmethod
    def from_env(cls) -> "ObjectStorage":
        return cls(
            bucket=env_str("S3_BUCKET"),
            region=env_str("S3_REGION") or None,
            endpoint_url=env_str("S3_ENDPOINT_URL") or None,
            public_base_url=env_str("S3_PUBLIC_BASE_URL") or None,
            access_key_id=env_str("AWS_ACCESS_KEY_ID") or None,
            secret_access_key=env_str("AWS_SECRET_ACCESS_KEY") or None,
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        region = self.region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{key}"

    def _put(self, key: str, data: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )

    async def upload(
        self,
        data: bytes,
        kind: str,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> str:
        """
        Store `data` and return its durable URL.
        """
        if not self.bucket:
            raise MediaUploadError("S3_BUCKET is not configured.")
        if not data:
            raise MediaUploadError("Uploaded file is empty.")

        key = object_key(kind, filename)
        resolved_type = content_type or _KINDS[kind][2]
        try:
            await run_in_threadpool(self._put, key, data, resolved_type)
        except (BotoCoreError, ClientError) as exc:
            logger.error("media_upload_failed kind=%s key=%s error=%s", kind, key, exc)
            raise MediaUploadError(str(exc)) from exc

        logger.info("media_uploaded kind=%s key=%s size_bytes=%s", kind, key, len(data))
        return self.public_url(key)


def get_storage(request: Request) -> ObjectStorage:
    return request.app.state.storage


async def store_upload(
    storage: ObjectStorage,
    file: UploadFile | None,
    kind: str,
    *,
    failure_message: str,
) -> str | None:
    """
    Upload an optional multipart file and return its URL.

    Runs before any database write: a failed upload aborts the request with a
    500 and nothing is persisted.
    """
    if file is None or not file.filename:
        return None
    data = await read_upload(file)
    try:
        return await storage.upload(data, kind, filename=file.filename, content_type=file.content_type)
    except MediaUploadError as exc:
        raise HTTPException(status_code=500, detail=failure_message) from exc
