from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from backend.config import get_settings
from backend.utils.auth_aws import aws_client

logger = logging.getLogger(__name__)


class S3Storage:
    """Wrapper that prefers S3 but falls back to local disk for dev."""

    def __init__(self, bucket: str | None = None, client: Any | None = None):
        self.settings = get_settings()
        self.bucket = bucket or self.settings.s3_bucket_name
        self.client = client or aws_client("s3")
        self._fallback_dir = Path(__file__).resolve().parents[1] / "data" / "s3"
        self._fallback_dir.mkdir(parents=True, exist_ok=True)

    def list_objects(self, prefix: str = "") -> list[str]:
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            keys: list[str] = []
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
            return keys
        except (BotoCoreError, ClientError):
            base = self._fallback_dir / prefix
            if not base.exists():
                return []
            return [path.relative_to(self._fallback_dir).as_posix() for path in base.rglob("*") if path.is_file()]

    def write_bytes(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store ``data`` and return its location (``s3://`` URI or local ``file://`` URI)."""
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
            return f"s3://{self.bucket}/{key}"
        except (BotoCoreError, ClientError):
            logger.warning("S3 upload of %s failed, writing to local fallback", key)
            path = self._fallback_dir / key
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            return path.resolve().as_uri()

    def delete_prefix(self, prefix: str) -> int:
        keys = self.list_objects(prefix)
        deleted = 0
        for key in keys:
            try:
                self.client.delete_object(Bucket=self.bucket, Key=key)
            except (BotoCoreError, ClientError):
                path = self._fallback_dir / key
                if not path.exists():
                    continue
                path.unlink()
            deleted += 1
        return deleted
