"""
Redis cache store speaking the Upstash REST protocol.

Commands are posted as JSON arrays (``["SET", key, value, "EX", ttl]``) to the
database URL; replies come back as ``{"result": ...}`` or ``{"error": ...}``.
"""

import json
from typing import Any, Dict, List, Optional

from .base import CacheStore
from ..utils.base import BaseClient
from ..utils.exceptions import CacheReadError, CacheWriteError, ClientError


class RedisCacheStore(BaseClient, CacheStore):
    """Fast cache tier backed by a REST-accessible Redis database."""

    def __init__(self, url: str, token: str, timeout: int = 5, max_retries: int = 1):
        self._url = url.rstrip("/")
        self._token = token
        super().__init__(timeout=timeout, max_retries=max_retries)

    @property
    def base_url(self) -> str:
        return self._url

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    def _command(self, *args: Any) -> Any:
        command: List[Any] = [str(a) for a in args]
        response = self._make_request(self.base_url, method="POST", json_body=command)
        payload = self._parse_json(response) or {}
        if payload.get("error"):
            raise ClientError(f"Redis error: {payload['error']}", url=self.base_url)
        return payload.get("result")

    def get_json(self, key: str) -> Optional[Any]:
        try:
            raw = self._command("GET", key)
        except ClientError as e:
            raise CacheReadError(f"Redis read failed for {key}: {e}") from e

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            self.logger.warning(f"Discarding undecodable cache value for {key}")
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            self._command("SET", key, json.dumps(value), "EX", int(ttl_seconds))
        except ClientError as e:
            raise CacheWriteError(f"Redis write failed for {key}: {e}") from e

