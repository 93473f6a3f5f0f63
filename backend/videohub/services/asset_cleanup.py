"""Deletion of superseded media assets, run after the owning write commits."""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any

from fastapi import BackgroundTasks, Depends

from videohub.config import settings
from videohub.logger import media_logger
from videohub.redis_client import RedisClient, get_redis
from videohub.services.media_store import IMAGE, get_media_store

LEAKED_ASSETS_KEY = "videohub:leaked_assets"


class LeakedAssetLedger:
    """Redis list of remote assets the service knowingly left behind."""

    def __init__(self, redis: RedisClient):
        self.redis = redis

    def record(self, url: str, reason: str) -> None:
        entry = {
            "url": url,
            "reason": reason,
            "recorded_at": datetime.now(timezone.utc).isoformat(),
        }
        media_logger.warning(f"Leaked asset {url}: {reason}")
        self.redis.rpush(LEAKED_ASSETS_KEY, json.dumps(entry))

    def entries(self) -> list[dict[str, Any]]:
        return [json.loads(item) for item in self.redis.lrange(LEAKED_ASSETS_KEY)]


class AssetCleanup:
    """Retrying, logged deletion of media assets."""

    def __init__(
        self,
        media_store,
        ledger: LeakedAssetLedger,
        attempts: int = 3,
        backoff_seconds: float = 2.0,
    ):
        self.media_store = media_store
        self.ledger = ledger
        self.attempts = max(1, attempts)
        self.backoff_seconds = backoff_seconds

    async def delete(self, url: str, resource_type: str = IMAGE) -> bool:
        """Try to delete ``url``; record it as leaked when every attempt fails."""
        for attempt in range(1, self.attempts + 1):
            if await self.media_store.delete(url, resource_type):
                return True

            media_logger.warning(
                f"Attempt {attempt}/{self.attempts} to delete {url} failed"
            )
            if attempt < self.attempts:
                await asyncio.sleep(self.backoff_seconds * attempt)

        self.ledger.record(url, f"delete failed after {self.attempts} attempts")
        return False

    def schedule(
        self, background_tasks: BackgroundTasks, url: str | None, resource_type: str = IMAGE
    ) -> None:
        """Queue deletion of ``url`` to run after the response is sent."""
        if not url:
            return
        media_logger.debug(f"Scheduled cleanup of {url}")
        background_tasks.add_task(self.delete, url, resource_type)


def get_leak_ledger(redis: RedisClient = Depends(get_redis)) -> LeakedAssetLedger:
    return LeakedAssetLedger(redis)


def get_asset_cleanup(
    media_store=Depends(get_media_store),
    ledger: LeakedAssetLedger = Depends(get_leak_ledger),
) -> AssetCleanup:
    return AssetCleanup(
        media_store,
        ledger,
        attempts=settings.asset_cleanup_attempts,
        backoff_seconds=settings.asset_cleanup_backoff_seconds,
    )
