"""Media store adapter backed by Supabase Storage."""

import asyncio
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

from fastapi.concurrency import run_in_threadpool
from supabase import Client, create_client

from videohub.config import settings
from videohub.logger import media_logger
from videohub.utils.uploads import remove_local_file
from videohub.utils.video import probe_duration

VIDEO = "video"
IMAGE = "image"


@dataclass(frozen=True)
class MediaAsset:
    """A file held by the media store."""

    url: str
    resource_type: str
    duration: float | None = None


class SupabaseMediaStore:
    """
    Uploads local files to a Supabase Storage bucket and deletes them by URL.

    ``upload`` and ``delete`` never raise: failures are logged and reported
    as ``None`` / ``False`` so the calling workflow decides the HTTP outcome.
    """

    def __init__(
        self,
        url: str,
        service_key: str,
        bucket: str,
        timeout: float = 120.0,
    ):
        self.url = url
        self.service_key = service_key
        self.bucket = bucket
        self.timeout = timeout
        self._client: Client | None = None

    @property
    def client(self) -> Client:
        if self._client is None:
            if not (self.url and self.service_key):
                raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
            self._client = create_client(self.url, self.service_key)
        return self._client

    def _object_path(self, local_path: str, resource_type: str) -> str:
        return f"{resource_type}s/{uuid.uuid4()}{Path(local_path).suffix}"

    def _object_path_from_url(self, url: str) -> str | None:
        marker = f"/object/public/{self.bucket}/"
        path = unquote(urlparse(url).path)
        if marker not in path:
            return None
        return path.split(marker, 1)[1]

    def _upload_sync(
        self, local_path: str, resource_type: str, object_path: str
    ) -> MediaAsset:
        duration = probe_duration(local_path) if resource_type == VIDEO else None
        content_type = mimetypes.guess_type(local_path)[0] or "application/octet-stream"

        bucket = self.client.storage.from_(self.bucket)
        with open(local_path, "rb") as f:
            bucket.upload(
                path=object_path,
                file=f.read(),
                file_options={"content-type": content_type, "upsert": "false"},
            )

        return MediaAsset(
            url=bucket.get_public_url(object_path),
            resource_type=resource_type,
            duration=duration,
        )

    def _delete_sync(self, object_path: str) -> None:
        self.client.storage.from_(self.bucket).remove([object_path])

    async def upload(self, local_path: str | None, resource_type: str = IMAGE) -> MediaAsset | None:
        """
        Upload a staged local file and remove it from disk afterwards.

        Returns None when there is no file, the upload fails, or it takes
        longer than ``timeout`` seconds. A timed-out upload keeps running in
        its worker thread and may still create the object, so its path is
        logged as a possible leak.
        """
        if not local_path:
            return None

        object_path = self._object_path(local_path, resource_type)
        try:
            asset = await asyncio.wait_for(
                run_in_threadpool(
                    self._upload_sync, local_path, resource_type, object_path
                ),
                timeout=self.timeout,
            )
            media_logger.info(f"Uploaded {resource_type} asset {asset.url}")
            return asset
        except asyncio.TimeoutError:
            media_logger.error(
                f"Upload of {local_path} timed out after {self.timeout}s; "
                f"possible leaked asset at {self.bucket}/{object_path}"
            )
            return None
        except Exception as e:
            media_logger.error(f"Upload of {local_path} failed: {e}")
            return None
        finally:
            remove_local_file(local_path)

    async def delete(self, url: str, resource_type: str = IMAGE) -> bool:
        """Delete the asset behind ``url``; returns False on any failure."""
        object_path = self._object_path_from_url(url)
        if object_path is None:
            media_logger.warning(f"Not a {self.bucket} bucket URL, cannot delete: {url}")
            return False

        try:
            await asyncio.wait_for(
                run_in_threadpool(self._delete_sync, object_path),
                timeout=self.timeout,
            )
            media_logger.info(f"Deleted {resource_type} asset {object_path}")
            return True
        except asyncio.TimeoutError:
            media_logger.error(f"Delete of {url} timed out after {self.timeout}s")
            return False
        except Exception as e:
            media_logger.error(f"Delete of {url} failed: {e}")
            return False


media_store = SupabaseMediaStore(
    url=settings.supabase_url,
    service_key=settings.supabase_service_key,
    bucket=settings.supabase_bucket,
    timeout=settings.media_timeout_seconds,
)


def get_media_store():
    """Dependency for getting the media store."""
    return media_store
