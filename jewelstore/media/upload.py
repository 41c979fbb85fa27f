"""
Upload Client — Send media to the store's storage proxy.

Files go to the external API, which writes them to object storage and
answers with a public URL. Deletes are advisory cleanup and never raise.

## Endpoints

    POST   {api_url}/admin/upload/file     multipart: file, folder
           → {"publicUrl": "...", "key": "..."}   or {"message": "..."}
    DELETE {api_url}/admin/upload/file     JSON: {"url": "..."}
           → {"success": true}

Both carry `Authorization: Bearer <token>` and `x-tenant-id: <tenant>`.

## Usage

    from jewelstore.media.upload import UploadClient

    client = UploadClient(settings.session(), settings.api_url)
    url = client.upload(media_file, UploadFolder.PRODUCTS)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import httpx

from ..config.loader import DEFAULT_CDN_HOST, SessionContext
from ..models.media import MediaFile, UploadFolder
from ..validation import AuthenticationRequired, UploadError
from .cdn import is_cdn_url

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/admin/upload/file"
PRESIGNED_PATH = "/admin/upload/presigned-url"
USER_AGENT = "jewelstore-media/1.0"

ProgressCallback = Callable[[int], None]
FolderLike = Union[UploadFolder, str]


def error_message(response: httpx.Response, fallback: str) -> str:
    """Pull `message` out of an error body, or fall back."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class UploadClient:
    """
    Proxied upload strategy: the API receives the bytes and stores them.

    The session is passed in explicitly; the client never reads ambient
    credentials.
    """

    def __init__(
        self,
        session: SessionContext,
        api_url: str,
        *,
        cdn_host: str = DEFAULT_CDN_HOST,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.session = session
        self.api_url = api_url.rstrip("/")
        self.cdn_host = cdn_host
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "UploadClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ── Upload ───────────────────────────────────────────────────

    def upload(
        self,
        file: MediaFile,
        folder: FolderLike,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        Upload one file and return its public URL.

        Raises:
            AuthenticationRequired: No token in the session (no request made).
            UploadError: Transport failure, non-2xx status, or no URL in reply.
        """
        self._require_auth()
        folder = UploadFolder(folder)

        url = self._send(file, folder)
        if on_progress:
            on_progress(100)
        return url

    def upload_many(
        self,
        files: Sequence[MediaFile],
        folder: FolderLike,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[str]:
        """
        Upload files one after another, in order.

        Progress is reported as the rounded percentage of files done after
        each one. The first failure stops the batch.
        """
        self._require_auth()
        folder = UploadFolder(folder)

        urls: List[str] = []
        total = len(files)
        for i, file in enumerate(files):
            urls.append(self._send(file, folder))
            if on_progress:
                on_progress(round((i + 1) / total * 100))
        return urls

    def _send(self, file: MediaFile, folder: UploadFolder) -> str:
        try:
            response = self._http.post(
                f"{self.api_url}{UPLOAD_PATH}",
                files={"file": (file.filename, file.data, file.mime_type)},
                data={"folder": folder.value},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Upload of {file.filename} failed: {e}")
            raise UploadError(f"Failed to upload file: {e}")

        if not response.is_success:
            message = error_message(response, "Failed to upload file")
            logger.error(f"Upload of {file.filename} rejected ({response.status_code}): {message}")
            raise UploadError(message, status_code=response.status_code)

        public_url = self._public_url(response)
        logger.info(
            f"Uploaded {file.filename} ({file.size:,} bytes) → {public_url}",
            extra={"tenant_id": self.session.tenant_id, "folder": folder.value},
        )
        return public_url

    # ── Delete ───────────────────────────────────────────────────

    def delete(self, url: str) -> bool:
        """
        Ask the API to remove a stored object. Returns True on success.

        Never raises: URLs off the storage host are skipped, and every
        failure is logged and reported as False.
        """
        if not is_cdn_url(url, self.cdn_host):
            logger.debug(f"Not a storage URL, skipping delete: {url}")
            return False

        if not self.session.is_authenticated:
            logger.warning(f"Cannot delete {url}: not authenticated")
            return False

        try:
            response = self._http.request(
                "DELETE",
                f"{self.api_url}{UPLOAD_PATH}",
                json={"url": url},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning(f"Delete of {url} failed: {e}")
            return False

        if not response.is_success:
            logger.warning(
                f"Delete of {url} rejected ({response.status_code}): "
                f"{error_message(response, 'no details')}"
            )
            return False

        try:
            success = bool(response.json().get("success", False))
        except (ValueError, AttributeError):
            logger.warning(f"Delete of {url}: unreadable response")
            return False

        if success:
            logger.info(f"Deleted {url}", extra={"url": url})
        else:
            logger.warning(f"Delete of {url} reported no success")
        return success

    def delete_in_background(self, url: str) -> threading.Thread:
        """Fire-and-forget delete on a daemon thread."""
        thread = threading.Thread(
            target=self.delete, args=(url,), name="media-delete", daemon=True,
        )
        thread.start()
        return thread

    # ── Internal helpers ─────────────────────────────────────────

    def _require_auth(self) -> None:
        if not self.session.is_authenticated:
            raise AuthenticationRequired()

    def _headers(self) -> Dict[str, str]:
        headers = self.session.auth_headers()
        headers["User-Agent"] = USER_AGENT
        return headers

    @staticmethod
    def _public_url(response: httpx.Response) -> str:
        try:
            body: Any = response.json()
        except ValueError:
            raise UploadError("Upload response was not valid JSON", status_code=response.status_code)
        public_url = body.get("publicUrl") if isinstance(body, dict) else None
        if not public_url:
            raise UploadError("Upload response did not include a public URL", status_code=response.status_code)
        return public_url


class PresignedUploadClient(UploadClient):
    """
    Direct-to-storage strategy: the API signs a URL, the bytes go straight
    to the bucket with a PUT.
    """

    def _send(self, file: MediaFile, folder: UploadFolder) -> str:
        try:
            response = self._http.post(
                f"{self.api_url}{PRESIGNED_PATH}",
                json={
                    "folder": folder.value,
                    "filename": file.filename,
                    "contentType": file.mime_type,
                },
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise UploadError(f"Failed to get upload URL: {e}")

        if not response.is_success:
            raise UploadError(
                error_message(response, "Failed to get upload URL"),
                status_code=response.status_code,
            )

        try:
            body = response.json()
            upload_url = body["uploadUrl"]
            public_url = body["publicUrl"]
        except (ValueError, KeyError, TypeError):
            raise UploadError("Presigned URL response was incomplete", status_code=response.status_code)

        try:
            put = self._http.put(
                upload_url,
                content=file.data,
                headers={"Content-Type": file.mime_type},
            )
        except httpx.HTTPError as e:
            raise UploadError(f"Failed to upload file to storage: {e}")

        if not put.is_success:
            logger.error(f"Storage PUT failed: {put.status_code} {put.reason_phrase}")
            raise UploadError(
                f"Failed to upload file to storage ({put.status_code})",
                status_code=put.status_code,
            )

        logger.info(
            f"Uploaded {file.filename} directly to storage → {public_url}",
            extra={"tenant_id": self.session.tenant_id, "folder": folder.value},
        )
        return public_url
