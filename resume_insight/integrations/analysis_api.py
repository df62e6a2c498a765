from __future__ import annotations

import logging
import time
from typing import Any, AsyncIterator, Callable, Optional

import httpx

from resume_insight.core.config import settings
from resume_insight.services.normalizer import error_result, normalize
from resume_insight.services.upload_checks import ResumeFile

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/upload"
FRESH_UPLOAD_PATH = "/upload-fresh"
ANALYTICS_PATH = "/analytics"
UPLOAD_FIELD = "resume"
UPLOAD_CHUNK_BYTES = 64 * 1024

ProgressCallback = Callable[[int], None]


class AnalysisClientError(Exception):
    pass


class SubmissionInProgressError(AnalysisClientError):
    pass


class AnalyticsUnavailableError(AnalysisClientError):
    pass


class UploadFailedError(AnalysisClientError):
    """Transport or server failure. ``result`` is the renderable error payload."""

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        self.result = error_result(message)
        self.message: str = self.result["error"]
        self.status_code = status_code
        super().__init__(self.message)


def _report_progress(on_progress: Optional[ProgressCallback], percent: int) -> None:
    if on_progress is None:
        return
    try:
        on_progress(percent)
    except Exception:
        logger.debug("analysis_progress_callback_failed percent=%s", percent, exc_info=True)


async def _stream_body(body: bytes, on_progress: Optional[ProgressCallback]) -> AsyncIterator[bytes]:
    total = len(body)
    if total == 0:
        _report_progress(on_progress, 100)
        return
    sent = 0
    last = -1
    for start in range(0, total, UPLOAD_CHUNK_BYTES):
        chunk = body[start : start + UPLOAD_CHUNK_BYTES]
        yield chunk
        sent += len(chunk)
        percent = min(100, round(sent * 100 / total))
        if percent > last:
            last = percent
            _report_progress(on_progress, percent)


def _server_error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return None


class AnalysisApiClient:
    """Async client for the remote resume analysis service.

    One upload may be in flight per instance; a second ``submit`` while the
    first is outstanding raises ``SubmissionInProgressError``. Requests are
    never retried or cancelled here.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout_s: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s or settings.api_timeout_s),
            transport=transport,
        )
        self._in_flight = False

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def busy(self) -> bool:
        return self._in_flight

    async def __aenter__(self) -> "AnalysisApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def submit(
        self, file: ResumeFile, on_progress: Optional[ProgressCallback] = None
    ) -> dict[str, Any]:
        return await self._upload(UPLOAD_PATH, file, on_progress)

    async def submit_fresh(
        self, file: ResumeFile, on_progress: Optional[ProgressCallback] = None
    ) -> dict[str, Any]:
        return await self._upload(FRESH_UPLOAD_PATH, file, on_progress)

    async def get_analytics(self) -> dict[str, Any]:
        url = f"{self._base_url}{ANALYTICS_PATH}"
        try:
            response = await self._http.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("analysis_analytics_failed url=%s error=%s", url, exc)
            raise AnalyticsUnavailableError("Analytics are unavailable right now.") from exc
        if not isinstance(data, dict):
            raise AnalyticsUnavailableError("Unexpected analytics payload.")
        return data

    async def _upload(
        self, path: str, file: ResumeFile, on_progress: Optional[ProgressCallback]
    ) -> dict[str, Any]:
        if self._in_flight:
            raise SubmissionInProgressError("An analysis request is already in progress.")
        self._in_flight = True
        try:
            return await self._send_upload(path, file, on_progress)
        finally:
            self._in_flight = False

    async def _send_upload(
        self, path: str, file: ResumeFile, on_progress: Optional[ProgressCallback]
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        # Encode the multipart body up front so progress can be measured against its length.
        encoded = self._http.build_request(
            "POST",
            url,
            files={UPLOAD_FIELD: (file.filename, file.content, file.media_type)},
        )
        body = encoded.read()
        headers = {
            "Content-Type": encoded.headers["Content-Type"],
            "Content-Length": str(len(body)),
        }

        started = time.perf_counter()
        try:
            response = await self._http.post(url, content=_stream_body(body, on_progress), headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("analysis_upload_timeout path=%s file=%s", path, file.filename)
            raise UploadFailedError() from exc
        except httpx.RequestError as exc:
            logger.warning("analysis_upload_failed path=%s file=%s error=%s", path, file.filename, exc)
            raise UploadFailedError() from exc

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if not response.is_success:
            message = _server_error_message(response)
            logger.warning(
                "analysis_upload_rejected path=%s status=%s elapsed_ms=%s error=%s",
                path,
                response.status_code,
                elapsed_ms,
                message,
            )
            raise UploadFailedError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError:
            logger.warning("analysis_response_not_json path=%s status=%s", path, response.status_code)
            payload = None

        logger.info(
            "analysis_upload_done path=%s status=%s elapsed_ms=%s bytes=%s",
            path,
            response.status_code,
            elapsed_ms,
            len(body),
        )
        return normalize(payload)
