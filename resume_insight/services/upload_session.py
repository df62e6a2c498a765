from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from resume_insight.integrations.analysis_api import (
    AnalysisApiClient,
    AnalysisClientError,
    SubmissionInProgressError,
    UploadFailedError,
)
from resume_insight.services.normalizer import error_result
from resume_insight.services.upload_checks import (
    DEFAULT_MAX_UPLOAD_BYTES,
    ResumeFile,
    UploadRejectedError,
    check_resume_file,
)

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Notice:
    level: str
    message: str


class UploadSession:
    """State of one upload view: the selected file, progress, result and notices.

    Each view owns its session; nothing here is shared between sessions.
    """

    def __init__(
        self,
        client: AnalysisApiClient,
        *,
        max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        on_progress: Optional[Callable[[int], None]] = None,
    ):
        self._client = client
        self._max_bytes = max_bytes
        self._on_progress = on_progress
        self.notices: list[Notice] = []
        self.file: ResumeFile | None = None
        self.status = SessionStatus.IDLE
        self.progress = 0
        self.result: dict[str, Any] | None = None
        self.error = ""

    @property
    def file_name(self) -> str:
        return self.file.filename if self.file else ""

    def _notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))

    def _track_progress(self, percent: int) -> None:
        self.progress = max(self.progress, percent)
        if self._on_progress is not None:
            self._on_progress(self.progress)

    def select(self, file: ResumeFile) -> bool:
        try:
            check_resume_file(file, self._max_bytes)
        except UploadRejectedError as exc:
            self._notify("error", str(exc))
            return False
        self.file = file
        return True

    def clear_file(self) -> None:
        self.file = None

    async def upload(self, *, fresh: bool = False) -> dict[str, Any] | None:
        if self.file is None:
            self._notify("error", "Please select a file to upload")
            return None
        if self.status == SessionStatus.UPLOADING:
            self._notify("warning", "An upload is already in progress")
            return None

        self.status = SessionStatus.UPLOADING
        self.progress = 0
        self.error = ""
        self._notify("info", "Starting resume analysis...")

        submit = self._client.submit_fresh if fresh else self._client.submit
        try:
            result = await submit(self.file, self._track_progress)
        except UploadFailedError as exc:
            logger.info("upload_session_failed file=%s status=%s", self.file_name, exc.status_code)
            self.status = SessionStatus.FAILED
            self.result = exc.result
            self.error = exc.message
            self._notify("error", exc.message)
            return None
        except SubmissionInProgressError as exc:
            logger.info("upload_session_client_busy file=%s", self.file_name)
            self.status = SessionStatus.IDLE
            self.error = str(exc)
            self._notify("error", str(exc))
            return None
        except AnalysisClientError as exc:
            logger.warning("upload_session_client_error file=%s error=%s", self.file_name, exc)
            self.status = SessionStatus.FAILED
            self.result = error_result(str(exc))
            self.error = self.result["error"]
            self._notify("error", self.error)
            return None
        except Exception:
            self.status = SessionStatus.FAILED
            raise

        self.status = SessionStatus.DONE
        self.result = result
        self._notify("success", "Resume analysis completed successfully!")
        return result

    def reset(self) -> None:
        if self.status == SessionStatus.UPLOADING:
            raise RuntimeError("Cannot reset while an upload is in progress.")
        self._notify("info", "Preparing for new analysis...")
        self.file = None
        self.status = SessionStatus.IDLE
        self.progress = 0
        self.result = None
        self.error = ""
