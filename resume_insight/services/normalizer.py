from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import ValidationError

from resume_insight.schemas.analysis import AnalysisShape, ShapeFailure, ShapeReport

logger = logging.getLogger(__name__)

GENERIC_UPLOAD_ERROR = "Upload failed. Please try again."

_FIELD_FAILURES = {
    "strengths": ShapeFailure.STRENGTHS,
    "weaknesses": ShapeFailure.WEAKNESSES,
    "missingSkills": ShapeFailure.MISSING_SKILLS,
    "summary": ShapeFailure.SUMMARY,
    "jobFitScore": ShapeFailure.JOB_FIT_SCORE,
}


def validate_payload(raw: Any) -> ShapeReport:
    if raw is None:
        return ShapeReport(failures=(ShapeFailure.MISSING_BODY,))
    if not isinstance(raw, dict):
        return ShapeReport(failures=(ShapeFailure.NOT_AN_OBJECT,))
    try:
        AnalysisShape.model_validate(raw)
    except ValidationError as exc:
        failures: list[ShapeFailure] = []
        for error in exc.errors():
            loc = error.get("loc") or ()
            failure = _FIELD_FAILURES.get(str(loc[0])) if loc else ShapeFailure.NOT_AN_OBJECT
            if failure is not None and failure not in failures:
                failures.append(failure)
        return ShapeReport(failures=tuple(failures or [ShapeFailure.NOT_AN_OBJECT]))
    return ShapeReport()


def _now_ms() -> int:
    return int(time.time() * 1000)


def fallback_result(raw: Any = None) -> dict[str, Any]:
    source = raw if isinstance(raw, dict) else {}
    processing_time = source.get("processingTime")
    cached = source.get("cached")
    return {
        "strengths": ["Resume analysis in progress", "Processing your resume content"],
        "weaknesses": ["Initial analysis", "Please try again if results seem incomplete"],
        "missingSkills": ["Skills will be analyzed", "Technical skills", "Soft skills"],
        "summary": "We're analyzing your resume. Please check back for detailed feedback.",
        "jobFitScore": 50,
        "processingTime": processing_time if processing_time is not None else _now_ms(),
        "cached": cached if cached is not None else False,
    }


def error_result(message: str | None = None) -> dict[str, Any]:
    return {
        "strengths": ["Error processing request", "Please try again"],
        "weaknesses": ["Connection issue", "Check your internet connection"],
        "missingSkills": ["Skills could not be analyzed", "AI processing failed"],
        "summary": "An error occurred while analyzing your resume. Please try uploading again.",
        "jobFitScore": 0,
        "processingTime": 0,
        "cached": False,
        "error": message or GENERIC_UPLOAD_ERROR,
    }


def normalize(raw: Any) -> dict[str, Any]:
    """Return ``raw`` untouched when it has the promised shape.

    Any missing or mistyped field replaces the whole payload with the
    fallback placeholder; partially valid payloads are not patched.
    """
    report = validate_payload(raw)
    if report.ok:
        return raw
    logger.warning(
        "analysis_payload_invalid failures=%s",
        ",".join(failure.value for failure in report.failures),
    )
    return fallback_result(raw)
