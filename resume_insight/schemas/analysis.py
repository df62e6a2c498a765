from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShapeFailure(str, Enum):
    MISSING_BODY = "missing_body"
    NOT_AN_OBJECT = "not_an_object"
    STRENGTHS = "strengths"
    WEAKNESSES = "weaknesses"
    MISSING_SKILLS = "missingSkills"
    SUMMARY = "summary"
    JOB_FIT_SCORE = "jobFitScore"


@dataclass(frozen=True)
class ShapeReport:
    failures: tuple[ShapeFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


class AnalysisShape(BaseModel):
    """Wire shape the analysis service promises. Used for validation only."""

    model_config = ConfigDict(strict=True, extra="ignore")

    strengths: list[Any]
    weaknesses: list[Any]
    missing_skills: list[Any] = Field(alias="missingSkills")
    summary: str
    job_fit_score: int | float = Field(alias="jobFitScore")

    @field_validator("job_fit_score")
    @classmethod
    def _finite_score(cls, value: int | float) -> int | float:
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("jobFitScore must be a finite number")
        return value


class AnalysisResult(BaseModel):
    """Read-side view of a normalized payload for rendering."""

    model_config = ConfigDict(populate_by_name=True)

    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list, alias="missingSkills")
    summary: str = ""
    job_fit_score: float = Field(default=0, alias="jobFitScore")
    processing_time: float | None = Field(default=None, alias="processingTime")
    cached: bool | None = None
    error: str | None = None

    @field_validator("strengths", "weaknesses", "missing_skills", mode="before")
    @classmethod
    def _stringify_items(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        return value

    @field_validator("summary", mode="before")
    @classmethod
    def _none_summary(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("processing_time", mode="before")
    @classmethod
    def _parse_processing_time(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else None
        if isinstance(value, str):
            try:
                parsed = float(value.strip())
            except ValueError:
                return None
            return parsed if math.isfinite(parsed) else None
        return None

    @field_validator("cached", mode="before")
    @classmethod
    def _only_bool_cached(cls, value: Any) -> Any:
        return value if isinstance(value, bool) else None

    @field_validator("error", mode="before")
    @classmethod
    def _stringify_error(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)
