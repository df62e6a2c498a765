from __future__ import annotations

from typing import Any

from resume_insight.schemas.analysis import AnalysisResult
from resume_insight.services.score_bands import interpret_score, score_tier

RECOMMENDATIONS = (
    "Add quantifiable achievements with specific numbers and metrics",
    "Include relevant keywords from job descriptions in your field",
    "Consider updating your professional summary to reflect current goals",
    "Add or emphasize technical skills that are in demand for your target roles",
)


def _format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else f"{score:.1f}"


def _section(title: str, items: list[str], marker: str) -> list[str]:
    lines = [title]
    if not items:
        lines.append("  None listed")
    else:
        lines.extend(f"  {marker} {item}" for item in items)
    return lines


def render_report(payload: dict[str, Any] | AnalysisResult, file_name: str = "") -> str:
    result = payload if isinstance(payload, AnalysisResult) else AnalysisResult.model_validate(payload)
    score = result.job_fit_score

    lines = ["Resume Analysis Results"]
    if file_name:
        lines.append(f"Detailed feedback for: {file_name}")
    lines.append("")
    if result.error:
        lines.extend([f"Error: {result.error}", ""])

    lines.append(f"Job Fit Score: {_format_score(score)}/100 ({score_tier(score).value})")
    lines.append(interpret_score(score))
    if result.summary:
        lines.extend(["", "Professional Summary", f"  {result.summary}"])

    lines.append("")
    lines.extend(_section("Strengths", result.strengths, "+"))
    lines.append("")
    lines.extend(_section("Areas for Improvement", result.weaknesses, "-"))
    lines.append("")
    lines.extend(_section("Missing Skills", result.missing_skills, "*"))

    details = []
    if result.processing_time is not None:
        details.append(f"Processing Time: {_format_score(result.processing_time)}ms")
    if result.cached is not None:
        details.append(f"Cached Response: {'Yes' if result.cached else 'No'}")
    if details:
        lines.extend(["", " | ".join(details)])

    lines.append("")
    lines.extend(_section("Personalized Recommendations", list(RECOMMENDATIONS), "*"))
    return "\n".join(lines) + "\n"
