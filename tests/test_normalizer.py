import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_insight.schemas.analysis import ShapeFailure  # noqa: E402
from resume_insight.services.normalizer import (  # noqa: E402
    GENERIC_UPLOAD_ERROR,
    error_result,
    fallback_result,
    normalize,
    validate_payload,
)

FALLBACK_FIELDS = {
    "strengths": ["Resume analysis in progress", "Processing your resume content"],
    "weaknesses": ["Initial analysis", "Please try again if results seem incomplete"],
    "missingSkills": ["Skills will be analyzed", "Technical skills", "Soft skills"],
    "summary": "We're analyzing your resume. Please check back for detailed feedback.",
    "jobFitScore": 50,
}


def _valid_payload() -> dict:
    return {
        "strengths": ["Clear impact statements", "Strong Python background"],
        "weaknesses": ["Summary is long"],
        "missingSkills": ["Kubernetes"],
        "summary": "A solid backend profile.",
        "jobFitScore": 82,
        "processingTime": 1432,
        "cached": True,
    }


class NormalizeTests(unittest.TestCase):
    def test_valid_payload_is_returned_unchanged(self):
        raw = _valid_payload()
        result = normalize(raw)
        self.assertIs(result, raw)
        self.assertEqual(result, _valid_payload())

    def test_valid_payload_allows_empty_lists_and_float_score(self):
        raw = {
            "strengths": [],
            "weaknesses": [],
            "missingSkills": [],
            "summary": "",
            "jobFitScore": 67.5,
            "extra": {"kept": True},
        }
        self.assertIs(normalize(raw), raw)

    def test_any_single_bad_field_replaces_whole_payload(self):
        cases = [
            ("strengths", "not a list"),
            ("weaknesses", None),
            ("missingSkills", {"python": True}),
            ("summary", 42),
            ("summary", ["list", "of", "lines"]),
            ("jobFitScore", "80"),
            ("jobFitScore", True),
        ]
        for field, bad_value in cases:
            with self.subTest(field=field, value=bad_value):
                raw = _valid_payload()
                raw[field] = bad_value
                result = normalize(raw)
                expected = dict(FALLBACK_FIELDS, processingTime=1432, cached=True)
                self.assertEqual(result, expected)

    def test_missing_field_replaces_whole_payload(self):
        for field in FALLBACK_FIELDS:
            with self.subTest(field=field):
                raw = _valid_payload()
                del raw[field]
                result = normalize(raw)
                for key, value in FALLBACK_FIELDS.items():
                    self.assertEqual(result[key], value)
                self.assertNotIn("error", result)

    def test_none_body_uses_current_timestamp_and_not_cached(self):
        with patch("resume_insight.services.normalizer.time.time", return_value=1_700_000_000.25):
            result = normalize(None)
        self.assertEqual(result, dict(FALLBACK_FIELDS, processingTime=1_700_000_000_250, cached=False))

    def test_fallback_keeps_zero_processing_time_and_false_cached(self):
        raw = {"processingTime": 0, "cached": False, "summary": 3}
        result = normalize(raw)
        self.assertEqual(result["processingTime"], 0)
        self.assertIs(result["cached"], False)

    def test_fallback_lists_are_fresh_per_call(self):
        first = fallback_result()
        second = fallback_result()
        first["strengths"].append("mutated")
        self.assertEqual(second["strengths"], FALLBACK_FIELDS["strengths"])


class ValidatePayloadTests(unittest.TestCase):
    def test_reports_missing_body(self):
        report = validate_payload(None)
        self.assertFalse(report.ok)
        self.assertEqual(report.failures, (ShapeFailure.MISSING_BODY,))

    def test_non_finite_score_is_rejected(self):
        for score in (float("nan"), float("inf"), float("-inf")):
            with self.subTest(score=score):
                raw = _valid_payload()
                raw["jobFitScore"] = score
                self.assertEqual(validate_payload(raw).failures, (ShapeFailure.JOB_FIT_SCORE,))
                self.assertEqual(normalize(raw)["jobFitScore"], 50)

    def test_reports_non_object_body(self):
        for raw in (["strengths"], "text", 12):
            with self.subTest(raw=raw):
                self.assertEqual(validate_payload(raw).failures, (ShapeFailure.NOT_AN_OBJECT,))

    def test_reports_each_failing_field(self):
        raw = _valid_payload()
        raw["summary"] = None
        raw["jobFitScore"] = "high"
        del raw["missingSkills"]
        report = validate_payload(raw)
        self.assertFalse(report.ok)
        self.assertEqual(
            set(report.failures),
            {ShapeFailure.SUMMARY, ShapeFailure.JOB_FIT_SCORE, ShapeFailure.MISSING_SKILLS},
        )

    def test_valid_payload_has_no_failures(self):
        report = validate_payload(_valid_payload())
        self.assertTrue(report.ok)
        self.assertEqual(report.failures, ())


class ErrorResultTests(unittest.TestCase):
    def test_error_placeholder_with_server_message(self):
        result = error_result("bad file")
        self.assertEqual(
            result,
            {
                "strengths": ["Error processing request", "Please try again"],
                "weaknesses": ["Connection issue", "Check your internet connection"],
                "missingSkills": ["Skills could not be analyzed", "AI processing failed"],
                "summary": "An error occurred while analyzing your resume. Please try uploading again.",
                "jobFitScore": 0,
                "processingTime": 0,
                "cached": False,
                "error": "bad file",
            },
        )

    def test_error_placeholder_generic_message(self):
        self.assertEqual(error_result()["error"], GENERIC_UPLOAD_ERROR)
        self.assertEqual(error_result("")["error"], "Upload failed. Please try again.")


if __name__ == "__main__":
    unittest.main()
