import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_insight.core.config import DEFAULT_API_URL, load_settings  # noqa: E402


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_settings()
        self.assertEqual(config.api_base_url, DEFAULT_API_URL)
        self.assertEqual(config.api_timeout_s, 120.0)
        self.assertEqual(config.max_upload_bytes, 5 * 1024 * 1024)
        self.assertTrue(config.rate_limit_enabled)
        self.assertIsNone(config.sentry_dsn)

    def test_environment_overrides(self):
        env = {
            "RESUME_API_URL": "https://analysis.example.com/api/",
            "RESUME_API_TIMEOUT_S": "45",
            "MAX_UPLOAD_BYTES": "not-a-number",
            "RATE_LIMIT_ENABLED": "off",
            "CORS_ALLOWED_ORIGINS": "https://a.example.com, ,https://b.example.com",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_settings()
        self.assertEqual(config.api_base_url, "https://analysis.example.com/api")
        self.assertEqual(config.api_timeout_s, 45.0)
        self.assertEqual(config.max_upload_bytes, 5 * 1024 * 1024)
        self.assertFalse(config.rate_limit_enabled)
        self.assertEqual(config.cors_allowed_origins, ("https://a.example.com", "https://b.example.com"))


if __name__ == "__main__":
    unittest.main()
