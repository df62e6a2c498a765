from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from resume_insight.core.config import settings
from resume_insight.integrations.analysis_api import AnalysisApiClient
from resume_insight.services.report import render_report
from resume_insight.services.upload_checks import ResumeFile
from resume_insight.services.upload_session import SessionStatus, UploadSession


def _print_progress(percent: int) -> None:
    sys.stderr.write(f"\rUploading... {percent:3d}%")
    if percent >= 100:
        sys.stderr.write("\n")
    sys.stderr.flush()


async def _run(args: argparse.Namespace) -> int:
    try:
        resume = ResumeFile.from_path(args.path)
    except OSError as exc:
        sys.stderr.write(f"Could not read {args.path}: {exc}\n")
        return 2

    async with AnalysisApiClient(base_url=args.base_url, timeout_s=args.timeout) as client:
        session = UploadSession(
            client,
            max_bytes=settings.max_upload_bytes,
            on_progress=None if args.quiet else _print_progress,
        )
        if session.select(resume):
            await session.upload(fresh=args.fresh)

    for notice in session.notices:
        if notice.level == "error" or not args.quiet:
            sys.stderr.write(f"[{notice.level}] {notice.message}\n")

    if session.result is not None:
        if args.json:
            sys.stdout.write(json.dumps(session.result, indent=2, ensure_ascii=False) + "\n")
        else:
            sys.stdout.write(render_report(session.result, session.file_name))
    return 0 if session.status == SessionStatus.DONE else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload a resume and print AI feedback.")
    parser.add_argument("path", help="Resume file (PDF, DOC or DOCX, up to 5 MB)")
    parser.add_argument("--fresh", action="store_true", help="Bypass results cached by the service.")
    parser.add_argument("--json", action="store_true", help="Print the normalized JSON instead of a report.")
    parser.add_argument("--base-url", default=None, help=f"Analysis API base URL (default: {settings.api_base_url})")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds.")
    parser.add_argument("--quiet", action="store_true", help="Only print the result and errors.")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")
    raise SystemExit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
