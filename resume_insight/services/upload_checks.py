from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from zipfile import BadZipFile, ZipFile

RESUME_CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
ALLOWED_EXTENSIONS = frozenset(RESUME_CONTENT_TYPES)
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MB

PDF_MAGIC = b"%PDF-"
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


class UploadRejectedError(ValueError):
    pass


class UnsupportedFileError(UploadRejectedError):
    pass


class FileTooLargeError(UploadRejectedError):
    pass


@dataclass(frozen=True)
class ResumeFile:
    filename: str
    content: bytes
    content_type: str = ""

    @property
    def extension(self) -> str:
        return extension_from_filename(self.filename)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def media_type(self) -> str:
        if self.content_type:
            return self.content_type
        return RESUME_CONTENT_TYPES.get(self.extension) or "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "ResumeFile":
        file_path = Path(path)
        guessed, _ = mimetypes.guess_type(file_path.name)
        content_type = RESUME_CONTENT_TYPES.get(extension_from_filename(file_path.name)) or guessed or ""
        return cls(filename=file_path.name, content=file_path.read_bytes(), content_type=content_type)


def extension_from_filename(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].strip().lower()


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(name.startswith(prefix) for name in names for prefix in prefixes)


def format_megabytes(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


def validate_upload_signature(*, filename: str, content: bytes) -> None:
    ext = extension_from_filename(filename)

    if ext == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise UnsupportedFileError("File signature does not match .pdf content.")
        return

    if ext == "docx":
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise UnsupportedFileError("File signature does not match .docx content.")
        return

    if ext == "doc":
        if not content.startswith(OLE2_MAGIC):
            raise UnsupportedFileError("File signature does not match .doc content.")
        return


def check_resume_file(file: ResumeFile, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
    """Reject anything the analysis service should never see.

    Accepts PDF, DOC and DOCX up to ``max_bytes``; the extension decides the
    expected signature.
    """
    ext = file.extension
    if ext not in ALLOWED_EXTENSIONS:
        shown = f"'.{ext}'" if ext else "without an extension"
        raise UnsupportedFileError(
            f"Unsupported file type {shown}. Supported formats: PDF, DOC, DOCX."
        )
    if file.size == 0:
        raise UnsupportedFileError("The selected file is empty.")
    if file.size > max_bytes:
        raise FileTooLargeError(
            f"File too large ({format_megabytes(file.size)}). "
            f"Maximum allowed size is {max_bytes // (1024 * 1024)} MB."
        )
    validate_upload_signature(filename=file.filename, content=file.content)
