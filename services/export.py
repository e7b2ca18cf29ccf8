"""
ZIP export of a project's files.
"""

import io
import logging
import re
import zipfile

from .normalizer import ProjectFileSet

logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_NAME = "cenly-project"

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def archive_filename(title: str | None) -> str:
    """Slugify a project title into a download name, without extension."""
    slug = _SLUG_INVALID.sub("-", (title or "").lower()).strip("-")
    return slug[:80].rstrip("-") or DEFAULT_ARCHIVE_NAME


def _archive_path(path: str) -> str | None:
    """Relative archive path for a stored file, or None if it would escape the archive."""
    clean = path.replace("\\", "/").lstrip("/")
    if not clean or ".." in clean.split("/"):
        return None
    return clean


def build_project_archive(files: ProjectFileSet | None, name: str | None = None) -> bytes:
    """
    Pack a file set into a ZIP archive.

    Files are placed under a top-level folder named after the project.
    """
    root = archive_filename(name)
    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for path in sorted(files or {}):
            archive_path = _archive_path(path)
            if archive_path is None:
                logger.warning(f"Skipping unsafe export path: {path}")
                continue
            zf.writestr(f"{root}/{archive_path}", files[path] or "")

    return buffer.getvalue()
