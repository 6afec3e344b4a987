"""Fatal error taxonomy for a blog build.

Every error raised here aborts the run. There are no retries and no cleanup of
partially written output; the CLI reports the message and exits non-zero.
"""

from __future__ import annotations

from pathlib import Path


class BlogBuildError(Exception):
    """Base class for all fatal build errors."""


class ImageNotFoundError(BlogBuildError):
    """An image referenced in content does not exist under the image tree."""

    def __init__(self, file_name: str, search_root: Path) -> None:
        self.file_name = file_name
        self.search_root = search_root
        super().__init__(f"Image {file_name} could not be found under {search_root}")


class AssetIOError(BlogBuildError):
    """A file could not be read, decoded, copied or written."""

    def __init__(
        self,
        path: Path,
        cause: BaseException | None = None,
        destination: Path | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        self.destination = destination

        message = f"I/O failure on {path}"
        if destination is not None:
            message += f" -> {destination}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class MalformedSourceError(BlogBuildError):
    """Authored XML (or a template) lacks an expected node or attribute."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Malformed source {path}: {detail}")


class SettingsError(ValueError):
    """The build configuration is missing or invalid."""


__all__ = [
    "AssetIOError",
    "BlogBuildError",
    "ImageNotFoundError",
    "MalformedSourceError",
    "SettingsError",
]
