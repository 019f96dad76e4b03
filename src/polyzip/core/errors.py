"""
Exceptions raised by polyzip operations.

Every failure the command line reports derives from PolyzipError, so the CLI
can turn any of them into a single message and a non-zero exit status.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


def render_raw_name(raw_name: bytes) -> str:
    """Render raw name bytes for humans, replacing anything that is not UTF-8."""
    return raw_name.decode("utf-8", errors="replace")


class PolyzipError(Exception):
    """Base class for all polyzip errors."""


class ArchiveOpenError(PolyzipError):
    """A source archive could not be opened or a destination could not be created."""

    def __init__(self, path: PathLike, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to open '{self.path}': {reason}")


class ArchiveFormatError(PolyzipError):
    """The archive's central directory or an entry header is unreadable."""

    def __init__(self, path: PathLike, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"'{self.path}' is not a readable zip archive: {reason}")


class NameDecodeError(PolyzipError):
    """Raw name bytes could not be decoded under the requested encoding."""

    def __init__(self, raw_name: bytes, encoding: str, reason: str):
        self.raw_name = raw_name
        self.encoding = encoding
        self.reason = reason
        super().__init__(reason)

    def describe(self) -> str:
        return f"cannot convert '{render_raw_name(self.raw_name)}' from {self.encoding}: {self.reason}"


class BackupError(PolyzipError):
    """Renaming the original archive to its backup path failed. Nothing was changed."""

    def __init__(self, path: PathLike, backup_path: PathLike, reason: str):
        self.path = Path(path)
        self.backup_path = Path(backup_path)
        self.reason = reason
        super().__init__(f"Failed to back up '{self.path}' to '{self.backup_path}': {reason}")


class RestoreError(PolyzipError):
    """
    Putting the backup back after a failed in-place conversion failed.

    The backup file is left where it is and is the only intact copy of the
    original archive; the original path may be missing or hold a partial file.
    """

    def __init__(self, path: PathLike, backup_path: PathLike,
                 cause: Optional[BaseException], reason: str):
        self.path = Path(path)
        self.backup_path = Path(backup_path)
        self.cause = cause
        self.reason = reason
        message = (f"Failed to restore '{self.path}' from backup '{self.backup_path}': {reason}")
        if cause is not None:
            message += f" (conversion failed with: {describe_error(cause)})"
        super().__init__(message)


def describe_error(exc: BaseException) -> str:
    """Human readable message for an error, whatever raised it."""
    if isinstance(exc, NameDecodeError):
        return exc.describe()
    text = str(exc)
    return text or type(exc).__name__
