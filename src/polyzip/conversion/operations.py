"""
The three things polyzip does to an archive: list converted names, convert into
a new archive, and convert in place behind a rename-based backup.

Listing is best effort, one result per entry. Converting is all or nothing,
the first undecodable name aborts the whole rewrite.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Union

from polyzip.archive import ArchiveReader, ArchiveWriter
from polyzip.conversion.encoding import convert_name, decode_name
from polyzip.core.config import settings
from polyzip.core.errors import BackupError, RestoreError
from polyzip.schemas.entries import ConversionResult

logger = logging.getLogger(__name__)


def list_names(archive_path: Union[str, Path], encoding: str) -> Iterator[ConversionResult]:
    """
    Yield the conversion of every entry name, in archive order.
    Open and format errors propagate; decode failures come back as results.
    """
    with ArchiveReader(archive_path) as reader:
        for entry in reader.entries():
            yield convert_name(entry.raw_name, encoding)


def convert_archive(source_path: Union[str, Path], destination_path: Union[str, Path],
                    encoding: str, chunk_size: Optional[int] = None) -> int:
    """
    Write a copy of ``source_path`` to ``destination_path`` with every entry
    name decoded from ``encoding``. Payloads are copied without recompression.

    The destination is created (or truncated) before the first entry is read.
    If anything fails it is left without a central directory and must not be
    trusted. Returns the number of entries written.
    """
    with ArchiveReader(source_path, chunk_size=chunk_size) as reader:
        with ArchiveWriter(destination_path) as writer:
            for entry in reader.entries():
                name = decode_name(entry.raw_name, encoding)
                writer.copy_entry(reader, entry, name)
            count = len(writer)
    logger.info("Converted %d entries from %s into %s", count, source_path, destination_path)
    return count


def backup_path_for(path: Union[str, Path], suffix: Optional[str] = None) -> Path:
    """Sibling of ``path`` with the backup suffix appended to the whole file name."""
    path = Path(path)
    return path.with_name(path.name + (suffix or settings.backup_suffix))


def convert_in_place(path: Union[str, Path], encoding: str, create_backup: bool = True,
                     backup_suffix: Optional[str] = None, chunk_size: Optional[int] = None) -> Path:
    """
    Convert the archive at ``path`` in place.

    The original is first renamed to its backup path, then converted from the
    backup into a new file at ``path``. On success the backup is kept or
    removed depending on ``create_backup``. On failure the backup is renamed
    back over ``path`` and the original error is re-raised; if that rename
    fails too, RestoreError is raised and the backup stays on disk.

    Returns the backup path (which no longer exists when ``create_backup`` is false).
    """
    path = Path(path)
    backup_path = backup_path_for(path, backup_suffix)

    try:
        os.rename(path, backup_path)
    except OSError as e:
        raise BackupError(path, backup_path, e.strerror or str(e)) from e
    logger.info("Moved %s to %s", path, backup_path)

    try:
        convert_archive(backup_path, path, encoding, chunk_size=chunk_size)
    except BaseException as e:
        logger.info("Conversion of %s failed, restoring it from %s", path, backup_path)
        try:
            os.replace(backup_path, path)
        except OSError as restore_error:
            raise RestoreError(path, backup_path, e,
                               restore_error.strerror or str(restore_error)) from restore_error
        raise

    if not create_backup:
        os.remove(backup_path)
        logger.info("Removed backup %s", backup_path)
    return backup_path
