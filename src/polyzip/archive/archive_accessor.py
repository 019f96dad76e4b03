"""Direct zip archive accessor component.

This module reads entry names as the raw bytes stored in the archive and copies
entries from one archive to another without decompressing them, changing only
the recorded name. The standard library zipfile module parses the central
directory and writes the end records; payload bytes never pass through a codec.
"""

import logging
import struct
import zipfile
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from polyzip.core.config import settings
from polyzip.core.errors import ArchiveFormatError, ArchiveOpenError
from polyzip.core.settings import (
    FLAG_DATA_DESCRIPTOR,
    FLAG_UTF8_NAME,
    LEGACY_NAME_CODEC,
    LOCAL_HEADER_EXTRA_LENGTH,
    LOCAL_HEADER_FORMAT,
    LOCAL_HEADER_NAME_LENGTH,
    LOCAL_HEADER_SIGNATURE,
    REWRITTEN_EXTRA_IDS,
)
from polyzip.schemas.entries import ArchiveEntry

logger = logging.getLogger(__name__)

LOCAL_HEADER_SIZE = struct.calcsize(LOCAL_HEADER_FORMAT)


def raw_name(info: zipfile.ZipInfo) -> bytes:
    """Return the name bytes exactly as stored in the central directory.

    zipfile has already decoded the name, as UTF-8 when flag bit 11 is set and
    as CP437 otherwise. CP437 maps every byte value to a distinct character, so
    encoding ``orig_filename`` with the same codec gives the stored bytes back.
    """
    if info.flag_bits & FLAG_UTF8_NAME:
        return info.orig_filename.encode("utf-8")
    return info.orig_filename.encode(LEGACY_NAME_CODEC)


def strip_extra(extra: bytes, ids: Tuple[int, ...]) -> bytes:
    """Drop the extra field records whose header id is in ``ids``."""
    kept = []
    i = 0
    while i + 4 <= len(extra):
        header_id, size = struct.unpack("<HH", extra[i:i + 4])
        end = i + 4 + size
        if header_id not in ids:
            kept.append(extra[i:end])
        i = end
    # Trailing bytes too short for a record header are kept as they were
    if i < len(extra):
        kept.append(extra[i:])
    return b"".join(kept)


class ArchiveReader:
    """Read-only view of a zip archive exposing raw names and stored payloads."""

    def __init__(self, archive_path: Union[str, Path], chunk_size: Optional[int] = None):
        """Open the archive and read its central directory.

        Args:
            archive_path: Path to the zip file
            chunk_size: Block size used when streaming stored payloads

        Raises:
            ArchiveOpenError: If the file cannot be opened
            ArchiveFormatError: If the file is not a valid zip archive
        """
        self.archive_path = Path(archive_path)
        self.chunk_size = chunk_size or settings.copy_chunk_size

        try:
            self._fp: BinaryIO = open(self.archive_path, "rb")
        except OSError as e:
            raise ArchiveOpenError(self.archive_path, e.strerror or str(e)) from e

        try:
            self._zip = zipfile.ZipFile(self._fp, "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, EOFError) as e:
            self._fp.close()
            raise ArchiveFormatError(self.archive_path, str(e)) from e
        except OSError:
            self._fp.close()
            raise
        logger.debug("Opened %s with %d entries", self.archive_path, len(self._zip.infolist()))

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __len__(self) -> int:
        return len(self._zip.infolist())

    def close(self):
        self._zip.close()
        self._fp.close()

    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield entries in central directory order."""
        for index, info in enumerate(self._zip.infolist()):
            yield ArchiveEntry(index=index, raw_name=raw_name(info), info=info)

    def _payload_offset(self, entry: ArchiveEntry) -> int:
        info = entry.info
        self._fp.seek(info.header_offset)
        header = self._fp.read(LOCAL_HEADER_SIZE)
        if len(header) != LOCAL_HEADER_SIZE:
            raise ArchiveFormatError(self.archive_path,
                                     f"truncated local header for entry {entry.index}")
        fields = struct.unpack(LOCAL_HEADER_FORMAT, header)
        if fields[0] != LOCAL_HEADER_SIGNATURE:
            raise ArchiveFormatError(self.archive_path,
                                     f"bad local header signature for entry {entry.index}")
        return (info.header_offset + LOCAL_HEADER_SIZE
                + fields[LOCAL_HEADER_NAME_LENGTH] + fields[LOCAL_HEADER_EXTRA_LENGTH])

    def iter_payload(self, entry: ArchiveEntry) -> Iterator[bytes]:
        """Yield the entry's stored (still compressed) bytes in chunks."""
        self._fp.seek(self._payload_offset(entry))
        remaining = entry.compress_size
        while remaining > 0:
            chunk = self._fp.read(min(self.chunk_size, remaining))
            if not chunk:
                raise ArchiveFormatError(self.archive_path,
                                         f"entry {entry.index} ends {remaining} bytes early")
            remaining -= len(chunk)
            yield chunk


class ArchiveWriter:
    """Builds a new zip archive out of entries copied verbatim from other archives.

    Used as a context manager: a clean exit writes the central directory, an
    exception discards it so the file is never mistaken for a complete archive.
    """

    def __init__(self, archive_path: Union[str, Path]):
        self.archive_path = Path(archive_path)
        try:
            self._fp: BinaryIO = open(self.archive_path, "wb")
        except OSError as e:
            raise ArchiveOpenError(self.archive_path, e.strerror or str(e)) from e
        self._zip = zipfile.ZipFile(self._fp, "w", allowZip64=True)
        self._closed = False

    def __enter__(self) -> "ArchiveWriter":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.finish()
        else:
            self.abort()

    def __len__(self) -> int:
        return len(self._zip.filelist)

    def copy_entry(self, reader: ArchiveReader, entry: ArchiveEntry, name: str) -> zipfile.ZipInfo:
        """Append ``entry`` from ``reader`` under ``name`` without recompressing it.

        Everything but the name is carried over: timestamp, compression method,
        CRC, sizes, attributes, comment and extra fields (minus ZIP64 and
        Unicode Path records, which the writer regenerates or which would
        contradict the new name).
        """
        source = entry.info
        zinfo = zipfile.ZipInfo(name, date_time=entry.date_time)
        zinfo.compress_type = entry.compress_type
        zinfo.comment = source.comment
        zinfo.extra = strip_extra(source.extra, REWRITTEN_EXTRA_IDS)
        zinfo.create_system = source.create_system
        zinfo.create_version = source.create_version
        zinfo.extract_version = source.extract_version
        zinfo.reserved = source.reserved
        # Sizes and CRC go into the local header, so no data descriptor follows the payload
        zinfo.flag_bits = source.flag_bits & ~(FLAG_DATA_DESCRIPTOR | FLAG_UTF8_NAME)
        zinfo.internal_attr = source.internal_attr
        zinfo.external_attr = source.external_attr
        zinfo.CRC = entry.crc
        zinfo.compress_size = entry.compress_size
        zinfo.file_size = entry.file_size

        if zinfo.filename in self._zip.NameToInfo:
            logger.warning("Duplicate name in %s: %s", self.archive_path, zinfo.filename)

        zinfo.header_offset = self._fp.tell()
        self._fp.write(zinfo.FileHeader())
        for chunk in reader.iter_payload(entry):
            self._fp.write(chunk)

        # Same bookkeeping ZipFile.mkdir does, so close() lists this entry
        self._zip.filelist.append(zinfo)
        self._zip.NameToInfo[zinfo.filename] = zinfo
        self._zip.start_dir = self._fp.tell()
        logger.debug("Copied entry %d %s as %s (%d bytes stored)", entry.index,
                     entry.display_name, name, zinfo.compress_size)
        return zinfo

    def finish(self):
        """Write the central directory and close the file."""
        if self._closed:
            return
        self._closed = True
        try:
            self._zip.close()
        finally:
            self._fp.close()

    def abort(self):
        """Close the file without writing a central directory."""
        if self._closed:
            return
        self._closed = True
        # close() writes the end records whenever this flag is set; clearing it
        # is the only way to release the ZipFile without them
        self._zip._didModify = False
        try:
            self._zip.close()
        finally:
            self._fp.close()
        logger.debug("Abandoned incomplete archive %s", self.archive_path)
