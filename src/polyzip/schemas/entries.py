"""
Pydantic schemas for archive entries and name conversion results.
"""

import zipfile
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from polyzip.core.errors import render_raw_name


class ArchiveEntry(BaseModel):
    """One stored file record, addressed by its position in the central directory."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    index: int
    raw_name: bytes
    info: zipfile.ZipInfo

    @property
    def compress_type(self) -> int:
        return self.info.compress_type

    @property
    def compress_size(self) -> int:
        return self.info.compress_size

    @property
    def file_size(self) -> int:
        return self.info.file_size

    @property
    def crc(self) -> int:
        return self.info.CRC

    @property
    def date_time(self) -> Tuple[int, int, int, int, int, int]:
        return self.info.date_time

    @property
    def display_name(self) -> str:
        return render_raw_name(self.raw_name)


class ConversionResult(BaseModel):
    """Either the UTF-8 name of an entry or the reason it could not be decoded."""
    raw_name: bytes
    encoding: str
    name: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def display_name(self) -> str:
        return render_raw_name(self.raw_name)

    def render(self) -> str:
        """The line printed for this entry by `list`."""
        if self.ok:
            return f"{self.display_name} -> {self.name}"
        return f"{self.display_name}: {self.error}"
