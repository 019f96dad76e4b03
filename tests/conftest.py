"""
Shared fixtures: zip archives whose stored names are arbitrary (non UTF-8) bytes.

zipfile only writes ASCII or UTF-8 names, so each entry is written under an
ASCII placeholder of the same length, then the placeholder bytes are swapped
for the raw name in both the local header and the central directory.
"""

import hashlib
import zipfile
from pathlib import Path
from typing import List, Sequence, Tuple

import pytest

# (raw name, payload, compression method)
Entry = Tuple[bytes, bytes, int]

FIXED_DATE = (2021, 6, 1, 12, 30, 0)


def _placeholder(index: int, length: int) -> bytes:
    stem = b"#%d#" % index
    assert len(stem) <= length, "raw test names must be at least as long as their placeholder"
    return stem.ljust(length, b"#")


def make_legacy_zip(path: Path, entries: Sequence[Entry]) -> Path:
    placeholders: List[Tuple[bytes, bytes]] = []
    with zipfile.ZipFile(path, "w") as zf:
        for index, (raw, payload, compress_type) in enumerate(entries):
            placeholder = _placeholder(index, len(raw))
            info = zipfile.ZipInfo(placeholder.decode("ascii"), date_time=FIXED_DATE)
            info.compress_type = compress_type
            info.external_attr = 0o644 << 16
            zf.writestr(info, payload)
            placeholders.append((placeholder, raw))

    data = path.read_bytes()
    for placeholder, raw in placeholders:
        assert data.count(placeholder) == 2, "placeholder must appear once per header"
        data = data.replace(placeholder, raw)
    path.write_bytes(data)
    return path


def sha256(path: Path) -> str:
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


CAFE_CP1252 = "café.txt".encode("cp1252")
NAIVE_CP1252 = "naïve résumé.md".encode("cp1252")
KANJI_SJIS = "日本語.txt".encode("shift_jis")
# 0x81 has no mapping in cp1252
UNDECODABLE_CP1252 = b"bad\x81name.txt"


@pytest.fixture
def cafe_zip(tmp_path: Path) -> Path:
    return make_legacy_zip(tmp_path / "cafe.zip", [
        (CAFE_CP1252, b"bonjour, le monde\n" * 20, zipfile.ZIP_DEFLATED),
    ])


@pytest.fixture
def cp1252_zip(tmp_path: Path) -> Path:
    return make_legacy_zip(tmp_path / "western.zip", [
        (CAFE_CP1252, b"espresso " * 50, zipfile.ZIP_DEFLATED),
        (b"plain.txt", b"just ascii", zipfile.ZIP_STORED),
        (NAIVE_CP1252, b"curriculum vitae", zipfile.ZIP_STORED),
    ])


@pytest.fixture
def broken_zip(tmp_path: Path) -> Path:
    """Second of three names cannot be decoded as cp1252."""
    return make_legacy_zip(tmp_path / "broken.zip", [
        (CAFE_CP1252, b"first", zipfile.ZIP_STORED),
        (UNDECODABLE_CP1252, b"second", zipfile.ZIP_STORED),
        (b"third.txt", b"third", zipfile.ZIP_DEFLATED),
    ])
