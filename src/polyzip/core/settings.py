"""
Project-wide constants or "settings" that are unlikely to change at runtime.
"""

# General purpose flag bits (APPNOTE 4.4.4)
FLAG_ENCRYPTED = 0x0001
FLAG_DATA_DESCRIPTOR = 0x0008
FLAG_UTF8_NAME = 0x0800

# Extra field header ids the writer regenerates or that would contradict a new name
EXTRA_ZIP64 = 0x0001
EXTRA_UNICODE_PATH = 0x7075
REWRITTEN_EXTRA_IDS = (EXTRA_ZIP64, EXTRA_UNICODE_PATH)

# Local file header: signature, version, flags, method, time, date, crc, sizes, name/extra lengths
LOCAL_HEADER_FORMAT = "<4s2B4HL2L2H"
LOCAL_HEADER_SIGNATURE = b"PK\x03\x04"
LOCAL_HEADER_NAME_LENGTH = 10
LOCAL_HEADER_EXTRA_LENGTH = 11

# zipfile decodes names without the UTF-8 flag with this codec
LEGACY_NAME_CODEC = "cp437"

DEFAULT_BACKUP_SUFFIX = ".bak"
DEFAULT_COPY_CHUNK_SIZE = 1024 * 1024
