"""
Decoding of raw entry names through Python's codec registry.
"""

from polyzip.core.errors import NameDecodeError
from polyzip.schemas.entries import ConversionResult


def decode_name(raw_name: bytes, encoding: str) -> str:
    """
    Decode raw name bytes under ``encoding``, strictly.
    The encoding name is not validated up front; an unknown one fails here,
    for every name, the same way an undecodable byte sequence does.
    """
    try:
        return raw_name.decode(encoding, errors="strict")
    except LookupError as e:
        raise NameDecodeError(raw_name, encoding, str(e)) from e
    except UnicodeError as e:
        raise NameDecodeError(raw_name, encoding, str(e)) from e


def convert_name(raw_name: bytes, encoding: str) -> ConversionResult:
    try:
        name = decode_name(raw_name, encoding)
    except NameDecodeError as e:
        return ConversionResult(raw_name=raw_name, encoding=encoding, error=e.reason)
    return ConversionResult(raw_name=raw_name, encoding=encoding, name=name)
