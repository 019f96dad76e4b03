from polyzip.archive.archive_accessor import ArchiveReader, ArchiveWriter, raw_name

__all__ = ["ArchiveReader", "ArchiveWriter", "raw_name"]
