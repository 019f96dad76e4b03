# polyzip/src/polyzip/core/config.py

import logging

from pydantic import Field
from pydantic_settings import BaseSettings

from polyzip.core.settings import DEFAULT_BACKUP_SUFFIX, DEFAULT_COPY_CHUNK_SIZE


class Settings(BaseSettings):
    log_level: str = Field(default="WARNING")
    # Appended to the full file name, so "a.zip" is backed up as "a.zip.bak"
    backup_suffix: str = Field(default=DEFAULT_BACKUP_SUFFIX, min_length=1)
    copy_chunk_size: int = Field(default=DEFAULT_COPY_CHUNK_SIZE, gt=0)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "POLYZIP_",
        "extra": "ignore"
    }

    def resolved_log_level(self, verbose: bool = False) -> int:
        if verbose:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


# Instantiate settings
settings = Settings()
