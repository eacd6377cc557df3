"""
Configuration for the zulumorph service and CLI.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import InputValidationError

ANALYZER_VERSION = "1.0.0"
SERVICE_NAME = "Zulu NLP Processing System"

MIB = 1024 * 1024


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InputValidationError(f"Environment variable {name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServiceConfig:
    """Runtime settings. Defaults mirror the limits of the upload API."""
    host: str = "0.0.0.0"
    port: int = 3000
    max_file_size: int = 10 * MIB  # per uploaded file
    max_files: int = 10  # per /api/process-files request
    max_request_size: int = 50 * MIB  # whole request body
    workers: int = 1  # thread pool size for batch items and lines
    log_file: Optional[str] = "zulumorph.log"
    debug: bool = False

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """
        Build a config from environment variables.

        PORT, ZULUMORPH_HOST, ZULUMORPH_MAX_FILE_SIZE, ZULUMORPH_MAX_FILES,
        ZULUMORPH_MAX_REQUEST_SIZE,
        ZULUMORPH_WORKERS, ZULUMORPH_LOG_FILE (empty string disables the file
        log) and ZULUMORPH_DEBUG.
        """
        defaults = cls()
        log_file = os.environ.get("ZULUMORPH_LOG_FILE", defaults.log_file)
        return cls(
            host=os.environ.get("ZULUMORPH_HOST", defaults.host),
            port=_env_int("PORT", defaults.port),
            max_file_size=_env_int("ZULUMORPH_MAX_FILE_SIZE", defaults.max_file_size),
            max_files=_env_int("ZULUMORPH_MAX_FILES", defaults.max_files),
            max_request_size=_env_int("ZULUMORPH_MAX_REQUEST_SIZE", defaults.max_request_size),
            workers=max(1, _env_int("ZULUMORPH_WORKERS", defaults.workers)),
            log_file=log_file or None,
            debug=_env_bool("ZULUMORPH_DEBUG", defaults.debug),
        )
