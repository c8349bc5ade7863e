from .format import format_file_size, format_timestamp
from .logging import get_logger, setup_logging
from .time import parse_optional_rfc3339, parse_rfc3339

__all__ = [
    "format_file_size",
    "format_timestamp",
    "setup_logging",
    "get_logger",
    "parse_rfc3339",
    "parse_optional_rfc3339",
]
