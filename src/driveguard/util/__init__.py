from .mime import mime_label
from .time import EARLIEST, now_utc, parse_rfc3339, to_rfc3339, to_rfc3339_or_none

__all__ = [
    "mime_label",
    "EARLIEST",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "to_rfc3339_or_none",
]
