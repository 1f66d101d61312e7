from __future__ import annotations


def mime_label(mime_type: str | None) -> str:
    """
    Short, upper-cased label for a MIME type as shown in the report.

    "text/plain" -> "PLAIN"; a value without subtype is returned as-is;
    an empty value becomes "Unknown".
    """
    if not mime_type:
        return "Unknown"
    _, sep, subtype = mime_type.partition("/")
    if sep and subtype:
        return subtype.upper()
    return mime_type
