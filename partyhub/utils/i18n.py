"""Page language selection from the Accept-Language header."""

from fastapi import Request

DEFAULT_LANGUAGE = "en"


def detect_language(request: Request) -> str:
    """German for any ``de*`` entry, English otherwise."""
    header = request.headers.get("accept-language", "")
    for part in header.split(","):
        code = part.split(";")[0].strip().lower()
        if code.startswith("de"):
            return "de"
    return DEFAULT_LANGUAGE
