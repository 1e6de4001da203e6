import base64
import binascii
from datetime import date, datetime, timezone

FRENCH_WEEKDAYS = ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"]
FRENCH_MONTHS = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]


def parse_match_date(value: str) -> date:
    """Parse a fixture date (YYYY-MM-DD). No time zone conversion is applied."""
    return date.fromisoformat(value[:10])


def long_date(value: str) -> str:
    """Format a fixture date the way classic posters show it.

    Example: "2025-12-06" -> "SAMEDI 6 DÉCEMBRE"
    """
    d = parse_match_date(value)
    return f"{FRENCH_WEEKDAYS[d.weekday()]} {d.day} {FRENCH_MONTHS[d.month - 1]}".upper()


def short_date(value: str) -> str:
    """Format a fixture date as DD/MM/YYYY (program header)."""
    return parse_match_date(value).strftime("%d/%m/%Y")


def today_date() -> date:
    """Return today's date (UTC, server side)."""
    return datetime.now(timezone.utc).date()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def poster_filename(brand: str, home: str, away: str, extra: int = 0, ext: str = "jpg") -> str:
    """Build the export filename: "<brand> - <home> vs <away>.<ext>".

    Program posters append "+N" for the fixtures beyond the first one.
    """
    name = f"{brand.strip()} - {home.strip()} vs {away.strip()}"
    if extra:
        name = f"{name} +{extra}"
    return f"{name}.{ext}"


def decode_data_uri(uri: str) -> tuple[bytes, str]:
    """Decode a base64 data URI into (bytes, mime_type)."""
    header, _, payload = uri.partition(",")
    if not header.startswith("data:") or ";base64" not in header:
        raise ValueError("Not a base64 data URI")
    mime_type = header[5:].split(";", 1)[0] or "application/octet-stream"
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def extension_for(mime_type: str) -> str:
    return {
        "image/jpeg": "jpg",
        "image/jpg": "jpg",
        "image/png": "png",
        "image/webp": "webp",
    }.get(mime_type.lower(), "bin")


def mime_for(path: str) -> str:
    """Guess an image mime type from a key or filename extension."""
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return {
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "webp": "image/webp",
    }.get(ext, "application/octet-stream")
