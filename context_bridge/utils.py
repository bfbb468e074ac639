"""Utilities supporting Context Bridge modules."""

from __future__ import annotations

import random
import re
import string
import time
from datetime import datetime, timezone


_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str, *, size: int = 8) -> str:
    """Generate a short unique identifier with a readable prefix."""

    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(size))
    return f"{prefix}-{timestamp_ms()}-{suffix}"


def timestamp_ms() -> int:
    """Return current UTC timestamp in milliseconds."""

    return int(time.time() * 1000)


def from_timestamp_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


_ISO_DATETIME = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2})?)"
    r"(?:[.,](?P<fraction>\d+))?"
    r"(?P<offset>[zZ]|[+-]\d{2}(?::?\d{2})?)?$"
)


def _normalise_iso(text: str) -> str:
    match = _ISO_DATETIME.match(text)
    if match is None:
        return text
    normalised = match.group("base")
    fraction = match.group("fraction")
    if fraction:
        normalised += "." + (fraction + "000000")[:6]
    offset = match.group("offset")
    if offset:
        if offset in ("Z", "z"):
            offset = "+00:00"
        else:
            digits = offset[1:].replace(":", "")
            offset = f"{offset[0]}{digits[:2]}:{digits[2:4] or '00'}"
        normalised += offset
    return normalised


def parse_timestamp(raw: str) -> datetime | None:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Returns ``None`` when the value cannot be parsed. Naive values are read as
    UTC. ``Z`` suffixes, fractional seconds of any precision and ``+HHMM`` /
    ``+HH`` offsets are normalised first so every supported Python accepts them.
    """

    if not isinstance(raw, str) or not raw.strip():
        return None
    text = _normalise_iso(raw.strip())
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
