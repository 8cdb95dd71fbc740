from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from emulation.exceptions import ValidationError
from emulation.schemas.button import BUTTON_TYPES

_NUMBER_RE = re.compile(r"[0-9]+")

# largest integer SQLite and BSON can store
INT64_MAX = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_week_number(name: str | None) -> Optional[int]:
    """First integer in a week name ("Week 5" -> 5, "Tuần 12 (HK2)" -> 12), else None."""
    if not name:
        return None
    m = _NUMBER_RE.search(name)
    if not m:
        return None
    number = int(m.group(0))
    return number if number <= INT64_MAX else None


def require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required", field=field)
    return text


def require_button_type(value: str | None) -> str:
    if value not in BUTTON_TYPES:
        raise ValidationError(
            f"type must be one of {', '.join(BUTTON_TYPES)}", field="type", context={"value": value}
        )
    return value
