from __future__ import annotations

import re
from typing import Optional

from core.errors import ValidationError


_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CODE_RE = re.compile(r"^[A-Za-z0-9_-]+$")

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


def normalize_code(code: str) -> str:
    # Codes are interpolated into URL paths: keep them to a safe alphabet
    code_clean = (code or "").strip()
    if not code_clean:
        raise ValidationError("code must be non-empty")
    if not _CODE_RE.match(code_clean):
        raise ValidationError(f"Invalid code: {code_clean}")
    return code_clean


def normalize_version(version: Optional[int]) -> Optional[int]:
    if version is None:
        return None
    n = int(version)
    if n <= 0:
        raise ValidationError("version must be positive")
    return n


def normalize_limit(limit: Optional[int], *, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    if limit is None:
        return default
    n = int(limit)
    if n <= 0:
        raise ValidationError("limit must be positive")
    return min(n, maximum)


def normalize_date(date: Optional[str]) -> Optional[str]:
    if date is None or not date.strip():
        return None
    date_clean = date.strip()
    if not _DATE_RE.match(date_clean):
        raise ValidationError("date must have the format YYYY-MM-DD")
    return date_clean


_EVENT_ID_RE = re.compile(r"^[A-Za-z0-9_.-]+$")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def normalize_event_id(event_id: str) -> str:
    # Like normalize_code, but event ids may contain dots
    id_clean = (event_id or "").strip()
    if not id_clean:
        raise ValidationError("id must be non-empty")
    if id_clean in {".", ".."} or not _EVENT_ID_RE.match(id_clean):
        raise ValidationError(f"Invalid id: {id_clean}")
    return id_clean


def normalize_page(page: Optional[int]) -> int:
    if page is None:
        return 0
    n = int(page)
    if n < 0:
        raise ValidationError("page must be zero or positive")
    return n


def normalize_page_size(size: Optional[int]) -> int:
    return normalize_limit(size, default=DEFAULT_PAGE_SIZE, maximum=MAX_PAGE_SIZE)
