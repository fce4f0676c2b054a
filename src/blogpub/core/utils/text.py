"""Plain-text helpers for blog listings"""

import re
from datetime import datetime


TAG_RE = re.compile(r'<[^>]*>')


def strip_html(html: str) -> str:
    """Remove markup tags, keeping their text content."""
    return TAG_RE.sub('', html)


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length characters, appending '...' when shortened."""
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def excerpt(html: str | None, max_length: int = 160) -> str:
    """Single-line preview of editor html for listings."""
    text = ' '.join(strip_html(html or '').split())
    return truncate(text, max_length)


def format_date(value: datetime) -> str:
    """'January 5, 2025' style date for display."""
    return f"{value:%B} {value.day}, {value.year}"
