"""Slug generation for blog titles and tag names"""

import re


SEPARATOR_RE = re.compile(r'[/\\|_]')
DISALLOWED_RE = re.compile(r'[^a-z0-9\s-]')
SLUG_RE = re.compile(r'^[a-z0-9]+(-[a-z0-9]+)*$')


def generate_slug(title: str) -> str:
    """Convert a title to a lowercase, hyphen-separated URL-safe slug.

    Path-like separators (/, \\, |, _) split words; every other character
    outside [a-z0-9], whitespace and '-' is dropped. Returns '' when nothing
    survives (e.g. '' or '!!!').
    """
    text = SEPARATOR_RE.sub(' ', title.lower())
    text = DISALLOWED_RE.sub('', text)
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def is_slug(value: str) -> bool:
    """True when value is a non-empty, already-normalized slug."""
    return bool(SLUG_RE.match(value))
