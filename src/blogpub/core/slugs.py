"""Unique slug assignment: probe the blog index and negotiate a free candidate.

The probe/decide/write sequence is not atomic. Two sessions negotiating the
same base title at once can both settle on one candidate; the store's unique
slug index rejects the second write and the caller re-negotiates.
"""

import hashlib
from uuid import uuid4

import structlog

from blogpub.core.utils.slug import generate_slug
from blogpub.crud.repo import BlogRepo
from blogpub.errors import SlugProbeError, StoreError


logger = structlog.get_logger()

FALLBACK_PREFIX = "post"


class SlugProber:
    """Read-only lookup of the blog currently owning a slug.

    fail_open=True reports 'no conflict' when the store is unreachable;
    otherwise the failure is raised as SlugProbeError.
    """

    def __init__(self, repo: BlogRepo, fail_open: bool = False):
        self.repo = repo
        self.fail_open = fail_open

    def probe(self, slug: str) -> str | None:
        """Return the id of the blog owning `slug`, or None if it is free."""
        try:
            blogs = self.repo.list_by_slug(slug)
        except StoreError as e:
            if self.fail_open:
                logger.warning("slug_probe_failed_open", slug=slug, error=str(e))
                return None
            logger.error("slug_probe_failed", slug=slug, error=str(e))
            raise SlugProbeError(f"Could not check slug '{slug}': {e}") from e
        return blogs[0].id if blogs else None


def fallback_slug(seed: str | None = None) -> str:
    """Slug for titles that normalize to nothing.

    Derived from `seed` (the blog id) when given, so one blog always falls back
    to the same slug; random otherwise.
    """
    token = hashlib.sha256(seed.encode()).hexdigest() if seed else uuid4().hex
    return f"{FALLBACK_PREFIX}-{token[:8]}"


def negotiate_slug(title: str, prober: SlugProber, self_id: str | None = None) -> str:
    """Find a slug for `title` that no other blog owns.

    Tries the bare slug, then slug-1, slug-2, ... until the prober reports no
    owner or the owner is `self_id` (the blog being saved keeps its own slug).
    """
    base = generate_slug(title)
    if not base:
        base = fallback_slug(self_id)
        logger.info("slug_fallback", title=title, slug=base)

    candidate = base
    counter = 1
    while True:
        owner = prober.probe(candidate)
        if owner is None or owner == self_id:
            return candidate
        candidate = f"{base}-{counter}"
        counter += 1
