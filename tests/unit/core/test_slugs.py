"""Unit tests for core/slugs.py (prober + negotiator)"""

import re

import pytest

from blogpub.core.slugs import SlugProber, fallback_slug, negotiate_slug
from blogpub.crud.memory_repo import MemoryRepo
from blogpub.crud.models import Blog
from blogpub.errors import SlugProbeError, StoreError


class UnreachableRepo(MemoryRepo):
    """A store whose slug index cannot be queried."""

    def list_by_slug(self, slug):
        raise StoreError("connection refused")


class RecordingProber(SlugProber):
    def __init__(self, repo):
        super().__init__(repo)
        self.probed = []

    def probe(self, slug):
        self.probed.append(slug)
        return super().probe(slug)


def _add(repo, slug, user_id="user-1", title="x") -> Blog:
    return repo.add_blog(Blog(user_id=user_id, title=title, slug=slug))


# --- probe ---

def test_probe_free_slug(repo):
    """An unused slug has no owner."""
    assert SlugProber(repo).probe("nothing-here") is None


def test_probe_returns_owner(repo, blog):
    assert SlugProber(repo).probe("hello-world") == blog.id


def test_probe_failure_fails_closed_by_default():
    """Store errors abort the probe with a retryable SlugProbeError."""
    with pytest.raises(SlugProbeError):
        SlugProber(UnreachableRepo()).probe("hello-world")


def test_probe_failure_fail_open_reports_no_conflict():
    assert SlugProber(UnreachableRepo(), fail_open=True).probe("hello-world") is None


def test_probe_error_is_a_store_error():
    """Callers handling StoreError also handle probe failures."""
    assert issubclass(SlugProbeError, StoreError)


# --- negotiate ---

def test_negotiate_unused_title(repo):
    assert negotiate_slug("My First Post", SlugProber(repo)) == "my-first-post"


def test_negotiate_conflict_gets_suffix(repo, blog):
    """A second record with the same title gets the -1 suffix."""
    assert negotiate_slug("Hello, World!", SlugProber(repo)) == "hello-world-1"


def test_negotiate_skips_taken_suffixes(repo, blog):
    _add(repo, "hello-world-1")
    _add(repo, "hello-world-2")
    prober = RecordingProber(repo)
    assert negotiate_slug("Hello World", prober) == "hello-world-3"
    assert prober.probed == ["hello-world", "hello-world-1", "hello-world-2", "hello-world-3"]


def test_negotiate_own_slug_is_kept(repo, blog):
    """Re-negotiating the same record with an unchanged title keeps its slug."""
    assert negotiate_slug("Hello World", SlugProber(repo), self_id=blog.id) == "hello-world"


def test_negotiate_own_suffixed_slug_does_not_grow(repo, blog):
    """A record already holding hello-world-1 keeps it instead of moving to -2."""
    mine = _add(repo, "hello-world-1", user_id="user-2")
    assert negotiate_slug("Hello World", SlugProber(repo), self_id=mine.id) == "hello-world-1"


def test_negotiate_other_owner_is_not_exempt(repo, blog):
    other = _add(repo, "other", user_id="user-2")
    assert negotiate_slug("Hello World", SlugProber(repo), self_id=other.id) == "hello-world-1"


def test_negotiated_slug_is_owned_after_write(repo, blog):
    """Single writer: once written, the prober reports the new record as owner of its slug."""
    slug = negotiate_slug("Hello World", SlugProber(repo))
    created = _add(repo, slug)
    assert SlugProber(repo).probe(slug) == created.id


@pytest.mark.parametrize("title", ["", "!!!", "   "])
def test_negotiate_empty_slug_falls_back_to_token(repo, title):
    slug = negotiate_slug(title, SlugProber(repo))
    assert re.match(r'^post-[0-9a-f]{8}$', slug)


def test_negotiate_fail_closed_propagates():
    with pytest.raises(SlugProbeError):
        negotiate_slug("Hello World", SlugProber(UnreachableRepo()))


def test_negotiate_fail_open_returns_base():
    """Fail-open negotiation completes with the bare slug even though nothing was checked."""
    assert negotiate_slug("Hello World", SlugProber(UnreachableRepo(), fail_open=True)) == "hello-world"


def test_negotiate_empty_slug_stable_for_same_blog(repo):
    """The fallback is seeded by the blog's id, so re-negotiating returns the same slug."""
    first = negotiate_slug("!!!", SlugProber(repo), self_id="blog-1")
    assert negotiate_slug("!!!", SlugProber(repo), self_id="blog-1") == first
    assert negotiate_slug("!!!", SlugProber(repo), self_id="blog-2") != first
    assert first == fallback_slug("blog-1")
