"""Blog operations: create, save, publish, tag, delete and guest reads.

Every write that sets a slug negotiates it first. If the store still rejects
the slug (another session won the race), the slug is negotiated again, up to
`conflict_retries` extra attempts.
"""

from datetime import datetime
from typing import Callable

import structlog

from blogpub.core.slugs import SlugProber, negotiate_slug
from blogpub.core.tags import Tag
from blogpub.core.utils.slug import is_slug
from blogpub.core.validation import validate_blog_form, validate_title
from blogpub.crud.models import Blog, BlogState, TagReference, blog_ref, new_id
from blogpub.crud.repo import BlogRepo
from blogpub.errors import BlogNotFoundError, SlugConflictError


logger = structlog.get_logger()


def get_blog(repo: BlogRepo, blog_id: str) -> Blog:
    """Return the blog or raise BlogNotFoundError."""
    blog = repo.get_blog(blog_id)
    if blog is None:
        raise BlogNotFoundError(f"Blog {blog_id} not found")
    return blog


def _write_with_slug(
    repo: BlogRepo,
    title: str,
    write: Callable[[str], Blog],
    self_id: str | None,
    fail_open: bool,
    conflict_retries: int,
    ) -> Blog:
    prober = SlugProber(repo, fail_open=fail_open)
    attempt = 0
    while True:
        slug = negotiate_slug(title, prober, self_id)
        try:
            return write(slug)
        except SlugConflictError:
            attempt += 1
            if attempt > conflict_retries:
                logger.error("slug_conflict_unresolved", slug=slug, attempts=attempt)
                raise
            logger.warning("slug_conflict_retry", slug=slug, attempt=attempt)


def create_blog(
    repo: BlogRepo,
    user_id: str,
    title: str,
    *,
    fail_open: bool = False,
    conflict_retries: int = 3,
    ) -> Blog:
    """Create a DRAFT blog with a freshly negotiated slug.

    The id is assigned up front and passed as `self_id`; no stored blog owns it
    yet, and it seeds the fallback slug so later saves keep the same one.
    """
    title = validate_title(title)
    blog_id = new_id()

    def write(slug: str) -> Blog:
        return repo.add_blog(Blog(id=blog_id, user_id=user_id, title=title, slug=slug, state=BlogState.draft))

    blog = _write_with_slug(repo, title, write, blog_id, fail_open, conflict_retries)
    logger.info("blog_created", blog_id=blog.id, slug=blog.slug, user_id=user_id)
    return blog


def save_blog(
    repo: BlogRepo,
    blog_id: str,
    title: str,
    content: str,
    cover_image: str | None = None,
    *,
    content_json: str | None = None,
    fail_open: bool = False,
    conflict_retries: int = 3,
    ) -> Blog:
    """Validate and persist editor content, re-negotiating the slug for the (possibly new) title.

    A missing cover_image leaves the stored one untouched.
    """
    form = validate_blog_form(title, content, cover_image)
    get_blog(repo, blog_id)

    def write(slug: str) -> Blog:
        blog = get_blog(repo, blog_id)
        blog.title = form.title
        blog.slug = slug
        blog.content_html = form.content
        blog.content_json = content_json if content_json is not None else form.content
        if form.cover_image:
            blog.cover_image = form.cover_image
        blog.updated_at = datetime.now()
        return repo.update_blog(blog)

    blog = _write_with_slug(repo, form.title, write, blog_id, fail_open, conflict_retries)
    logger.info("blog_saved", blog_id=blog.id, slug=blog.slug)
    return blog


def set_state(repo: BlogRepo, blog_id: str, state: BlogState) -> Blog:
    blog = get_blog(repo, blog_id)
    blog.state = state
    blog.updated_at = datetime.now()
    blog = repo.update_blog(blog)
    logger.info("blog_state_changed", blog_id=blog_id, state=state.value)
    return blog


def toggle_state(repo: BlogRepo, blog_id: str) -> Blog:
    """Flip DRAFT <-> PUBLISHED."""
    blog = get_blog(repo, blog_id)
    new_state = BlogState.draft if blog.state == BlogState.published else BlogState.published
    return set_state(repo, blog_id, new_state)


def delete_blog(repo: BlogRepo, blog_id: str) -> None:
    """Remove the blog. Its tag references are left in place."""
    if not repo.delete_blog(blog_id):
        raise BlogNotFoundError(f"Blog {blog_id} not found")
    logger.info("blog_deleted", blog_id=blog_id)


def blog_tags(blog: Blog) -> list[Tag]:
    return [Tag(**t) for t in blog.tags or []]


def save_tags(repo: BlogRepo, blog_id: str, tags: list[Tag]) -> Blog:
    """Replace the blog's tags and rebuild its tag references."""
    blog = get_blog(repo, blog_id)
    ref = blog_ref(blog_id)

    for existing in repo.list_refs_by_ref(ref):
        repo.delete_tag_ref(existing.id)

    blog.tags = [t.model_dump() for t in tags]
    blog.updated_at = datetime.now()
    blog = repo.update_blog(blog)

    for tag in tags:
        repo.add_tag_ref(TagReference(slug=tag.slug, ref=ref))
    logger.info("blog_tags_saved", blog_id=blog_id, tags=[t.slug for t in tags])
    return blog


def get_published_by_slug(repo: BlogRepo, slug: str) -> Blog:
    """Guest read: the published blog at `slug`, else BlogNotFoundError."""
    if not is_slug(slug):
        raise BlogNotFoundError(f"No published blog at '{slug}'")
    blogs = repo.list_by_slug(slug)
    if not blogs or blogs[0].state != BlogState.published:
        raise BlogNotFoundError(f"No published blog at '{slug}'")
    return blogs[0]


def list_published(repo: BlogRepo, limit: int = 20, offset: int = 0) -> tuple[list[Blog], int | None]:
    """One page of published blogs, newest first, plus the next page's offset (None on the last page)."""
    rows = repo.list_by_state(BlogState.published, limit + 1, offset)
    next_offset = offset + limit if len(rows) > limit else None
    return rows[:limit], next_offset


def list_user_blogs(repo: BlogRepo, user_id: str) -> list[Blog]:
    return repo.list_by_user(user_id)


def blogs_for_tag(repo: BlogRepo, tag_slug: str) -> list[Blog]:
    """Published blogs referenced by a tag. References to deleted blogs are skipped."""
    blogs = []
    for tag_ref in repo.list_refs_by_slug(tag_slug):
        blog = repo.get_blog(tag_ref.ref.removeprefix("BLOG#"))
        if blog is not None and blog.state == BlogState.published:
            blogs.append(blog)
    return blogs
