"""Editing session for one blog: form state, debounced autosave, manual save and publishing.

Every public method is an operation boundary: failures are turned into
notifications and a False/empty return, never raised to the caller.
"""

import threading
from datetime import datetime

import structlog

from blogpub.config import Settings
from blogpub.core.autosave import Debouncer
from blogpub.core.notify import Notifier
from blogpub.core.storage import ObjectStore, upload_image
from blogpub.core.tags import Tag, add_tag, remove_tag
from blogpub.core.validation import validate_blog_form
from blogpub.crud.blogs import blog_tags, get_blog, save_blog, save_tags, toggle_state
from blogpub.crud.models import Blog, BlogState
from blogpub.crud.repo import BlogRepo
from blogpub.errors import BlogNotFoundError, BlogpubError, BlogValidationError


logger = structlog.get_logger()

DEFAULT_CONTENT = "<p>Start typing here...</p>"


class EditorSession:
    def __init__(
        self,
        repo: BlogRepo,
        blog_id: str,
        settings: Settings,
        notifier: Notifier | None = None,
        store: ObjectStore | None = None,
        ):
        self.repo = repo
        self.blog_id = blog_id
        self.settings = settings
        self.notifier = notifier or Notifier()
        self.store = store
        self.autosave = Debouncer(settings.autosave_delay, self._autosave)

        self.blog: Blog | None = None
        self.title = ""
        self.content = ""
        self.cover_image: str | None = None
        self.tags: list[Tag] = []
        self.last_saved: datetime | None = None
        self._revision = 0
        self._saved_revision = 0
        self._saving = threading.Lock()

    @property
    def dirty(self) -> bool:
        return self._revision != self._saved_revision

    @property
    def saving(self) -> bool:
        return self._saving.locked()

    # --- lifecycle ---

    def open(self) -> bool:
        """Load the blog into the form. False means the caller should go back to the listing."""
        try:
            blog = get_blog(self.repo, self.blog_id)
        except BlogNotFoundError:
            self.notifier.error("Blog not found", blog_id=self.blog_id)
            return False
        except BlogpubError as e:
            self.notifier.error("Failed to load blog", blog_id=self.blog_id, error=str(e))
            return False

        self.blog = blog
        self.title = blog.title or ""
        self.content = blog.content_html or DEFAULT_CONTENT
        self.cover_image = blog.cover_image
        self.tags = blog_tags(blog)
        self._saved_revision = self._revision
        return True

    def close(self) -> None:
        """Leave the editor; a pending autosave is dropped."""
        if self.autosave.cancel():
            logger.info("autosave_cancelled", blog_id=self.blog_id)

    # --- form edits ---

    def edit(self, title: str | None = None, content: str | None = None, cover_image: str | None = None) -> None:
        """Apply form changes and (re)start the autosave timer."""
        if self.blog is None:
            return
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        if cover_image is not None:
            self.cover_image = cover_image
        self._revision += 1
        self.autosave.schedule()

    # --- saving ---

    def _autosave(self) -> None:
        self.save(auto=True)

    def save(self, auto: bool = False) -> bool:
        """Validate, negotiate the slug and write the form. Returns True when something was saved."""
        if not auto:
            self.autosave.cancel()
        if self.blog is None or (auto and not self.dirty):
            return False
        if not self._saving.acquire(blocking=False):
            # Edits newer than the running save are picked up by the next autosave.
            logger.info("save_skipped_in_progress", blog_id=self.blog_id, auto=auto)
            if self.dirty:
                self.autosave.schedule()
            if not auto:
                self.notifier.info("A save is already in progress; your changes will be saved shortly")
            return False

        try:
            revision = self._revision
            try:
                blog = save_blog(
                    self.repo, self.blog_id, self.title, self.content, self.cover_image,
                    fail_open=self.settings.probe_fail_open,
                    conflict_retries=self.settings.slug_conflict_retries,
                )
            except BlogValidationError as e:
                if not auto:
                    self.notifier.error("Please fix validation errors before saving", errors=e.errors)
                return False
            except BlogNotFoundError:
                self.notifier.error("Blog not found", blog_id=self.blog_id)
                return False
            except BlogpubError as e:
                self.notifier.error("Auto-save failed" if auto else "Failed to save blog", error=str(e))
                return False

            self.blog = blog
            self._saved_revision = revision
            self.last_saved = datetime.now()
            if not auto:
                self.notifier.success("Blog saved successfully!")
            return True
        finally:
            self._saving.release()

    def toggle_publish(self) -> bool:
        if self.blog is None:
            return False
        try:
            validate_blog_form(self.title, self.content, self.cover_image)
        except BlogValidationError as e:
            self.notifier.error("Please fix validation errors before publishing", errors=e.errors)
            return False

        try:
            self.blog = toggle_state(self.repo, self.blog_id)
        except BlogpubError as e:
            self.notifier.error("Failed to update blog state", error=str(e))
            return False

        verb = "published" if self.blog.state == BlogState.published else "unpublished"
        self.notifier.success(f"Blog {verb} successfully!")
        return True

    # --- tags ---

    def add_tag(self, name: str) -> bool:
        try:
            self.tags = add_tag(self.tags, name)
        except BlogValidationError as e:
            self.notifier.error(str(e))
            return False
        return True

    def remove_tag(self, slug: str) -> None:
        self.tags = remove_tag(self.tags, slug)

    def save_tags(self) -> bool:
        if self.blog is None:
            return False
        try:
            self.blog = save_tags(self.repo, self.blog_id, self.tags)
        except BlogpubError as e:
            self.notifier.error("Failed to save tags", error=str(e))
            return False
        self.notifier.success("Tags saved successfully!")
        return True

    # --- images ---

    def upload_image(self, filename: str, data: bytes, prefix: str = "img") -> str:
        """Store an image for this blog and return its public url ('' on failure)."""
        if self.blog is None or self.store is None:
            return ""
        try:
            return upload_image(self.store, self.settings.cdn_domain, self.blog_id, filename, data, prefix)
        except (OSError, ValueError) as e:
            self.notifier.error("Failed to upload image", filename=filename, error=str(e))
            return ""

    def upload_cover(self, filename: str, data: bytes) -> str:
        url = self.upload_image(filename, data, prefix="cover")
        if url:
            self.edit(cover_image=url)
            self.notifier.success("Cover image uploaded successfully!")
        return url
