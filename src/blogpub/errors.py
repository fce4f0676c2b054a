"""Exception hierarchy shared by the core, crud and cli layers"""


class BlogpubError(Exception):
    """Base exception for all blogpub errors."""


class BlogValidationError(BlogpubError):
    """Raised when user input fails validation; never retried.

    `errors` holds one human-readable message per failing field.
    """

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class BlogNotFoundError(BlogpubError):
    """Raised when a blog is missing (deleted, never existed, or not published for guests)."""


class StoreError(BlogpubError):
    """Raised by repositories when the backing store cannot be reached or fails."""


class SlugProbeError(StoreError):
    """Raised when a slug lookup fails and the prober is not allowed to fail open. Retryable."""


class SlugConflictError(BlogpubError):
    """Raised when the store rejects a write because another blog already owns the slug."""

    def __init__(self, slug: str):
        super().__init__(f"Slug '{slug}' is already taken")
        self.slug = slug
