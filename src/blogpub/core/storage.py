"""Object storage for uploaded images and public CDN url construction"""

import hashlib
import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from uuid import uuid4

import structlog


logger = structlog.get_logger()

BLOG_PREFIX = "public/blogs"
USER_PREFIX = "public/users"


@dataclass
class StoredObject:
    """Information about a stored object."""

    key: str
    size_bytes: int
    content_type: str | None
    checksum: str
    stored_at: datetime


class ObjectStore(ABC):
    """Opaque put/get store addressed by slash-separated keys."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str | None = None) -> StoredObject:
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Raises FileNotFoundError if the key does not exist."""
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """True if deleted, False if the key did not exist."""
        ...


class LocalObjectStore(ObjectStore):
    """Filesystem-backed store; keys map to paths under base_path."""

    def __init__(self, base_path: str | Path = "./storage"):
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        full_path = self.base_path / PurePosixPath(key).as_posix().lstrip("/")
        try:
            full_path.resolve().relative_to(self.base_path)
        except ValueError:
            raise ValueError(f"Invalid key: {key} (outside base directory)")
        return full_path

    def put(self, key: str, data: bytes, content_type: str | None = None) -> StoredObject:
        full_path = self._resolve(key)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(data)
        if content_type is None:
            content_type, _ = mimetypes.guess_type(key)
        logger.info("object_stored", key=key, size=len(data))
        return StoredObject(
            key=key,
            size_bytes=len(data),
            content_type=content_type,
            checksum=hashlib.sha256(data).hexdigest(),
            stored_at=datetime.now(),
        )

    def get(self, key: str) -> bytes:
        full_path = self._resolve(key)
        if not full_path.is_file():
            raise FileNotFoundError(f"Object not found: {key}")
        return full_path.read_bytes()

    def exists(self, key: str) -> bool:
        return self._resolve(key).is_file()

    def delete(self, key: str) -> bool:
        full_path = self._resolve(key)
        if not full_path.is_file():
            return False
        full_path.unlink()
        logger.info("object_deleted", key=key)
        return True


def _object_name(filename: str, prefix: str) -> str:
    ext = PurePosixPath(filename).suffix.lstrip(".").lower()
    name = f"{prefix}_{uuid4().hex[:21]}"
    return f"{name}.{ext}" if ext else name


def blog_image_key(blog_id: str, filename: str, prefix: str = "img") -> str:
    """public/blogs/<blog_id>/<prefix>_<token>.<ext>"""
    return f"{BLOG_PREFIX}/{blog_id}/{_object_name(filename, prefix)}"


def avatar_key(identity_id: str, filename: str) -> str:
    """public/users/<identity_id>/avatar_<token>.<ext>"""
    return f"{USER_PREFIX}/{identity_id}/{_object_name(filename, 'avatar')}"


def public_url(cdn_domain: str, key: str) -> str:
    """URL of a public/ object behind the CDN. Without a domain the key itself is returned."""
    if not cdn_domain:
        return key
    return f"https://{cdn_domain.rstrip('/')}/{key}"


def upload_image(
    store: ObjectStore,
    cdn_domain: str,
    blog_id: str,
    filename: str,
    data: bytes,
    prefix: str = "img",
    ) -> str:
    """Store an image for a blog and return its public url."""
    key = blog_image_key(blog_id, filename, prefix)
    store.put(key, data)
    return public_url(cdn_domain, key)
