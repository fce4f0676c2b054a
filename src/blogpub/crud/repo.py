"""Repository interfaces consumed by the slug negotiator, blog operations and identity reconciliation.

Implementations signal an unreachable or failing store with StoreError and a
slug uniqueness violation with SlugConflictError.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from blogpub.crud.models import Blog, BlogState, Profile, TagReference, User


class BlogRepo(ABC):
    @abstractmethod
    def get_blog(self, blog_id: str) -> Blog | None:
        raise NotImplementedError

    @abstractmethod
    def list_by_slug(self, slug: str) -> list[Blog]:
        """Every blog whose slug equals `slug` (normally zero or one)."""
        raise NotImplementedError

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Blog]:
        raise NotImplementedError

    @abstractmethod
    def list_by_state(self, state: BlogState, limit: int, offset: int = 0) -> list[Blog]:
        """Blogs in `state`, newest first."""
        raise NotImplementedError

    @abstractmethod
    def add_blog(self, blog: Blog) -> Blog:
        raise NotImplementedError

    @abstractmethod
    def update_blog(self, blog: Blog) -> Blog:
        raise NotImplementedError

    @abstractmethod
    def delete_blog(self, blog_id: str) -> bool:
        """Return True if a blog was removed."""
        raise NotImplementedError

    @abstractmethod
    def list_refs_by_ref(self, ref: str) -> list[TagReference]:
        raise NotImplementedError

    @abstractmethod
    def list_refs_by_slug(self, slug: str) -> list[TagReference]:
        raise NotImplementedError

    @abstractmethod
    def add_tag_ref(self, tag_ref: TagReference) -> TagReference:
        raise NotImplementedError

    @abstractmethod
    def delete_tag_ref(self, ref_id: str) -> None:
        raise NotImplementedError


class UserRepo(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def list_users_by_email(self, email: str) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    def add_user(self, user: User) -> User:
        raise NotImplementedError

    @abstractmethod
    def update_user(self, user: User) -> User:
        raise NotImplementedError

    @abstractmethod
    def get_profile(self, user_id: str) -> Profile | None:
        raise NotImplementedError

    @abstractmethod
    def save_profile(self, profile: Profile) -> Profile:
        """Insert or replace the profile for profile.user_id."""
        raise NotImplementedError
