from __future__ import annotations
from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from blogpub.crud.models import Blog, BlogState, Profile, TagReference, User
from blogpub.crud.repo import BlogRepo, UserRepo
from blogpub.errors import BlogNotFoundError, SlugConflictError, StoreError


logger = structlog.get_logger()


class SQLRepo(BlogRepo, UserRepo):
    """BlogRepo/UserRepo over a SQLModel session. Every write commits.

    The unique index on blogs.slug is the source of truth for slug ownership;
    a violation surfaces as SlugConflictError.
    """

    def __init__(self, session: Session):
        self.session = session

    def _all(self, statement) -> list:
        try:
            with self.session.no_autoflush:
                return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise StoreError(f"Query failed: {e}") from e

    def _get(self, model, key):
        try:
            with self.session.no_autoflush:
                return self.session.get(model, key)
        except SQLAlchemyError as e:
            raise StoreError(f"Lookup failed: {e}") from e

    def _commit(self, row, slug: str | None = None, merge: bool = False):
        """Write `row` (merged into the session when `merge`) and commit; rolls back on failure."""
        try:
            if merge:
                row = self.session.merge(row)
            self.session.add(row)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if slug is not None and "slug" in str(e.orig).lower():
                logger.info("slug_unique_violation", slug=slug)
                raise SlugConflictError(slug) from e
            raise StoreError(f"Write rejected: {e.orig}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Write failed: {e}") from e
        self.session.refresh(row)
        return row

    # --- blogs ---

    def get_blog(self, blog_id: str) -> Blog | None:
        return self._get(Blog, blog_id)

    def list_by_slug(self, slug: str) -> list[Blog]:
        return self._all(select(Blog).where(Blog.slug == slug))

    def list_by_user(self, user_id: str) -> list[Blog]:
        return self._all(select(Blog).where(Blog.user_id == user_id).order_by(Blog.created_at.desc()))

    def list_by_state(self, state: BlogState, limit: int, offset: int = 0) -> list[Blog]:
        return self._all(
            select(Blog)
            .where(Blog.state == state)
            .order_by(Blog.created_at.desc(), Blog.id)
            .offset(offset)
            .limit(limit)
        )

    def add_blog(self, blog: Blog) -> Blog:
        return self._commit(blog, slug=blog.slug)

    def update_blog(self, blog: Blog) -> Blog:
        slug = blog.slug
        if self._get(Blog, blog.id) is None:
            raise BlogNotFoundError(f"Blog {blog.id} not found")
        blog.updated_at = datetime.now()
        return self._commit(blog, slug=slug, merge=True)

    def delete_blog(self, blog_id: str) -> bool:
        blog = self._get(Blog, blog_id)
        if blog is None:
            return False
        try:
            self.session.delete(blog)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Delete failed: {e}") from e
        return True

    # --- tag references ---

    def list_refs_by_ref(self, ref: str) -> list[TagReference]:
        return self._all(select(TagReference).where(TagReference.ref == ref))

    def list_refs_by_slug(self, slug: str) -> list[TagReference]:
        return self._all(select(TagReference).where(TagReference.slug == slug))

    def add_tag_ref(self, tag_ref: TagReference) -> TagReference:
        return self._commit(tag_ref)

    def delete_tag_ref(self, ref_id: str) -> None:
        row = self._get(TagReference, ref_id)
        if row is None:
            return
        try:
            self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Delete failed: {e}") from e

    # --- users ---

    def get_user(self, user_id: str) -> User | None:
        return self._get(User, user_id)

    def list_users_by_email(self, email: str) -> list[User]:
        return self._all(select(User).where(User.email == email))

    def add_user(self, user: User) -> User:
        return self._commit(user)

    def update_user(self, user: User) -> User:
        if self._get(User, user.id) is None:
            raise StoreError(f"User {user.id} not found")
        return self._commit(user, merge=True)

    # --- profiles ---

    def get_profile(self, user_id: str) -> Profile | None:
        return self._get(Profile, user_id)

    def save_profile(self, profile: Profile) -> Profile:
        return self._commit(profile, merge=True)
