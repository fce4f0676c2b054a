"""In-memory BlogRepo/UserRepo used by tests and scripts.

Rows are stored as plain dicts and rebuilt on every read, so callers never
share mutable state with the store (the same contract a remote API gives).
"""

from copy import deepcopy
from dataclasses import dataclass, field

from blogpub.crud.models import Blog, BlogState, Profile, TagReference, User
from blogpub.crud.repo import BlogRepo, UserRepo
from blogpub.errors import BlogNotFoundError, SlugConflictError, StoreError


def _dump(row) -> dict:
    return deepcopy(row.model_dump())


@dataclass
class MemoryRepo(BlogRepo, UserRepo):
    _blogs: dict[str, dict] = field(default_factory=dict)
    _refs: dict[str, dict] = field(default_factory=dict)
    _users: dict[str, dict] = field(default_factory=dict)
    _profiles: dict[str, dict] = field(default_factory=dict)

    # --- blogs ---

    def _check_slug(self, blog: Blog) -> None:
        for other in self._blogs.values():
            if other['slug'] == blog.slug and other['id'] != blog.id:
                raise SlugConflictError(blog.slug)

    def get_blog(self, blog_id: str) -> Blog | None:
        row = self._blogs.get(blog_id)
        return Blog(**deepcopy(row)) if row else None

    def list_by_slug(self, slug: str) -> list[Blog]:
        return [Blog(**deepcopy(r)) for r in self._blogs.values() if r['slug'] == slug]

    def list_by_user(self, user_id: str) -> list[Blog]:
        rows = [r for r in self._blogs.values() if r['user_id'] == user_id]
        return [Blog(**deepcopy(r)) for r in sorted(rows, key=lambda r: r['created_at'], reverse=True)]

    def list_by_state(self, state: BlogState, limit: int, offset: int = 0) -> list[Blog]:
        rows = [r for r in self._blogs.values() if r['state'] == state]
        rows.sort(key=lambda r: r['created_at'], reverse=True)
        return [Blog(**deepcopy(r)) for r in rows[offset:offset + limit]]

    def add_blog(self, blog: Blog) -> Blog:
        self._check_slug(blog)
        self._blogs[blog.id] = _dump(blog)
        return self.get_blog(blog.id)

    def update_blog(self, blog: Blog) -> Blog:
        if blog.id not in self._blogs:
            raise BlogNotFoundError(f"Blog {blog.id} not found")
        self._check_slug(blog)
        self._blogs[blog.id] = _dump(blog)
        return self.get_blog(blog.id)

    def delete_blog(self, blog_id: str) -> bool:
        return self._blogs.pop(blog_id, None) is not None

    # --- tag references ---

    def list_refs_by_ref(self, ref: str) -> list[TagReference]:
        return [TagReference(**r) for r in self._refs.values() if r['ref'] == ref]

    def list_refs_by_slug(self, slug: str) -> list[TagReference]:
        return [TagReference(**r) for r in self._refs.values() if r['slug'] == slug]

    def add_tag_ref(self, tag_ref: TagReference) -> TagReference:
        self._refs[tag_ref.id] = _dump(tag_ref)
        return TagReference(**self._refs[tag_ref.id])

    def delete_tag_ref(self, ref_id: str) -> None:
        self._refs.pop(ref_id, None)

    # --- users ---

    def get_user(self, user_id: str) -> User | None:
        row = self._users.get(user_id)
        return User(**deepcopy(row)) if row else None

    def list_users_by_email(self, email: str) -> list[User]:
        return [User(**deepcopy(r)) for r in self._users.values() if r['email'] == email]

    def add_user(self, user: User) -> User:
        if any(r['email'] == user.email for r in self._users.values()):
            raise StoreError(f"User with email {user.email} already exists")
        self._users[user.id] = _dump(user)
        return self.get_user(user.id)

    def update_user(self, user: User) -> User:
        if user.id not in self._users:
            raise StoreError(f"User {user.id} not found")
        self._users[user.id] = _dump(user)
        return self.get_user(user.id)

    # --- profiles ---

    def get_profile(self, user_id: str) -> Profile | None:
        row = self._profiles.get(user_id)
        return Profile(**row) if row else None

    def save_profile(self, profile: Profile) -> Profile:
        self._profiles[profile.user_id] = _dump(profile)
        return Profile(**self._profiles[profile.user_id])
