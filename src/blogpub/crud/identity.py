"""Post-confirmation identity reconciliation.

One User per email. Signing up again through another identity provider yields
a new auth subject for the same email; it is bound to the existing User
instead of creating a second one.
"""

from typing import Any

import structlog

from blogpub.crud.models import User
from blogpub.crud.repo import UserRepo
from blogpub.errors import BlogValidationError


logger = structlog.get_logger()


def reconcile_identity(repo: UserRepo, sub: str, email: str) -> User:
    """Ensure exactly one User exists for `email` with `sub` among its subjects. Idempotent."""
    if not sub or not email:
        raise BlogValidationError("Both sub and email are required")

    users = repo.list_users_by_email(email)
    if users:
        user = users[0]
        if sub in user.auth_subjects:
            return user
        user.auth_subjects = [*user.auth_subjects, sub]
        user = repo.update_user(user)
        logger.info("identity_subject_added", user_id=user.id, sub=sub)
        return user

    user = repo.add_user(User(id=sub, email=email, auth_subjects=[sub]))
    logger.info("identity_created", user_id=user.id)
    return user


def post_confirmation(event: dict[str, Any], repo: UserRepo) -> dict[str, Any]:
    """Auth-provider callback: reconcile `request.userAttributes` and hand the event back unchanged."""
    attributes = event.get("request", {}).get("userAttributes", {})
    reconcile_identity(repo, attributes.get("sub", ""), attributes.get("email", ""))
    return event


def resolve_user_id(repo: UserRepo, email: str) -> str | None:
    """Id of the User owning `email`, if any."""
    users = repo.list_users_by_email(email)
    return users[0].id if users else None
