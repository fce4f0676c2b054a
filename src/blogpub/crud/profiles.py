"""Author profile read/save"""

from blogpub.core.validation import ProfileForm, validate_profile
from blogpub.crud.models import Profile
from blogpub.crud.repo import UserRepo


def get_profile(repo: UserRepo, user_id: str) -> Profile:
    """Stored profile, or an empty one for users who never saved theirs."""
    return repo.get_profile(user_id) or Profile(user_id=user_id)


def save_profile(repo: UserRepo, user_id: str, **fields) -> Profile:
    """Validate and upsert profile fields; fields not given keep their stored value."""
    current = get_profile(repo, user_id)
    merged = {name: getattr(current, name) for name in ProfileForm.model_fields}
    merged.update(fields)
    form = validate_profile(**merged)
    return repo.save_profile(Profile(user_id=user_id, **form.model_dump()))
