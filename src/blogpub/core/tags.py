"""Tag list editing for a blog: names are free text, identity is the slug"""

from pydantic import BaseModel

from blogpub.core.utils.slug import generate_slug
from blogpub.core.validation import validate_tag_name
from blogpub.errors import BlogValidationError


class Tag(BaseModel):
    name: str
    slug: str


def make_tag(name: str) -> Tag:
    """Validate a tag name and derive its slug."""
    name = validate_tag_name(name)
    slug = generate_slug(name)
    if not slug:
        raise BlogValidationError(f"Tag name '{name}' has no usable characters")
    return Tag(name=name, slug=slug)


def add_tag(tags: list[Tag], name: str) -> list[Tag]:
    """Return tags plus a new tag for name; duplicate slugs are rejected."""
    tag = make_tag(name)
    if any(t.slug == tag.slug for t in tags):
        raise BlogValidationError("Tag already exists")
    return [*tags, tag]


def remove_tag(tags: list[Tag], slug: str) -> list[Tag]:
    return [t for t in tags if t.slug != slug]


def tags_from_names(names: list[str]) -> list[Tag]:
    tags: list[Tag] = []
    for name in names:
        tags = add_tag(tags, name)
    return tags
