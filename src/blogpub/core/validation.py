"""Form validation run before any slug negotiation or persistence"""

from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from blogpub.errors import BlogValidationError


TITLE_MAX = 200
TAG_MAX = 50
URL_PREFIXES = ("http://", "https://")


class BlogForm(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    content: str = Field(..., min_length=1)
    cover_image: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class TagForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=TAG_MAX)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ProfileForm(BaseModel):
    display_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=2000)
    avatar_url: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = None
    twitter_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None

    @field_validator("website", "twitter_url", "linkedin_url", "github_url")
    @classmethod
    def _check_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not v.startswith(URL_PREFIXES) or len(v.split("://", 1)[1]) == 0 or " " in v:
            raise ValueError("must be an http(s) URL")
        return v


def _messages(e: ValidationError) -> list[str]:
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]


def _validate(model, what: str, **fields):
    try:
        return model(**fields)
    except ValidationError as e:
        errors = _messages(e)
        raise BlogValidationError(f"Invalid {what}: {'; '.join(errors)}", errors) from e


def validate_title(title: str) -> str:
    """Return the stripped title or raise BlogValidationError."""
    return _validate(BlogForm, "blog", title=title, content="-").title


def validate_blog_form(title: str, content: str, cover_image: str | None = None) -> BlogForm:
    return _validate(BlogForm, "blog", title=title, content=content, cover_image=cover_image)


def validate_tag_name(name: str) -> str:
    return _validate(TagForm, "tag", name=name).name


def validate_profile(**fields) -> ProfileForm:
    return _validate(ProfileForm, "profile", **fields)
