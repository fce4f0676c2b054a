"""CLI command implementations"""

from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Iterator, Optional

import typer
from sqlmodel import Session

from blogpub.config import Settings, load_config
from blogpub.core.editor import EditorSession
from blogpub.core.notify import Level, Notifier
from blogpub.core.storage import LocalObjectStore, avatar_key, public_url
from blogpub.core.tags import tags_from_names
from blogpub.core.utils.text import excerpt, format_date
from blogpub.core.validation import ProfileForm
from blogpub.crud.blogs import (
    create_blog,
    delete_blog,
    get_published_by_slug,
    list_published,
    list_user_blogs,
    save_tags,
    toggle_state,
)
from blogpub.crud.database import init_db, make_engine, reset_db
from blogpub.crud.identity import reconcile_identity, resolve_user_id
from blogpub.crud.profiles import get_profile, save_profile
from blogpub.crud.sql_repo import SQLRepo
from blogpub.errors import BlogpubError
from blogpub.logs import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings)
    return settings


@contextmanager
def _repo(settings: Settings) -> Iterator[SQLRepo]:
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        yield SQLRepo(session)


def _echo_notifications(notifier: Notifier) -> bool:
    """Print notifications; return True if any was an error."""
    failed = False
    for n in notifier.items:
        if n.level is Level.error:
            failed = True
            typer.echo(f"Error: {n.message}", err=True)
        else:
            typer.echo(n.message)
    return failed


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def create_cmd(
    user: Annotated[str, typer.Argument(help="Owner auth subject")],
    title: Annotated[str, typer.Argument(help="Blog title")],
    ):
    """Create a draft blog with a unique slug."""
    settings = _settings()
    with _repo(settings) as repo:
        try:
            blog = create_blog(
                repo, user, title,
                fail_open=settings.probe_fail_open,
                conflict_retries=settings.slug_conflict_retries,
            )
        except BlogpubError as e:
            _fail("Failed to create blog", e)
    typer.echo(f"Created {blog.id} at /{blog.slug}")


def save_cmd(
    blog_id: Annotated[str, typer.Argument(help="Blog id")],
    title: Annotated[Optional[str], typer.Option("--title", help="New title")] = None,
    content_file: Annotated[Optional[Path], typer.Option("--content-file", exists=True, readable=True, help="HTML content file")] = None,
    cover: Annotated[Optional[str], typer.Option("--cover", help="Cover image url")] = None,
    ):
    """Save title/content changes; the slug follows the title."""
    settings = _settings()
    notifier = Notifier()
    with _repo(settings) as repo:
        session = EditorSession(repo, blog_id, settings, notifier)
        if session.open():
            content = content_file.read_text(encoding="utf-8") if content_file else None
            session.edit(title=title, content=content, cover_image=cover)
            session.save()
            session.close()
        failed = _echo_notifications(notifier)
        if failed:
            raise typer.Exit(1)
        typer.echo(f"/{session.blog.slug}")


def publish_cmd(
    blog_id: Annotated[str, typer.Argument(help="Blog id")],
    ):
    """Toggle a blog between DRAFT and PUBLISHED."""
    settings = _settings()
    with _repo(settings) as repo:
        try:
            blog = toggle_state(repo, blog_id)
        except BlogpubError as e:
            _fail("Failed to update blog state", e)
    typer.echo(f"{blog.slug}: {blog.state.value}")


def delete_cmd(
    blog_id: Annotated[str, typer.Argument(help="Blog id")],
    ):
    """Delete a blog."""
    settings = _settings()
    with _repo(settings) as repo:
        try:
            delete_blog(repo, blog_id)
        except BlogpubError as e:
            _fail("Failed to delete blog", e)
    typer.echo("Blog deleted.")


def tags_cmd(
    blog_id: Annotated[str, typer.Argument(help="Blog id")],
    names: Annotated[list[str], typer.Argument(help="Tag names (replaces existing tags)")],
    ):
    """Replace the tags of a blog."""
    settings = _settings()
    with _repo(settings) as repo:
        try:
            blog = save_tags(repo, blog_id, tags_from_names(names))
        except BlogpubError as e:
            _fail("Failed to save tags", e)
        typer.echo(", ".join(t["slug"] for t in blog.tags))


def list_cmd(
    user: Annotated[Optional[str], typer.Option("--user", help="List this user's blogs (all states); auth subject or email")] = None,
    page: Annotated[int, typer.Option("--page", min=1, help="Page of published blogs")] = 1,
    ):
    """List published blogs, or every blog of one user."""
    settings = _settings()
    with _repo(settings) as repo:
        try:
            if user:
                owner = resolve_user_id(repo, user) if "@" in user else user
                blogs, next_offset = (list_user_blogs(repo, owner) if owner else []), None
            else:
                blogs, next_offset = list_published(repo, settings.page_size, (page - 1) * settings.page_size)
        except BlogpubError as e:
            _fail("Failed to fetch blogs", e)
        if not blogs:
            typer.echo("No blogs found.")
            raise typer.Exit(1)
        for b in blogs:
            typer.echo(f"{b.id}  {b.state.value:<9}  /{b.slug}  {b.title}")
    if next_offset is not None:
        typer.echo(f"More: --page {page + 1}")


def show_cmd(
    slug: Annotated[str, typer.Argument(help="Blog slug")],
    ):
    """Show a published blog as a guest would see it."""
    settings = _settings()
    with _repo(settings) as repo:
        try:
            blog = get_published_by_slug(repo, slug)
        except BlogpubError as e:
            _fail("Blog not found", e)
        typer.echo(blog.title)
        typer.echo(format_date(blog.created_at))
        if blog.tags:
            typer.echo("Tags: " + ", ".join(t["name"] for t in blog.tags))
        typer.echo("")
        typer.echo(excerpt(blog.content_html, 500))


def confirm_cmd(
    sub: Annotated[str, typer.Argument(help="Auth subject")],
    email: Annotated[str, typer.Argument(help="Confirmed email")],
    ):
    """Run the post-confirmation identity reconciliation for (sub, email)."""
    settings = _settings()
    with _repo(settings) as repo:
        try:
            user = reconcile_identity(repo, sub, email)
        except BlogpubError as e:
            _fail("Identity reconciliation failed", e)
        typer.echo(f"{user.id} {user.email} subjects={','.join(user.auth_subjects)}")


def upload_cmd(
    blog_id: Annotated[str, typer.Argument(help="Blog id")],
    file: Annotated[Path, typer.Argument(exists=True, readable=True, help="Image file")],
    cover: Annotated[bool, typer.Option("--cover", help="Use as the blog's cover image")] = False,
    ):
    """Upload an image for a blog and print its public url."""
    settings = _settings()
    notifier = Notifier()
    store = LocalObjectStore(settings.storage_dir)
    with _repo(settings) as repo:
        session = EditorSession(repo, blog_id, settings, notifier, store)
        url = ""
        if session.open():
            data = file.read_bytes()
            if cover:
                url = session.upload_cover(file.name, data)
                if url:
                    session.save()
            else:
                url = session.upload_image(file.name, data)
            session.close()
        if _echo_notifications(notifier) or not url:
            raise typer.Exit(1)
    typer.echo(url)


def profile_cmd(
    user: Annotated[str, typer.Argument(help="Auth subject of the profile owner")],
    display_name: Annotated[Optional[str], typer.Option("--display-name")] = None,
    bio: Annotated[Optional[str], typer.Option("--bio")] = None,
    location: Annotated[Optional[str], typer.Option("--location")] = None,
    website: Annotated[Optional[str], typer.Option("--website")] = None,
    avatar: Annotated[Optional[Path], typer.Option("--avatar", exists=True, readable=True, help="Avatar image file")] = None,
    ):
    """Show a user's profile; any option given is saved first."""
    settings = _settings()
    fields = {
        k: v for k, v in
        {"display_name": display_name, "bio": bio, "location": location, "website": website}.items()
        if v is not None
    }
    with _repo(settings) as repo:
        try:
            if avatar:
                key = avatar_key(user, avatar.name)
                LocalObjectStore(settings.storage_dir).put(key, avatar.read_bytes())
                fields["avatar_url"] = public_url(settings.cdn_domain, key)
            profile = save_profile(repo, user, **fields) if fields else get_profile(repo, user)
        except (BlogpubError, OSError) as e:
            _fail("Failed to update profile", e)
        typer.echo(f"user: {profile.user_id}")
        for name in ProfileForm.model_fields:
            value = getattr(profile, name)
            if value:
                typer.echo(f"{name}: {value}")
