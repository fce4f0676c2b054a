"""Shared fixtures for core unit tests"""

import pytest

from blogpub.config import Settings
from blogpub.core.notify import Notifier
from blogpub.crud.memory_repo import MemoryRepo
from blogpub.crud.models import Blog, BlogState


@pytest.fixture(name="repo")
def repo_fixture():
    return MemoryRepo()


@pytest.fixture(name="settings")
def settings_fixture():
    """Settings with an autosave delay short enough to wait for in tests."""
    return Settings(autosave_delay=0.05)


@pytest.fixture(name="notifier")
def notifier_fixture():
    return Notifier()


@pytest.fixture(name="blog")
def blog_fixture(repo):
    return repo.add_blog(Blog(
        user_id="user-1", title="Hello World", slug="hello-world",
        state=BlogState.draft, content_html="<p>Hi</p>",
    ))
