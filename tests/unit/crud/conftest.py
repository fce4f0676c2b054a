"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from blogpub.crud.memory_repo import MemoryRepo
from blogpub.crud.models import Blog, BlogState
from blogpub.crud.sql_repo import SQLRepo


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture(name="sql_repo")
def sql_repo_fixture(session):
    return SQLRepo(session)


@pytest.fixture(name="repo", params=["memory", "sql"])
def repo_fixture(request):
    """Every repository implementation; crud behaviour must not depend on the store."""
    if request.param == "memory":
        return MemoryRepo()
    return request.getfixturevalue("sql_repo")


@pytest.fixture(name="blog")
def blog_fixture(repo):
    """A draft blog owning the slug 'hello-world'."""
    return repo.add_blog(Blog(user_id="user-1", title="Hello World", slug="hello-world", state=BlogState.draft))
