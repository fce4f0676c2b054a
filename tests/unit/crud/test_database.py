"""Unit tests for crud/database.py"""

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlmodel import Session

from blogpub.crud.database import init_db, make_engine, reset_db
from blogpub.crud.models import Blog
from blogpub.crud.sql_repo import SQLRepo


SQLITE_MEM = "sqlite://"


def test_make_engine_returns_engine():
    """make_engine returns an SQLAlchemy Engine instance."""
    assert isinstance(make_engine(SQLITE_MEM), Engine)


def test_init_db_creates_tables():
    """init_db creates every table on the engine."""
    engine = make_engine(SQLITE_MEM)
    init_db(engine)
    tables = set(inspect(engine).get_table_names())
    assert {"blogs", "tag_references", "users", "profiles"} <= tables


def test_slug_column_is_unique():
    engine = make_engine(SQLITE_MEM)
    init_db(engine)
    indexes = inspect(engine).get_indexes("blogs")
    assert any(ix["column_names"] == ["slug"] and ix["unique"] for ix in indexes)


def test_reset_db_clears_rows(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path}/reset.db")
    init_db(engine)
    with Session(engine) as session:
        SQLRepo(session).add_blog(Blog(user_id="u1", title="A", slug="a"))
    reset_db(engine)
    with Session(engine) as session:
        assert SQLRepo(session).list_by_slug("a") == []
