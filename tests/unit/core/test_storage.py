"""Unit tests for core/storage.py"""

import re

import pytest

from blogpub.core.storage import (
    LocalObjectStore, avatar_key, blog_image_key, public_url, upload_image,
)


@pytest.fixture(name="store")
def store_fixture(tmp_path):
    return LocalObjectStore(tmp_path / "objects")


def test_put_and_get(store):
    info = store.put("public/blogs/b1/img_x.png", b"\x89PNG")
    assert info.size_bytes == 4
    assert info.content_type == "image/png"
    assert store.get("public/blogs/b1/img_x.png") == b"\x89PNG"


def test_get_missing_raises(store):
    with pytest.raises(FileNotFoundError):
        store.get("public/nope.png")


def test_exists_and_delete(store):
    store.put("a/b.txt", b"x")
    assert store.exists("a/b.txt")
    assert store.delete("a/b.txt") is True
    assert store.exists("a/b.txt") is False
    assert store.delete("a/b.txt") is False


def test_key_outside_base_rejected(store):
    with pytest.raises(ValueError, match="outside base directory"):
        store.put("../escape.txt", b"x")


def test_blog_image_key_shape():
    key = blog_image_key("b1", "Photo.JPG", prefix="cover")
    assert re.match(r'^public/blogs/b1/cover_[0-9a-f]{21}\.jpg$', key)


def test_blog_image_keys_are_unique():
    assert blog_image_key("b1", "a.png") != blog_image_key("b1", "a.png")


def test_avatar_key_shape():
    assert avatar_key("us-east-1:abc", "me.png").startswith("public/users/us-east-1:abc/avatar_")


def test_public_url():
    assert public_url("d111.cloudfront.net", "public/blogs/b1/x.png") == "https://d111.cloudfront.net/public/blogs/b1/x.png"


def test_public_url_without_cdn_returns_key():
    assert public_url("", "public/x.png") == "public/x.png"


def test_upload_image_stores_and_returns_url(store):
    url = upload_image(store, "cdn.example.com", "b1", "pic.gif", b"GIF89a")
    key = url.removeprefix("https://cdn.example.com/")
    assert key.startswith("public/blogs/b1/img_")
    assert store.get(key) == b"GIF89a"
