"""Database table definitions for blogs, tag references, users and profiles"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON, Text, String


def new_id() -> str:
    return str(uuid4())


class BlogState(str, Enum):
    """Publication state; only PUBLISHED blogs are visible to guests"""
    draft = "DRAFT"
    published = "PUBLISHED"


class Blog(SQLModel, table=True):
    """A blog post owned by one user; slug is the public, human-readable identifier"""
    __tablename__ = "blogs"
    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(..., index=True, nullable=False, description="Auth subject of the owner")
    title: str = Field(..., sa_column=Column(String(200), nullable=False))
    slug: str = Field(..., sa_column=Column(String(255), nullable=False, unique=True, index=True))
    state: BlogState = Field(default=BlogState.draft, nullable=False)
    content_html: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    content_json: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    cover_image: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    tags: List[Dict[str, str]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


def blog_ref(blog_id: str) -> str:
    """Tag reference key for a blog."""
    return f"BLOG#{blog_id}"


class TagReference(SQLModel, table=True):
    """Reverse index from a tag slug to the blogs carrying it"""
    __tablename__ = "tag_references"
    id: str = Field(default_factory=new_id, primary_key=True)
    slug: str = Field(..., index=True, nullable=False)
    ref: str = Field(..., index=True, nullable=False, description="BLOG#<blog id>")


class User(SQLModel, table=True):
    """Application identity: one row per email, any number of auth subjects"""
    __tablename__ = "users"
    id: str = Field(..., primary_key=True)
    email: str = Field(..., sa_column=Column(String(320), nullable=False, unique=True, index=True))
    auth_subjects: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Profile(SQLModel, table=True):
    """Public author profile keyed by the owner's auth subject"""
    __tablename__ = "profiles"
    user_id: str = Field(..., primary_key=True)
    display_name: Optional[str] = None
    bio: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    twitter_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
