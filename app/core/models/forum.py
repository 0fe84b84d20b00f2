"""Discussion forum models: forums -> topics -> posts -> comments."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid

from app.db.session import Base, utc_now


class Forum(Base):
    """Named container of topics. Never deleted through the API."""

    __tablename__ = "forums"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


class Topic(Base):
    __tablename__ = "topics"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    forum_id = Column(Uuid, ForeignKey("forums.id", ondelete="CASCADE"), nullable=False, index=True)
    # Polymorphic author: author_role selects the person table author_id points into
    author_id = Column(Uuid, nullable=False)
    author_role = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    is_pinned = Column(Boolean, nullable=False, default=False)
    is_locked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


class Post(Base):
    """Reply to a topic. Content only, no title."""

    __tablename__ = "posts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    topic_id = Column(Uuid, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid, nullable=False)
    author_role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


class Comment(Base):
    """Reply to a post."""

    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid, nullable=False)
    author_role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
