"""Post model (blog entries) and its cover image."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from foodie.db.session import Base, utcnow
from foodie.models.tag import posts_tags


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (UniqueConstraint("title", name="uq_posts_title"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    visible = Column(Boolean, nullable=False, default=True)
    published_on = Column(DateTime, nullable=False, index=True)  # UTC
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="posts")
    tags = relationship("Tag", secondary=posts_tags, back_populates="posts")
    # Comments belong to the comments module; the store decides what happens on delete
    comments = relationship("Comment", back_populates="post", passive_deletes="all")
    cover_image = relationship(
        "CoverImage", back_populates="post", uselist=False, cascade="all, delete-orphan"
    )


class CoverImage(Base):
    __tablename__ = "cover_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, unique=True)
    url = Column(Text, nullable=False)
    alt_text = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    post = relationship("Post", back_populates="cover_image")
