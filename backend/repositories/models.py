"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship

from db import Base


class UserORM(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    farcaster_id = Column(String, nullable=True, index=True)
    generated_styles_count = Column(Integer, default=0, nullable=False)
    premium_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    presets = relationship(
        "PresetORM",
        back_populates="owner",
        cascade="all, delete-orphan",
    )


class PresetORM(Base):
    __tablename__ = "presets"

    id = Column(String, primary_key=True, index=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    transformation = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    owner = relationship("UserORM", back_populates="presets")


class GeneratedTextORM(Base):
    __tablename__ = "generated_texts"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String, nullable=False)
    transformation = Column(JSON, nullable=False)
    image_path = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UsageCounterORM(Base):
    __tablename__ = "usage_counters"

    # e.g. "usage:2025-08-01:generate" or "user:42:usage:generate"
    key = Column(String, primary_key=True)
    count = Column(Integer, default=0, nullable=False)
