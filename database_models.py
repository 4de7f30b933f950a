import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_todo_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    Local record for an identity-provider user.
    The primary key is the provider's user id; roles are never stored here.
    """
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    is_subscribed = Column(Boolean, default=False, nullable=False)
    subscription_ends = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    todos = relationship("Todo", back_populates="user", cascade="all, delete-orphan")


class Todo(Base):
    __tablename__ = "todos"

    id = Column(String(36), primary_key=True, default=new_todo_id)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="todos")
