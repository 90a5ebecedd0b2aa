"""SQLAlchemy declarative base for all models."""

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for Taskroom models.

    AsyncAttrs lets callers await lazy attributes via ``model.awaitable_attrs``.
    """
