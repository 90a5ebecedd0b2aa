"""Shared persistence helpers for the model repositories."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Row-level writes for one model.

    Every write flushes so generated columns are visible to the caller,
    and none commits: the service decides the transaction boundary.
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    async def get_by_id(self, id: Any) -> ModelType | None:
        """Primary-key lookup, served from the identity map when loaded."""
        return await self.session.get(self.model, id)

    async def create(self, **values: Any) -> ModelType:
        instance = self.model(**values)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **changes: Any) -> ModelType:
        """Apply ``changes`` to a loaded row.

        Args:
            instance: Row previously read through this session
            **changes: Column values to assign

        Returns:
            The same instance, refreshed after the flush
        """
        for column, value in changes.items():
            setattr(instance, column, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self.session.delete(instance)
        await self.session.flush()
