"""
Generic repository over one ORM model class.

Services go through this for plain create/get/find/update so the store
behind the AsyncSession (in-memory SQLite or PostgreSQL) stays swappable.
Anything more specific is written as a query in the service itself.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.database.db import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Create/find/update contracts for a single model, keyed by integer id."""

    def __init__(self, session: AsyncSession, model: Type[ModelT]):
        self.session = session
        self.model = model

    async def create(self, **values: Any) -> ModelT:
        """Add a new row and flush so its id and defaults are populated."""
        instance = self.model(**values)
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def get(self, entity_id: int) -> Optional[ModelT]:
        """Get a row by primary key, or None."""
        return await self.session.get(self.model, entity_id)

    async def find(self, *criteria, order_by=None, **filters: Any) -> List[ModelT]:
        """
        Find rows matching keyword equality filters and/or SQL criteria.

        Results are in insertion order unless ``order_by`` is given.
        """
        query = select(self.model).filter_by(**filters)
        if criteria:
            query = query.where(*criteria)
        if order_by is None:
            order_by = self.model.id
        if isinstance(order_by, (list, tuple)):
            query = query.order_by(*order_by)
        else:
            query = query.order_by(order_by)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_one(self, *criteria, **filters: Any) -> Optional[ModelT]:
        """Find the first row matching the filters, or None."""
        query = select(self.model).filter_by(**filters)
        if criteria:
            query = query.where(*criteria)
        result = await self.session.execute(query.order_by(self.model.id).limit(1))
        return result.scalar_one_or_none()

    async def update(self, instance: ModelT, **values: Any) -> ModelT:
        """Apply values to an instance and flush."""
        for key, value in values.items():
            setattr(instance, key, value)
        await self.session.flush()
        return instance
