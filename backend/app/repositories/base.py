"""
BileMo API — Generic Repository
=================================

What:  Lookup, pagination and uniqueness queries shared by every entity.
How:   Subclasses set `model` (the ORM class) and `resource` (the name used
       in NotFoundError messages).

Pagination:
    Offset-based, ordered by primary key so a page is stable between two
    reads with no intervening write (the cache relies on that):
        SELECT ... ORDER BY id LIMIT :limit OFFSET (:page - 1) * :limit
    Bounds on `page` and `limit` are enforced by the routes (see
    `app.routes.pagination`), which keep the OFFSET within a BIGINT.
"""

import logging
from typing import Any, ClassVar, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.exceptions import NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    model: ClassVar[Type[Any]]
    resource: ClassVar[str] = "resource"

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, entity_id: int) -> Optional[ModelT]:
        return await self.db.get(self.model, entity_id)

    async def get(self, entity_id: int) -> ModelT:
        """Like `find`, but a missing row raises NotFoundError (→ 404)."""
        entity = await self.find(entity_id)
        if entity is None:
            raise NotFoundError(resource=self.resource, resource_id=entity_id)
        return entity

    async def find_by_email(self, email: str) -> Optional[ModelT]:
        result = await self.db.execute(
            select(self.model).where(self.model.email == email)
        )
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = select(func.count()).select_from(self.model).where(self.model.email == email)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self.db.execute(query)
        return (result.scalar() or 0) > 0

    async def find_all_with_pagination(self, page: int, limit: int) -> List[ModelT]:
        offset = (page - 1) * limit
        result = await self.db.execute(
            select(self.model).order_by(self.model.id).offset(offset).limit(limit)
        )
        items = list(result.scalars().all())
        logger.debug(
            "Loaded %d %s row(s) for page=%d limit=%d", len(items), self.resource, page, limit
        )
        return items

    async def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.db.delete(entity)
        await self.db.flush()
