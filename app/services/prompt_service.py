from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.prompt import Prompt
from app.services.errors import PersistenceError

logger = logging.getLogger(__name__)


class PromptService:
    """CRUD over the ``prompts`` table.

    Every method issues a single statement on the session it was constructed
    with. A missing row is reported as ``None`` (get/update) or ``False``
    (delete); storage failures, including an unreachable database, are raised as
    ``PersistenceError``.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @asynccontextmanager
    async def _storage_errors(self) -> AsyncIterator[None]:
        try:
            yield
        except (SQLAlchemyError, OSError) as exc:
            # asyncpg connect failures are raised as plain OSError, not wrapped by SQLAlchemy
            try:
                await self.db.rollback()
            except (SQLAlchemyError, OSError) as rollback_exc:
                logger.warning(f"Rollback failed after storage error: {rollback_exc}")
            raise PersistenceError(str(exc)) from exc

    async def create(self, title: str, content: str) -> Prompt:
        async with self._storage_errors():
            prompt = await self.db.scalar(
                insert(Prompt).values(title=title, content=content).returning(Prompt)
            )
            await self.db.commit()
        logger.info(f"Prompt created: {prompt.id}")
        return prompt

    async def list_all(self) -> list[Prompt]:
        # No ORDER BY: callers must not rely on insertion order
        async with self._storage_errors():
            result = await self.db.scalars(select(Prompt))
            return list(result.all())

    async def get(self, prompt_id: uuid.UUID) -> Prompt | None:
        async with self._storage_errors():
            return await self.db.scalar(select(Prompt).where(Prompt.id == prompt_id))

    async def update(self, prompt_id: uuid.UUID, title: str, content: str) -> Prompt | None:
        """
        Replace title and content of an existing prompt.

        Returns:
            The updated prompt, or None if no row has this id
        """
        async with self._storage_errors():
            prompt = await self.db.scalar(
                update(Prompt)
                .where(Prompt.id == prompt_id)
                .values(title=title, content=content)
                .returning(Prompt)
                .execution_options(populate_existing=True)
            )
            await self.db.commit()
        if prompt is not None:
            logger.info(f"Prompt updated: {prompt_id}")
        return prompt

    async def delete(self, prompt_id: uuid.UUID) -> bool:
        """
        Delete a prompt by id.

        Returns:
            True if a row was removed, False if none matched
        """
        async with self._storage_errors():
            result = await self.db.execute(
                delete(Prompt)
                .where(Prompt.id == prompt_id)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Prompt deleted: {prompt_id}")
        return deleted
