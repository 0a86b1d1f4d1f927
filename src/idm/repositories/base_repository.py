"""
Base repository class providing the database operations shared by the
employee and role repositories.

A repository holds an `async_sessionmaker` rather than a single session:
one-shot reads and deletes open their own short-lived session, while
multi-statement writes go through `begin_transaction()` and hand the returned
session back to `commit()` or `rollback()`.

Repositories speak SQLAlchemy. Driver and SQL failures propagate raw; it is
the service layer that wraps them with operation context. The only errors
raised here are usage errors (`EmptyArgumentError`) and `NotFoundError`.
"""
import asyncio
import logging
import time
from typing import Generic, Sequence, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from idm.database.base import Base
from idm.exceptions import EmptyArgumentError, NotFoundError

ModelType = TypeVar("ModelType", bound=Base)

# A session with a begun transaction, owned by the caller until commit/rollback.
Transaction = AsyncSession

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository over a model with an integer `id` primary key.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(
        self,
        model: Type[ModelType],
        session_factory: async_sessionmaker[AsyncSession],
        *,
        find_all_timeout: float = 2.0,
    ):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), e.g. Employee.
            session_factory: Factory producing AsyncSession objects bound to the engine.
            find_all_timeout: Deadline in seconds for the unfiltered listing.
        """
        self.model = model
        self.session_factory = session_factory
        self.find_all_timeout = find_all_timeout

    # ------------------------
    # Transaction primitives
    # ------------------------
    async def begin_transaction(self) -> Transaction:
        """
        Open a session and begin a transaction on a checked-out connection.

        The connection is acquired eagerly so that an unreachable database fails
        here and not on the first statement. The caller must finish the returned
        transaction with exactly one of `commit()` or `rollback()`.
        """
        session = self.session_factory()
        try:
            await session.connection()
        except BaseException:
            await session.close()
            raise
        logger.debug("repo.transaction.begin", extra={"model": self.model.__name__})
        return session

    async def commit(self, tx: Transaction) -> None:
        try:
            await tx.commit()
        finally:
            await tx.close()

    async def rollback(self, tx: Transaction) -> None:
        try:
            await tx.rollback()
        finally:
            await tx.close()

    # ------------------------
    # Writes
    # ------------------------
    async def insert(self, tx: Transaction, entity: ModelType) -> int:
        """
        Insert `entity` within `tx` and return the id the database assigned.

        The entity is refreshed so server-side defaults (timestamps) are loaded
        before the transaction is committed.
        """
        start = time.perf_counter()
        tx.add(entity)
        await tx.flush()
        await tx.refresh(entity)

        logger.info(
            "repo.insert.success",
            extra={
                "model": self.model.__name__,
                "id": entity.id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity.id

    async def add(self, entity: ModelType) -> ModelType:
        """Insert `entity` in its own short transaction and return it populated."""
        async with self.session_factory() as session:
            async with session.begin():
                await self.insert(session, entity)
        return entity

    async def delete_by_id(self, entity_id: int) -> bool:
        """
        Delete an entity by its ID.

        Returns:
            True if a row was removed, False if there was nothing to delete.
        """
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(self.model)
                    .where(self.model.id == entity_id)
                    .execution_options(synchronize_session=False)
                )
                deleted = result.rowcount > 0

        if deleted:
            logger.debug("repo.delete.success", extra={"model": self.model.__name__, "id": entity_id})
        else:
            logger.info("repo.delete.missing", extra={"model": self.model.__name__, "id": entity_id})
        return deleted

    async def delete_by_ids(self, ids: Sequence[int]) -> list[int]:
        """
        Delete every row whose id is in `ids`.

        Returns:
            The ids actually removed, ascending. Ids that did not exist are absent.

        Raises:
            EmptyArgumentError: `ids` is empty.
        """
        if not ids:
            raise EmptyArgumentError()

        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(self.model)
                    .where(self.model.id.in_(ids))
                    .returning(self.model.id)
                    .execution_options(synchronize_session=False)
                )
                deleted = sorted(result.scalars().all())

        logger.debug(
            "repo.delete_many.success",
            extra={"model": self.model.__name__, "requested": len(ids), "deleted": len(deleted)},
        )
        return deleted

    # ------------------------
    # Reads
    # ------------------------
    async def find_by_id(self, entity_id: int) -> ModelType:
        """
        Raises:
            NotFoundError: no row has this id.
        """
        async with self.session_factory() as session:
            entity = await session.get(self.model, entity_id)

        if entity is None:
            raise NotFoundError(f"{self.model.__name__} with id {entity_id} not found", fields=["id"])

        logger.debug(f"Retrieved {self.model.__name__} by ID: {entity_id}")
        return entity

    async def find_by_ids(self, ids: Sequence[int]) -> list[ModelType]:
        """Return the rows that exist among `ids`, ordered by id. Missing ids are skipped."""
        async with self.session_factory() as session:
            result = await session.scalars(
                select(self.model).where(self.model.id.in_(ids)).order_by(self.model.id.asc())
            )
            entities = list(result.all())

        logger.debug(f"Retrieved {len(entities)} of {len(ids)} requested {self.model.__name__} entities")
        return entities

    async def find_all(self) -> list[ModelType]:
        """
        Return every row ordered by id.

        Raises:
            TimeoutError: the query did not finish within `find_all_timeout`.
        """
        async with asyncio.timeout(self.find_all_timeout):
            async with self.session_factory() as session:
                result = await session.scalars(select(self.model).order_by(self.model.id.asc()))
                entities = list(result.all())

        logger.debug(f"Retrieved {len(entities)} {self.model.__name__} entities")
        return entities
