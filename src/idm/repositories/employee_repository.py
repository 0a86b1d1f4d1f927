"""
Employee repository: the generic operations plus the natural-key existence
check used by the creation workflow and the filtered page query.
"""
import asyncio
import logging

from sqlalchemy import and_, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from idm.models.employee import Employee
from .base_repository import BaseRepository, Transaction

logger = logging.getLogger(__name__)


class EmployeeRepository(BaseRepository[Employee]):

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        find_all_timeout: float = 2.0,
        find_page_timeout: float = 4.0,
    ):
        super().__init__(Employee, session_factory, find_all_timeout=find_all_timeout)
        self.find_page_timeout = find_page_timeout

    async def exists_by_name_and_surname(self, tx: Transaction, name: str, surname: str) -> bool:
        """
        Whether an employee with this exact (name, surname) pair exists.

        Runs on `tx`, so rows inserted earlier in the same transaction are seen
        and other transactions are isolated per the database isolation level.
        """
        found = await tx.scalar(
            select(exists().where(and_(Employee.name == name, Employee.surname == surname)))
        )
        return bool(found)

    @staticmethod
    def _name_filter(text_filter: str | None):
        # Case-insensitive substring on name; % and _ in the filter match literally.
        if not text_filter:
            return None
        return Employee.name.icontains(text_filter, autoescape=True)

    async def find_page(
        self, limit: int, offset: int, text_filter: str | None = None
    ) -> tuple[list[Employee], int]:
        """
        Return one page of employees ordered by id and the total number of rows
        matching `text_filter`.

        The page query and the count query share the same predicate so that the
        total is always consistent with the pages a client walks through.

        Raises:
            TimeoutError: both queries did not finish within `find_page_timeout`.
        """
        condition = self._name_filter(text_filter)

        page_stmt = select(Employee).order_by(Employee.id.asc()).limit(limit).offset(offset)
        count_stmt = select(func.count()).select_from(Employee)
        if condition is not None:
            page_stmt = page_stmt.where(condition)
            count_stmt = count_stmt.where(condition)

        async with asyncio.timeout(self.find_page_timeout):
            async with self.session_factory() as session:
                entities = list((await session.scalars(page_stmt)).all())
                total = await session.scalar(count_stmt)

        logger.debug(
            "repo.find_page.success",
            extra={"limit": limit, "offset": offset, "text_filter": text_filter, "returned": len(entities), "total": total},
        )
        return entities, int(total or 0)
