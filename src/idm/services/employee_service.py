"""
Employee service: the creation workflow with its uniqueness check, and the
paginated listing.

Both creation paths (`create_employee` and `add`) funnel into
`_insert_unique`, which runs

    begin -> exists(name, surname) -> insert -> commit

on one transaction. `_transaction` guarantees the transaction ends with
exactly one commit or one rollback, whatever happens in between, including
task cancellation.

Uniqueness is only as strong as the database isolation level: two concurrent
transactions at READ COMMITTED can both pass the existence check.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Protocol

from sqlalchemy.exc import SQLAlchemyError

from idm.exceptions import (
    AlreadyExistsError,
    CommitError,
    InsertError,
    RequestValidationError,
    TransactionBeginError,
    db_error_handler,
)
from idm.models.employee import Employee
from idm.repositories.base_repository import Transaction
from idm.schemas.employee import (
    AGE_MIN_EXCLUSIVE,
    CreateEmployeeRequest,
    EmployeeResponse,
    PageRequest,
    PageResponse,
)
from idm.validators import validate_model
from .base_service import BaseService, ReadDeleteRepository

logger = logging.getLogger(__name__)


class EmployeeRepositoryProtocol(ReadDeleteRepository[Employee], Protocol):

    async def begin_transaction(self) -> Transaction: ...

    async def commit(self, tx: Transaction) -> None: ...

    async def rollback(self, tx: Transaction) -> None: ...

    async def exists_by_name_and_surname(self, tx: Transaction, name: str, surname: str) -> bool: ...

    async def insert(self, tx: Transaction, entity: Employee) -> int: ...

    async def find_page(
        self, limit: int, offset: int, text_filter: str | None = None
    ) -> tuple[list[Employee], int]: ...


class EmployeeService(BaseService[Employee, EmployeeResponse]):

    entity_name = "employee"
    response_model = EmployeeResponse

    def __init__(self, repository: EmployeeRepositoryProtocol):
        super().__init__(repository)
        self.repository: EmployeeRepositoryProtocol = repository

    # ------------------------
    # Transaction scope
    # ------------------------
    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[Transaction]:
        try:
            tx = await self.repository.begin_transaction()
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("employee.transaction.begin_failed", extra={"operation": operation})
            raise TransactionBeginError(f"Failed to begin transaction to {operation}") from exc

        try:
            yield tx
        except BaseException:
            await self._rollback(tx, operation)
            raise

        try:
            await self.repository.commit(tx)
        except (SQLAlchemyError, OSError) as exc:
            # The row may or may not be durable at this point; report failure regardless.
            logger.exception("employee.transaction.commit_failed", extra={"operation": operation})
            raise CommitError(f"Failed to commit transaction to {operation}") from exc

    async def _rollback(self, tx: Transaction, operation: str) -> None:
        try:
            await self.repository.rollback(tx)
        except (SQLAlchemyError, OSError):
            # Keep propagating the error that caused the rollback.
            logger.exception("employee.transaction.rollback_failed", extra={"operation": operation})
        else:
            logger.debug("employee.transaction.rolled_back", extra={"operation": operation})

    async def _insert_unique(self, entity: Employee, operation: str) -> int:
        async with self._transaction(operation) as tx:
            with db_error_handler(f"check whether employee {entity.name} {entity.surname} exists"):
                taken = await self.repository.exists_by_name_and_surname(tx, entity.name, entity.surname)

            if taken:
                logger.info(
                    "employee.create.duplicate",
                    extra={"employee_name": entity.name, "employee_surname": entity.surname},
                )
                raise AlreadyExistsError(
                    f"employee with name {entity.name} and surname {entity.surname} already exists",
                    fields=["name", "surname"],
                )

            with db_error_handler(operation, error_cls=InsertError):
                new_id = await self.repository.insert(tx, entity)

        logger.info("employee.create.success", extra={"entity_id": new_id, "operation": operation})
        return new_id

    # ------------------------
    # Creation
    # ------------------------
    async def create_employee(self, request: CreateEmployeeRequest | Mapping[str, Any]) -> int:
        """
        Validate `request` and insert a new employee unless one with the same
        name and surname already exists.

        Returns:
            The id of the new employee.

        Raises:
            RequestValidationError: request violates field constraints (no transaction is opened).
            AlreadyExistsError: (name, surname) is taken; the transaction was rolled back.
            TransactionBeginError, InsertError, CommitError: infrastructure faults.
        """
        request = validate_model(CreateEmployeeRequest, request)
        return await self._insert_unique(request.to_entity(), f"create employee {request.name} {request.surname}")

    async def add(self, employee: Employee) -> EmployeeResponse:
        """
        Insert an employee entity submitted directly.

        Only minimal checks run here (not empty, name and surname present,
        age above the minimum); the rest is left to the storage constraints.
        """
        if not (employee.name or employee.surname or employee.age):
            raise RequestValidationError("employee is empty")

        missing = [field for field in ("name", "surname") if not (getattr(employee, field) or "").strip()]
        if missing:
            raise RequestValidationError(f"{', '.join(missing)} must not be empty", fields=missing)
        if employee.age is None or employee.age <= AGE_MIN_EXCLUSIVE:
            raise RequestValidationError(f"age must be greater than {AGE_MIN_EXCLUSIVE}", fields=["age"])

        await self._insert_unique(employee, f"add employee {employee.name} {employee.surname}")
        return self.to_response(employee)

    # ------------------------
    # Listing
    # ------------------------
    async def find_page(self, request: PageRequest | Mapping[str, Any]) -> PageResponse:
        """
        Return page `page_number` (zero-based) of `page_size` employees ordered
        by id, filtered by a case-insensitive substring of the name.

        A page past the end has an empty `result` and the real `total`.
        TimeoutError from the repository propagates unchanged.
        """
        request = validate_model(PageRequest, request)

        with db_error_handler(
            f"find employees page {request.page_number} of size {request.page_size}",
            page_number=request.page_number,
            page_size=request.page_size,
        ):
            entities, total = await self.repository.find_page(
                request.page_size, request.offset, request.text_filter
            )

        return PageResponse(
            result=[self.to_response(entity) for entity in entities],
            page_size=request.page_size,
            page_number=request.page_number,
            total=total,
            text_filter=request.text_filter,
        )
