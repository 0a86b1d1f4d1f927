"""
Lookup and deletion operations shared by the employee and role services.

The service never issues SQL. It validates arguments, delegates to a
repository, converts entities into response models and wraps raw database
failures with what was being attempted (see `db_error_handler`).
"""
import logging
from typing import Generic, Protocol, Sequence, Type, TypeVar

from pydantic import BaseModel

from idm.exceptions import NotFoundError, db_error_handler
from idm.schemas.common import IdResponse
from idm.validators import validate_id, validate_ids

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class ReadDeleteRepository(Protocol[EntityT]):
    """Capability set the shared operations need from a repository."""

    async def find_by_id(self, entity_id: int) -> EntityT: ...

    async def find_by_ids(self, ids: Sequence[int]) -> list[EntityT]: ...

    async def find_all(self) -> list[EntityT]: ...

    async def delete_by_id(self, entity_id: int) -> bool: ...

    async def delete_by_ids(self, ids: Sequence[int]) -> list[int]: ...


class BaseService(Generic[EntityT, ResponseT]):
    """
    Type Parameters:
        EntityT: the ORM entity the repository returns.
        ResponseT: the pydantic model exposed to callers.
    """

    entity_name: str = "entity"
    response_model: Type[ResponseT]

    def __init__(self, repository: ReadDeleteRepository[EntityT]):
        self.repository = repository

    def to_response(self, entity: EntityT) -> ResponseT:
        return self.response_model.model_validate(entity)

    async def find_by_id(self, entity_id: int) -> ResponseT:
        entity_id = validate_id(entity_id)
        with db_error_handler(f"find {self.entity_name} by id {entity_id}", entity_id=entity_id):
            entity = await self.repository.find_by_id(entity_id)
        return self.to_response(entity)

    async def find_by_ids(self, ids: Sequence[int]) -> list[ResponseT]:
        ids = validate_ids(ids)
        with db_error_handler(f"find {self.entity_name}s by ids {ids}", ids=ids):
            entities = await self.repository.find_by_ids(ids)
        return [self.to_response(entity) for entity in entities]

    async def find_all(self) -> list[ResponseT]:
        with db_error_handler(f"find all {self.entity_name}s"):
            entities = await self.repository.find_all()
        return [self.to_response(entity) for entity in entities]

    async def delete_by_id(self, entity_id: int) -> IdResponse:
        """
        Raises:
            NotFoundError: nothing was deleted because the id does not exist.
        """
        entity_id = validate_id(entity_id)
        with db_error_handler(f"delete {self.entity_name} by id {entity_id}", entity_id=entity_id):
            deleted = await self.repository.delete_by_id(entity_id)

        if not deleted:
            raise NotFoundError(f"{self.entity_name} with id {entity_id} not found", fields=["id"])

        logger.info(f"{self.entity_name}.delete.success", extra={"entity_id": entity_id})
        return IdResponse(id=entity_id)

    async def delete_by_ids(self, ids: Sequence[int]) -> list[IdResponse]:
        """
        Delete every existing id in `ids`; one IdResponse per row actually removed.
        The result may be shorter than `ids`.
        """
        ids = validate_ids(ids)
        with db_error_handler(f"delete {self.entity_name}s by ids {ids}", ids=ids):
            deleted = await self.repository.delete_by_ids(ids)

        logger.info(
            f"{self.entity_name}.delete_many.success",
            extra={"requested": len(ids), "deleted": len(deleted)},
        )
        return [IdResponse(id=entity_id) for entity_id in deleted]
