import logging
from typing import Protocol

from idm.exceptions import InsertError, RequestValidationError, db_error_handler
from idm.models.role import Role
from idm.schemas.role import RoleResponse
from .base_service import BaseService, ReadDeleteRepository

logger = logging.getLogger(__name__)


class RoleRepositoryProtocol(ReadDeleteRepository[Role], Protocol):

    async def add(self, entity: Role) -> Role: ...


class RoleService(BaseService[Role, RoleResponse]):
    """Roles share the employee lookups and deletes but have no uniqueness rule."""

    entity_name = "role"
    response_model = RoleResponse

    def __init__(self, repository: RoleRepositoryProtocol):
        super().__init__(repository)
        self.repository: RoleRepositoryProtocol = repository

    async def add(self, role: Role) -> RoleResponse:
        if not (role.name or "").strip():
            raise RequestValidationError("role name must not be empty", fields=["name"])

        with db_error_handler(f"add role {role.name}", error_cls=InsertError):
            await self.repository.add(role)

        logger.info("role.create.success", extra={"entity_id": role.id})
        return self.to_response(role)
