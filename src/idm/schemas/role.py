from datetime import datetime

from pydantic import BaseModel, ConfigDict

from idm.models.role import Role


class RoleIn(BaseModel):
    name: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_entity(self) -> Role:
        return Role(**self.model_dump(exclude_none=True))


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime
    updated_at: datetime
