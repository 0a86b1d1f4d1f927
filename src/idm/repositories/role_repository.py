from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from idm.models.role import Role
from .base_repository import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Roles need nothing beyond the generic operations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], *, find_all_timeout: float = 2.0):
        super().__init__(Role, session_factory, find_all_timeout=find_all_timeout)
