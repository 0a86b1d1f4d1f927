from .base import Base
from .session import create_engine_from_settings, create_session_factory, create_schema

__all__ = ["Base", "create_engine_from_settings", "create_session_factory", "create_schema"]
