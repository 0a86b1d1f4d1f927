"""
FastAPI dependencies resolving the objects built once by `create_app`.

Nothing here constructs anything: the app factory stores settings, engine and
services on `app.state`, and endpoints receive them through these functions
(which tests can override with `app.dependency_overrides`).
"""
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from idm.config.settings import Settings
from idm.services import EmployeeService, RoleService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


def get_role_service(request: Request) -> RoleService:
    return request.app.state.role_service
