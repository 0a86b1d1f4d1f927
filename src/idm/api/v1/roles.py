import asyncio
from typing import Any

from fastapi import APIRouter, Body, Depends

from idm.api.auth import require_admin, require_user
from idm.api.dependencies import get_app_settings, get_role_service
from idm.config.settings import Settings
from idm.schemas import Envelope, IdResponse, RoleIn, RoleResponse
from idm.services import RoleService

router = APIRouter(prefix="/roles", tags=["roles"])


@router.post("/add", dependencies=[Depends(require_admin)])
async def add_role(
    payload: RoleIn,
    service: RoleService = Depends(get_role_service),
) -> Envelope[RoleResponse]:
    role = await service.add(payload.to_entity())
    return Envelope[RoleResponse].ok(role)


@router.post("/ids", dependencies=[Depends(require_user)])
async def find_roles_by_ids(
    ids: Any = Body(...),
    service: RoleService = Depends(get_role_service),
) -> Envelope[list[RoleResponse]]:
    roles = await service.find_by_ids(ids)
    return Envelope[list[RoleResponse]].ok(roles)


@router.get("", dependencies=[Depends(require_user)])
async def find_all_roles(
    service: RoleService = Depends(get_role_service),
    settings: Settings = Depends(get_app_settings),
) -> Envelope[list[RoleResponse]]:
    roles = await asyncio.wait_for(service.find_all(), timeout=settings.FIND_ALL_REQUEST_TIMEOUT)
    return Envelope[list[RoleResponse]].ok(roles)


@router.post("/{role_id}", dependencies=[Depends(require_user)])
async def find_role_by_id(
    role_id: int,
    service: RoleService = Depends(get_role_service),
) -> Envelope[RoleResponse]:
    role = await service.find_by_id(role_id)
    return Envelope[RoleResponse].ok(role)


@router.delete("/ids", dependencies=[Depends(require_admin)])
async def delete_roles_by_ids(
    ids: Any = Body(...),
    service: RoleService = Depends(get_role_service),
) -> Envelope[list[IdResponse]]:
    deleted = await service.delete_by_ids(ids)
    return Envelope[list[IdResponse]].ok(deleted)


@router.delete("/{role_id}", dependencies=[Depends(require_admin)])
async def delete_role_by_id(
    role_id: int,
    service: RoleService = Depends(get_role_service),
) -> Envelope[IdResponse]:
    deleted = await service.delete_by_id(role_id)
    return Envelope[IdResponse].ok(deleted)
