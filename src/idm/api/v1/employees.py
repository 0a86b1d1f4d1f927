"""
Employee endpoints.

Handlers only marshal: they hand raw request data to EmployeeService (which
validates it), wrap results in the Envelope and leave every failure to the
exception handlers in `error_handlers.py`.
"""
import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from idm.api.auth import require_admin, require_user
from idm.api.dependencies import get_app_settings, get_employee_service
from idm.config.settings import Settings
from idm.schemas import EmployeeIn, EmployeeResponse, Envelope, IdResponse, PageResponse
from idm.services import EmployeeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.post("", dependencies=[Depends(require_admin)])
async def create_employee(
    payload: Any = Body(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Envelope[int]:
    new_id = await service.create_employee(payload)
    return Envelope[int].ok(new_id)


@router.post("/add", dependencies=[Depends(require_admin)])
async def add_employee(
    payload: EmployeeIn,
    service: EmployeeService = Depends(get_employee_service),
) -> Envelope[EmployeeResponse]:
    logger.debug("employee.add.received", extra={"employee_name": payload.name, "employee_surname": payload.surname})
    employee = await service.add(payload.to_entity())
    return Envelope[EmployeeResponse].ok(employee)


@router.post("/ids", dependencies=[Depends(require_user)])
async def find_employees_by_ids(
    ids: Any = Body(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Envelope[list[EmployeeResponse]]:
    employees = await service.find_by_ids(ids)
    return Envelope[list[EmployeeResponse]].ok(employees)


@router.get("/page", dependencies=[Depends(require_user)])
async def find_employees_page(
    page_number: str | None = Query(None),
    page_size: str | None = Query(None),
    text_filter: str | None = Query(None),
    service: EmployeeService = Depends(get_employee_service),
    settings: Settings = Depends(get_app_settings),
) -> Envelope[PageResponse]:
    # Raw strings go to the service so bounds and type errors share one error kind.
    params = {
        key: value
        for key, value in (("page_number", page_number), ("page_size", page_size), ("text_filter", text_filter))
        if value is not None
    }
    page = await asyncio.wait_for(service.find_page(params), timeout=settings.FIND_PAGE_REQUEST_TIMEOUT)
    return Envelope[PageResponse].ok(page)


@router.get("", dependencies=[Depends(require_user)])
async def find_all_employees(
    service: EmployeeService = Depends(get_employee_service),
    settings: Settings = Depends(get_app_settings),
) -> Envelope[list[EmployeeResponse]]:
    employees = await asyncio.wait_for(service.find_all(), timeout=settings.FIND_ALL_REQUEST_TIMEOUT)
    return Envelope[list[EmployeeResponse]].ok(employees)


@router.post("/{employee_id}", dependencies=[Depends(require_user)])
async def find_employee_by_id(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> Envelope[EmployeeResponse]:
    employee = await service.find_by_id(employee_id)
    return Envelope[EmployeeResponse].ok(employee)


@router.delete("/ids", dependencies=[Depends(require_admin)])
async def delete_employees_by_ids(
    ids: Any = Body(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Envelope[list[IdResponse]]:
    deleted = await service.delete_by_ids(ids)
    return Envelope[list[IdResponse]].ok(deleted)


@router.delete("/{employee_id}", dependencies=[Depends(require_admin)])
async def delete_employee_by_id(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> Envelope[IdResponse]:
    deleted = await service.delete_by_id(employee_id)
    return Envelope[IdResponse].ok(deleted)
