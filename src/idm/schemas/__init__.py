from .common import Envelope, IdResponse
from .employee import (
    CreateEmployeeRequest,
    EmployeeIn,
    EmployeeResponse,
    PageRequest,
    PageResponse,
)
from .role import RoleIn, RoleResponse

__all__ = [
    "Envelope",
    "IdResponse",
    "CreateEmployeeRequest",
    "EmployeeIn",
    "EmployeeResponse",
    "PageRequest",
    "PageResponse",
    "RoleIn",
    "RoleResponse",
]
