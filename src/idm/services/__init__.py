from .base_service import BaseService
from .employee_service import EmployeeService, EmployeeRepositoryProtocol
from .role_service import RoleService, RoleRepositoryProtocol

__all__ = [
    "BaseService",
    "EmployeeService",
    "EmployeeRepositoryProtocol",
    "RoleService",
    "RoleRepositoryProtocol",
]
