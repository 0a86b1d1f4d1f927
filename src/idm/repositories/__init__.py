"""
Repository layer: the only code that issues SQL.

Usage:
    from idm.repositories import EmployeeRepository, RoleRepository
"""

from .base_repository import BaseRepository, Transaction
from .employee_repository import EmployeeRepository
from .role_repository import RoleRepository

__all__ = [
    "BaseRepository",
    "Transaction",
    "EmployeeRepository",
    "RoleRepository",
]
