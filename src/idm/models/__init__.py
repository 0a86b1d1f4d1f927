from .employee import Employee
from .role import Role

__all__ = ["Employee", "Role"]
