from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from idm.database.base import Base

# SQLite only auto-increments INTEGER PRIMARY KEY columns.
IdType = BigInteger().with_variant(Integer, "sqlite")
# Largest value a BIGINT id (or row offset) can hold.
ID_MAX = 2**63 - 1


class Employee(Base):
    """
    SQLAlchemy model for an employee.

    (name, surname) is NOT backed by a unique index: uniqueness is
    checked by EmployeeService inside the insert transaction.
    """
    __tablename__ = "employee"
    __table_args__ = (
        CheckConstraint("age > 16 AND age < 91", name="age_range"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(155), nullable=False)

    surname: Mapped[str] = mapped_column(String(155), nullable=False)

    age: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Employee(id={self.id!r}, name={self.name!r}, surname={self.surname!r})>"
