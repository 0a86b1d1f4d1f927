"""
Wire-facing shapes for the employee resource.

Request models re-validate instances (`revalidate_instances="always"`), so
the service can run `Model.model_validate(...)` on whatever it receives,
raw mappings from the HTTP layer or already-built models, and always get the
constraints checked.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from idm.models.employee import ID_MAX, Employee

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 155
# Mirrors the storage CHECK (age > 16 AND age < 91).
AGE_MIN_EXCLUSIVE = 16
AGE_MAX = 90
PAGE_SIZE_MAX = 100
# Keeps page_number * page_size within the 64-bit OFFSET range.
PAGE_NUMBER_MAX = ID_MAX // PAGE_SIZE_MAX


class CreateEmployeeRequest(BaseModel):
    model_config = ConfigDict(revalidate_instances="always", str_strip_whitespace=True)

    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    surname: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    age: int = Field(gt=AGE_MIN_EXCLUSIVE, le=AGE_MAX)
    created_at: datetime
    updated_at: datetime

    def to_entity(self) -> Employee:
        return Employee(
            name=self.name,
            surname=self.surname,
            age=self.age,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class EmployeeIn(BaseModel):
    """
    Loosely typed body of the direct entity submission path (/employees/add).
    Only types are enforced here; the emptiness and age checks live in
    EmployeeService.add.
    """
    name: str = ""
    surname: str = ""
    age: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_entity(self) -> Employee:
        return Employee(**self.model_dump(exclude_none=True))


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    age: int
    created_at: datetime
    updated_at: datetime


class PageRequest(BaseModel):
    model_config = ConfigDict(revalidate_instances="always")

    page_number: int = Field(default=0, ge=0, le=PAGE_NUMBER_MAX)
    page_size: int = Field(ge=1, le=PAGE_SIZE_MAX)
    text_filter: str | None = None

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size


class PageResponse(BaseModel):
    result: list[EmployeeResponse]
    page_size: int
    page_number: int = Field(serialization_alias="page_num")
    total: int
    text_filter: str | None = None
