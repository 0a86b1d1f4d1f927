"""
EmployeeService against a real (SQLite) database: creation workflow,
lookups, deletes and paging.
"""
from unittest.mock import AsyncMock

import pytest

from idm.exceptions import (
    AlreadyExistsError,
    EmptyArgumentError,
    InsertError,
    NotFoundError,
    RequestValidationError,
)
from idm.models.employee import Employee
from idm.schemas import CreateEmployeeRequest, EmployeeResponse, IdResponse, PageRequest
from idm.schemas.employee import PAGE_NUMBER_MAX, PAGE_SIZE_MAX
from idm.services import EmployeeService


class TestCreateEmployee:

    async def test_create_returns_new_id(self, employee_service, sample_employee_data, count_employees):
        new_id = await employee_service.create_employee(sample_employee_data)

        assert new_id == 1
        assert await count_employees(name="John", surname="Doe") == 1

    async def test_create_accepts_request_model(self, employee_service, sample_employee_data):
        request = CreateEmployeeRequest(**sample_employee_data)
        assert await employee_service.create_employee(request) == 1

    async def test_duplicate_is_rejected_and_nothing_inserted(
        self, employee_service, sample_employee_data, count_employees
    ):
        await employee_service.create_employee(sample_employee_data)

        with pytest.raises(AlreadyExistsError) as exc_info:
            await employee_service.create_employee({**sample_employee_data, "age": 40})

        assert exc_info.value.fields == ["name", "surname"]
        assert exc_info.value.http_status() == 400
        assert await count_employees(name="John", surname="Doe") == 1

    async def test_same_name_different_surname_is_allowed(self, employee_service, sample_employee_data):
        await employee_service.create_employee(sample_employee_data)
        second = await employee_service.create_employee({**sample_employee_data, "surname": "Smith"})
        assert second == 2

    @pytest.mark.parametrize(
        "override, field",
        [
            ({"name": "J"}, "name"),
            ({"surname": "x" * 156}, "surname"),
            ({"age": 16}, "age"),
            ({"age": 91}, "age"),
            ({"created_at": None}, "created_at"),
        ],
    )
    async def test_invalid_request_is_rejected_before_storage(
        self, employee_service, sample_employee_data, count_employees, override, field
    ):
        with pytest.raises(RequestValidationError) as exc_info:
            await employee_service.create_employee({**sample_employee_data, **override})

        assert field in exc_info.value.fields
        assert await count_employees() == 0

    async def test_age_bounds_are_inclusive_at_17_and_90(self, employee_service, sample_employee_data):
        assert await employee_service.create_employee({**sample_employee_data, "age": 17}) == 1
        assert await employee_service.create_employee(
            {**sample_employee_data, "surname": "Older", "age": 90}
        ) == 2


class TestAddEmployee:

    async def test_add_returns_stored_employee(self, employee_service):
        response = await employee_service.add(Employee(name="Ann", surname="Lee", age=33))

        assert isinstance(response, EmployeeResponse)
        assert response.id == 1
        assert response.created_at is not None

    async def test_add_rejects_empty_employee(self, employee_service):
        with pytest.raises(RequestValidationError, match="employee is empty"):
            await employee_service.add(Employee(name="", surname="", age=0))

    async def test_add_rejects_blank_surname(self, employee_service):
        with pytest.raises(RequestValidationError) as exc_info:
            await employee_service.add(Employee(name="Ann", surname="  ", age=33))
        assert exc_info.value.fields == ["surname"]

    async def test_add_rejects_young_age(self, employee_service):
        with pytest.raises(RequestValidationError) as exc_info:
            await employee_service.add(Employee(name="Ann", surname="Lee", age=16))
        assert exc_info.value.fields == ["age"]

    async def test_add_over_age_is_rejected_by_storage(self, employee_service, count_employees):
        with pytest.raises(InsertError) as exc_info:
            await employee_service.add(Employee(name="Ann", surname="Lee", age=95))

        assert "allowed range" in exc_info.value.message
        assert exc_info.value.http_status() == 500
        assert await count_employees() == 0

    async def test_add_checks_uniqueness(self, employee_service, create_employee):
        await create_employee(name="Ann", surname="Lee")
        with pytest.raises(AlreadyExistsError):
            await employee_service.add(Employee(name="Ann", surname="Lee", age=33))


class TestLookups:

    async def test_find_by_id(self, employee_service, multiple_employees):
        response = await employee_service.find_by_id(3)
        assert response.name == "Name_3"

    async def test_find_by_id_not_found(self, employee_service):
        with pytest.raises(NotFoundError):
            await employee_service.find_by_id(42)

    @pytest.mark.parametrize("bad_id", [0, -1, "abc", 2**63])
    async def test_find_by_id_invalid(self, employee_service, bad_id):
        with pytest.raises(RequestValidationError):
            await employee_service.find_by_id(bad_id)

    async def test_find_by_ids_deduplicates(self, employee_service, multiple_employees):
        responses = await employee_service.find_by_ids([2, 2, 1, 99])
        assert [r.id for r in responses] == [1, 2]

    async def test_find_by_ids_empty(self, employee_service):
        with pytest.raises(EmptyArgumentError):
            await employee_service.find_by_ids([])

    async def test_ids_beyond_bigint_are_rejected(self, employee_service):
        with pytest.raises(RequestValidationError):
            await employee_service.find_by_ids([1, 2**63])
        with pytest.raises(RequestValidationError):
            await employee_service.delete_by_ids([2**64])
        with pytest.raises(RequestValidationError):
            await employee_service.delete_by_id(2**63)

    async def test_find_all(self, employee_service, multiple_employees):
        responses = await employee_service.find_all()
        assert len(responses) == 5
        assert all(isinstance(r, EmployeeResponse) for r in responses)


class TestDeletes:

    async def test_delete_by_id(self, employee_service, multiple_employees, count_employees):
        assert await employee_service.delete_by_id(1) == IdResponse(id=1)
        assert await count_employees() == 4

    async def test_delete_by_id_missing(self, employee_service):
        with pytest.raises(NotFoundError) as exc_info:
            await employee_service.delete_by_id(7)
        assert exc_info.value.http_status() == 404

    async def test_delete_by_ids(self, employee_service, multiple_employees):
        deleted = await employee_service.delete_by_ids([3, 1, 100])
        assert deleted == [IdResponse(id=1), IdResponse(id=3)]

    @pytest.mark.parametrize("ids", [[], None])
    async def test_delete_by_ids_empty(self, employee_service, ids):
        with pytest.raises(EmptyArgumentError):
            await employee_service.delete_by_ids(ids)

    async def test_delete_by_ids_rejects_non_integers(self, employee_service):
        with pytest.raises(RequestValidationError):
            await employee_service.delete_by_ids(["a", 2])


class TestFindPage:

    async def test_pages_walk_the_table(self, employee_service, multiple_employees):
        first = await employee_service.find_page({"page_number": 0, "page_size": 2})
        last = await employee_service.find_page(PageRequest(page_number=2, page_size=2))

        assert [e.id for e in first.result] == [1, 2]
        assert [e.id for e in last.result] == [5]
        assert first.total == last.total == 5
        assert last.page_number == 2
        assert last.page_size == 2

    async def test_page_number_defaults_to_zero(self, employee_service, multiple_employees):
        page = await employee_service.find_page({"page_size": "3"})
        assert page.page_number == 0
        assert [e.id for e in page.result] == [1, 2, 3]

    async def test_page_past_end(self, employee_service, multiple_employees):
        page = await employee_service.find_page({"page_number": 9, "page_size": 2})
        assert page.result == []
        assert page.total == 5

    async def test_last_addressable_page_is_empty(self, employee_service, multiple_employees):
        page = await employee_service.find_page({"page_number": PAGE_NUMBER_MAX, "page_size": PAGE_SIZE_MAX})
        assert page.result == []
        assert page.total == 5

    async def test_page_number_beyond_offset_range(self, employee_service, multiple_employees):
        with pytest.raises(RequestValidationError) as exc_info:
            await employee_service.find_page({"page_number": 10**18, "page_size": 100})
        assert exc_info.value.fields == ["page_number"]

    async def test_filter_is_echoed(self, employee_service, multiple_employees):
        page = await employee_service.find_page({"page_size": 10, "text_filter": "name_4"})
        assert [e.name for e in page.result] == ["Name_4"]
        assert page.total == 1
        assert page.text_filter == "name_4"

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"page_size": 0},
            {"page_size": 101},
            {"page_size": 5, "page_number": -1},
            {"page_size": "many"},
        ],
    )
    async def test_invalid_page_request(self, employee_service, params):
        with pytest.raises(RequestValidationError):
            await employee_service.find_page(params)

    async def test_filtered_pages_split_matches(self, employee_service, multiple_employees):
        first = await employee_service.find_page({"page_number": 0, "page_size": 3, "text_filter": "name_"})
        second = await employee_service.find_page({"page_number": 1, "page_size": 3, "text_filter": "name_"})

        assert len(first.result) == 3
        assert len(second.result) == 2
        assert first.total == second.total == 5

    @pytest.mark.parametrize("page_size", [1, 2, 3, 5, 7])
    async def test_pages_cover_every_row_once(self, employee_service, multiple_employees, page_size):
        seen = []
        page_number = 0
        while True:
            page = await employee_service.find_page({"page_number": page_number, "page_size": page_size})
            assert len(page.result) <= page_size
            if not page.result:
                break
            seen.extend(e.id for e in page.result)
            page_number += 1

        assert seen == [1, 2, 3, 4, 5]


async def test_repeated_delete_by_ids_returns_nothing(employee_service, multiple_employees):
    assert len(await employee_service.delete_by_ids([1, 2])) == 2
    assert await employee_service.delete_by_ids([1, 2]) == []


async def test_empty_id_set_never_reaches_repository():
    repository = AsyncMock()
    with pytest.raises(EmptyArgumentError):
        await EmployeeService(repository).delete_by_ids([])
    repository.delete_by_ids.assert_not_awaited()
