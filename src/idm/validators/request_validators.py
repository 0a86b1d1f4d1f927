"""
Input validation shared by the services.

Pydantic does the checking; these helpers only translate its ValidationError
into the application's RequestValidationError so callers see one error kind.
"""
from typing import Annotated, Any, Sequence, Type, TypeVar

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from idm.exceptions import EmptyArgumentError, RequestValidationError
from idm.models.employee import ID_MAX

M = TypeVar("M", bound=BaseModel)

_ID_ADAPTER = TypeAdapter(Annotated[int, Field(gt=0, le=ID_MAX)])
_IDS_ADAPTER = TypeAdapter(list[Annotated[int, Field(gt=0, le=ID_MAX)]])


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "value"


def to_request_validation_error(exc: ValidationError, subject: str) -> RequestValidationError:
    violations = exc.errors(include_url=False)
    fields = [_field_name(err["loc"]) for err in violations]
    details = "; ".join(f"{_field_name(err['loc'])}: {err['msg']}" for err in violations)
    return RequestValidationError(f"invalid {subject}: {details}", fields=fields)


def validate_model(model_cls: Type[M], payload: Any) -> M:
    """
    Validate `payload` (a mapping or an instance of `model_cls`) against `model_cls`.

    Raises:
        RequestValidationError: carrying one field name per violation.
    """
    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        raise to_request_validation_error(exc, model_cls.__name__) from exc


def validate_id(value: Any) -> int:
    try:
        return _ID_ADAPTER.validate_python(value)
    except ValidationError as exc:
        raise RequestValidationError(f"invalid id: {value!r}, must be a positive 64-bit integer", fields=["id"]) from exc


def validate_ids(values: Sequence[Any] | None) -> list[int]:
    """
    Validate an id set: non-empty, positive integers. Duplicates are dropped,
    first occurrence order kept.

    Raises:
        EmptyArgumentError: nothing to operate on.
        RequestValidationError: not a list of positive integers.
    """
    if values is None or (isinstance(values, (list, tuple)) and not values):
        raise EmptyArgumentError()
    try:
        ids = _IDS_ADAPTER.validate_python(values)
    except ValidationError as exc:
        raise to_request_validation_error(exc, "ids") from exc
    return list(dict.fromkeys(ids))
