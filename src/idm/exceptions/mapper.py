import re
import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .integrity_classifier import ConstraintKind, classify_integrity_error
from .base import InsertError, RepositoryError

logger = logging.getLogger(__name__)


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the driver message.
      - Postgres: 'null value in column "name" ...'
      - SQLite:   'NOT NULL constraint failed: employee.name'
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)

    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'NOT NULL constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]

    return None


def map_integrity_error(exc: IntegrityError, operation: str) -> InsertError:
    """
    Turn a rejected write into an InsertError with a client-safe message.
    Raw driver text only goes to DEBUG logs.
    """
    kind, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)

    logger.info(
        "mapper.integrity_violation",
        extra={"operation": operation, "kind": kind.value, "fields": columns, "constraint": constraint_name},
    )
    logger.debug("mapper.integrity_raw", extra={"operation": operation, "raw": str(exc.orig)})

    if kind is ConstraintKind.CHECK:
        message = f"Failed to {operation}: value outside the allowed range"
    elif kind is ConstraintKind.NOT_NULL:
        message = f"Failed to {operation}: missing required field(s)"
    else:
        message = f"Failed to {operation}: database rejected the write"

    return InsertError(message, fields=columns, constraint=constraint_name)


@contextmanager
def db_error_handler(operation: str, *, error_cls: type[RepositoryError] = RepositoryError, **context):
    """
    Wrap raw database failures raised inside the block in the service taxonomy.

    Usage:
        with db_error_handler(f"find employee by id {id}", employee_id=id):
            entity = await self.repository.find_by_id(id)

    - IdmError subclasses raised by the repository pass through untouched.
    - TimeoutError passes through so the boundary can answer 408.
    - IntegrityError becomes InsertError.
    - Any other SQLAlchemy or socket error becomes `error_cls`.
    """
    try:
        yield
    except TimeoutError:
        logger.warning("db.timeout", extra={"operation": operation, **context})
        raise
    except IntegrityError as exc:
        raise map_integrity_error(exc, operation) from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("db.failure", extra={"operation": operation, **context})
        raise error_cls(f"Failed to {operation}") from exc
