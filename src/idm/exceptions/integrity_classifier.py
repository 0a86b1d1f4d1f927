import logging
from enum import Enum

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ConstraintKind(str, Enum):
    """Constraints the employee and role tables declare: NOT NULL columns and the age CHECK."""
    NOT_NULL = "not_null"
    CHECK = "check"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
PGCODE_KIND_MAP = {
    "23502": ConstraintKind.NOT_NULL,
    "23514": ConstraintKind.CHECK,
}

_MESSAGE_KEYWORDS = (
    (ConstraintKind.NOT_NULL, ("not null constraint", "not null", "null value in column")),
    (ConstraintKind.CHECK, ("check constraint", "violates check")),
)


def _classify_from_postgres(orig) -> tuple[ConstraintKind | None, str | None]:
    # asyncpg exposes `sqlstate`/`constraint_name`, psycopg exposes `pgcode`/`diag`.
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if not code:
        return None, None

    constraint_name = getattr(orig, "constraint_name", None)
    diag = getattr(orig, "diag", None)
    if constraint_name is None and diag is not None:
        constraint_name = getattr(diag, "constraint_name", None)

    kind = PGCODE_KIND_MAP.get(code, ConstraintKind.UNKNOWN)
    logger.debug("Postgres integrity diagnostic", extra={"pgcode": code, "constraint_name": constraint_name})
    return kind, constraint_name


def classify_integrity_error(exc: IntegrityError) -> tuple[ConstraintKind, str | None]:
    """
    Classify an IntegrityError by the constraint that failed.

    Returns:
        (kind, constraint name if the driver reported one)
    """
    kind, constraint_name = _classify_from_postgres(exc.orig)
    if kind is not None:
        return kind, constraint_name

    # SQLite and friends only give us the message text.
    message = str(exc.orig).lower()
    for candidate, keywords in _MESSAGE_KEYWORDS:
        if any(keyword in message for keyword in keywords):
            return candidate, None

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": message[:200]})
    return ConstraintKind.UNKNOWN, None
