from sqlalchemy.exc import IntegrityError

from creche_api.app.core.errors import (
    ConflictError,
    ErrorKind,
    NotFoundError,
    ValidationFailed,
    classify_integrity_error,
    is_unique_violation,
)


class _PgError(Exception):
    pgcode = "23505"


def _integrity(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO applications ...", {}, orig)


def test_sqlite_unique_failure_is_conflict():
    exc = _integrity(Exception("UNIQUE constraint failed: applications.child_id, applications.creche_id"))
    assert is_unique_violation(exc)
    assert classify_integrity_error(exc) == ErrorKind.CONFLICT


def test_postgres_unique_code_is_conflict():
    exc = _integrity(_PgError("duplicate key value violates unique constraint"))
    assert classify_integrity_error(exc) == ErrorKind.CONFLICT


def test_other_integrity_failures_are_not_conflicts():
    exc = _integrity(Exception("FOREIGN KEY constraint failed"))
    assert classify_integrity_error(exc) == ErrorKind.VALIDATION


def test_error_classes_carry_kind_and_status():
    assert ConflictError("dup").status_code == 409
    assert ConflictError("dup").kind == ErrorKind.CONFLICT
    assert NotFoundError("gone").status_code == 404
    assert ValidationFailed("bad").status_code == 400
    assert ConflictError("dup", extra={"redirect_to": "/applications"}).extra["redirect_to"] == "/applications"
