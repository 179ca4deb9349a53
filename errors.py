"""
Application error taxonomy.

Every error raised by the domain layer carries a stable machine-readable
``code`` next to its human ``message`` so API clients can branch on the code.
Data-access failures coming out of SQLAlchemy are translated into
``DatabaseError`` by ``handle_database_error``.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import exc as orm_exc

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = 'INTERNAL_ERROR'

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {'error': {'message': self.message, 'code': self.code}}


class ValidationError(AppError):
    """Malformed or missing input. Carries one entry per offending field."""

    status_code = 400
    code = 'VALIDATION_ERROR'

    def __init__(self, errors: List[Dict[str, str]], message: str = 'Validation error'):
        super().__init__(message)
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e['field'] for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['error']['details'] = self.errors
        return data


class AuthenticationError(AppError):
    status_code = 401
    code = 'UNAUTHORIZED'


class ForbiddenError(AppError):
    """The entity exists but the requester does not own it."""

    status_code = 403
    code = 'FORBIDDEN'

    def __init__(self, message: str = 'Unauthorized'):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404
    code = 'NOT_FOUND'


class InvalidStateError(AppError):
    """The operation is not legal given the entity's current status."""

    status_code = 400
    code = 'INVALID_STATE'


class ConflictError(AppError):
    status_code = 409
    code = 'CONFLICT'


class InvalidJSONError(AppError):
    """Request body could not be decoded as JSON."""

    status_code = 400
    code = 'INVALID_JSON'

    def __init__(self, message: str = 'Request body must be valid JSON'):
        super().__init__(message)


class DatabaseError(AppError):
    """A data-access failure translated into a stable code."""

    UNIQUE_VIOLATION = 'UNIQUE_VIOLATION'
    FOREIGN_KEY_VIOLATION = 'FOREIGN_KEY_VIOLATION'
    NOT_FOUND = 'NOT_FOUND'
    RELATION_VIOLATION = 'RELATION_VIOLATION'
    QUERY_INTERPRETATION = 'QUERY_INTERPRETATION'
    TIMEOUT = 'TIMEOUT'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    CONNECTION_ERROR = 'CONNECTION_ERROR'
    UNKNOWN = 'UNKNOWN'

    STATUS_BY_CODE = {
        NOT_FOUND: 404,
        TIMEOUT: 503,
        CONNECTION_ERROR: 503,
    }

    def __init__(self, message: str, code: str):
        super().__init__(message, code=code, status_code=self.STATUS_BY_CODE.get(code, 400))


DATABASE_ERROR_MESSAGES = {
    DatabaseError.UNIQUE_VIOLATION: 'A unique constraint would be violated.',
    DatabaseError.FOREIGN_KEY_VIOLATION: 'A foreign key constraint would be violated.',
    DatabaseError.NOT_FOUND: 'Record not found.',
    DatabaseError.RELATION_VIOLATION: 'The change you are trying to make would violate the required relation.',
    DatabaseError.QUERY_INTERPRETATION: 'Query interpretation error.',
    DatabaseError.TIMEOUT: 'Connection timeout. Please try again.',
    DatabaseError.VALIDATION_ERROR: 'Invalid data provided.',
    DatabaseError.CONNECTION_ERROR: 'Failed to connect to the database.',
    DatabaseError.UNKNOWN: 'An unexpected database error occurred.',
}

# PostgreSQL SQLSTATE codes (psycopg2 exposes them as ``pgcode``)
PG_UNIQUE_VIOLATION = '23505'
PG_FOREIGN_KEY_VIOLATION = '23503'
PG_NOT_NULL_VIOLATION = '23502'
PG_CHECK_VIOLATION = '23514'
PG_QUERY_CANCELED = '57014'
PG_LOCK_NOT_AVAILABLE = '55P03'


def _database_error(code: str) -> DatabaseError:
    return DatabaseError(DATABASE_ERROR_MESSAGES[code], code)


def _classify_integrity_error(error: sa_exc.IntegrityError) -> str:
    pgcode = getattr(error.orig, 'pgcode', None)
    if pgcode == PG_UNIQUE_VIOLATION:
        return DatabaseError.UNIQUE_VIOLATION
    if pgcode == PG_FOREIGN_KEY_VIOLATION:
        return DatabaseError.FOREIGN_KEY_VIOLATION
    if pgcode in (PG_NOT_NULL_VIOLATION, PG_CHECK_VIOLATION):
        return DatabaseError.RELATION_VIOLATION

    # SQLite only gives us the message text
    text = str(error.orig).lower()
    if 'unique' in text:
        return DatabaseError.UNIQUE_VIOLATION
    if 'foreign key' in text:
        return DatabaseError.FOREIGN_KEY_VIOLATION
    if 'not null' in text or 'check constraint' in text:
        return DatabaseError.RELATION_VIOLATION
    return DatabaseError.UNKNOWN


def _classify_operational_error(error: sa_exc.OperationalError) -> str:
    pgcode = getattr(error.orig, 'pgcode', None)
    if pgcode in (PG_QUERY_CANCELED, PG_LOCK_NOT_AVAILABLE):
        return DatabaseError.TIMEOUT

    text = str(error.orig).lower()
    if 'timeout' in text or 'timed out' in text or 'database is locked' in text:
        return DatabaseError.TIMEOUT
    if 'connect' in text or 'connection' in text:
        return DatabaseError.CONNECTION_ERROR
    return DatabaseError.UNKNOWN


def handle_database_error(error: Exception) -> DatabaseError:
    """
    Translate a data-access failure into a DatabaseError with a stable code.

    Args:
        error: Exception raised by SQLAlchemy (or the DBAPI driver underneath)

    Returns:
        DatabaseError ready to be raised
    """
    if isinstance(error, DatabaseError):
        return error

    if isinstance(error, (orm_exc.NoResultFound, orm_exc.ObjectDeletedError)):
        code = DatabaseError.NOT_FOUND
    elif isinstance(error, sa_exc.IntegrityError):
        code = _classify_integrity_error(error)
    elif isinstance(error, sa_exc.TimeoutError):
        # Connection pool exhausted
        code = DatabaseError.TIMEOUT
    elif isinstance(error, sa_exc.OperationalError):
        code = _classify_operational_error(error)
    elif isinstance(error, (sa_exc.InterfaceError, sa_exc.DisconnectionError)):
        code = DatabaseError.CONNECTION_ERROR
    elif isinstance(error, sa_exc.DataError):
        code = DatabaseError.VALIDATION_ERROR
    elif isinstance(error, (sa_exc.ProgrammingError, sa_exc.CompileError, sa_exc.InvalidRequestError)):
        code = DatabaseError.QUERY_INTERPRETATION
    elif isinstance(error, sa_exc.StatementError):
        code = DatabaseError.VALIDATION_ERROR
    else:
        code = DatabaseError.UNKNOWN

    logger.warning(f"Database error classified as {code}: {error}")
    return _database_error(code)
