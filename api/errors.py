# api/errors.py
from fastapi import HTTPException, status

from core.errors import EntryNotFound, NetworkError, PersistenceError, ShelfError, ValidationError


def http_error(error: ShelfError) -> HTTPException:
    """Map a core error onto the HTTP status the client should see"""
    if isinstance(error, ValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, EntryNotFound):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, NetworkError):
        code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(error, PersistenceError):
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=error.message)
