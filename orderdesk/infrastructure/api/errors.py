"""Domain error → HTTP status mapping shared by the routers."""

from fastapi import HTTPException

from orderdesk.domain.errors import (
    ConflictError,
    DatastoreError,
    NotFoundError,
    OrderDeskError,
    OrderSourceError,
    ValidationError,
)

_STATUS_BY_ERROR: list[tuple[type[OrderDeskError], int]] = [
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 422),
    (OrderSourceError, 502),
    (DatastoreError, 503),
]


def to_http_exception(error: OrderDeskError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
