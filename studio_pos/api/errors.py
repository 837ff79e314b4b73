# studio_pos/api/errors.py
from fastapi import HTTPException

from studio_pos.domain.errors import DomainError, ErrorCode

_STATUS = {
    ErrorCode.VALIDATION_FAILED: 422,
    ErrorCode.SLOT_TAKEN: 409,
    ErrorCode.CART_NOT_FOUND: 404,
    ErrorCode.CART_ITEM_NOT_FOUND: 404,
    ErrorCode.BOOKING_NOT_FOUND: 404,
    ErrorCode.PRODUCT_NOT_FOUND: 404,
    ErrorCode.OPERATOR_NOT_FOUND: 404,
    ErrorCode.CART_ACCESS_DENIED: 403,
    ErrorCode.CART_CONFLICT: 409,
    ErrorCode.CART_CLOSED: 409,
    ErrorCode.EMPTY_CART: 409,
    ErrorCode.CHECKOUT_IN_PROGRESS: 409,
    ErrorCode.CHECKOUT_STAGE_FAILED: 500,
    ErrorCode.STORE_FAILURE: 500,
}


def to_http(error: DomainError) -> HTTPException:
    """Map a domain error to an HTTP error with a user-safe body."""
    detail = {"code": error.code.value, "message": error.message}

    errors = getattr(error, "errors", None)
    if errors:
        detail["errors"] = errors
    stage = getattr(error, "stage", None)
    if stage:
        detail["stage"] = stage
        detail["transaction_id"] = error.transaction_id

    return HTTPException(status_code=_STATUS.get(error.code, 400), detail=detail)
