from typing import Any, Dict, List, Optional
from starlette import status

class AppError(Exception):
    def __init__(
        self,
        message: str,
        *,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        code: str = "bad_request",
        field: Optional[str] = None,
        errors: Optional[List[dict]] = None,  # [{'code':..., 'message':..., 'field':...}]
        details: Optional[Dict[str, Any]] = None,  # Additional details for the error
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.field = field
        self.errors = errors
        self.details = details


class NotFoundError(AppError):
    """Referenced folder, parent, item or room does not exist (or must not be revealed)"""

    def __init__(self, message: str = "Not found", **kwargs):
        kwargs.setdefault("status_code", status.HTTP_404_NOT_FOUND)
        kwargs.setdefault("code", "not_found")
        super().__init__(message, **kwargs)


class ForbiddenError(AppError):
    """Actor can see the resource but lacks the required capability"""

    def __init__(self, message: str = "Forbidden", **kwargs):
        kwargs.setdefault("status_code", status.HTTP_403_FORBIDDEN)
        kwargs.setdefault("code", "forbidden")
        super().__init__(message, **kwargs)


class ConflictError(AppError):
    """Sibling name collision, self-parenting, cycles and scope mismatches"""

    def __init__(self, message: str = "Conflict", **kwargs):
        kwargs.setdefault("status_code", status.HTTP_409_CONFLICT)
        kwargs.setdefault("code", "conflict")
        super().__init__(message, **kwargs)


class InternalInconsistencyError(AppError):
    """Stored data violates a structural invariant (e.g. a parent cycle)"""

    def __init__(self, message: str = "Internal inconsistency", **kwargs):
        kwargs.setdefault("status_code", status.HTTP_500_INTERNAL_SERVER_ERROR)
        kwargs.setdefault("code", "internal_error")
        super().__init__(message, **kwargs)
