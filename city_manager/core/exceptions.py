"""
Custom application exceptions.

Each exception carries the JSON key its message is rendered under
(``error`` for most endpoints, ``message`` for the listing endpoint).
"""

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""
    
    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        key: str = "error",
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.key = key


class NotFoundException(AppException):
    """Resource not found exception."""
    
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)


class BadRequestException(AppException):
    """Bad request exception."""
    
    def __init__(self, detail: str = "Bad request"):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class ConflictException(AppException):
    """Uniqueness constraint violated."""
    
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(detail=detail, status_code=status.HTTP_409_CONFLICT)


class StoreUnavailableException(AppException):
    """Unexpected persistence failure."""
    
    def __init__(self, detail: str = "Server Error", key: str = "error"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            key=key,
        )
