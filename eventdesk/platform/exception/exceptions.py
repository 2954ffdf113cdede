"""
Expected failures and the HTTP status each one is answered with

Raising code supplies only the client-facing message; the status lives on the
class. @Logger.io logs these as one error line, without a traceback.
"""

from fastapi import status


class CustomBaseError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def detail(self) -> dict[str, str]:
        return {'detail': self.message}


class DomainError(CustomBaseError):
    """A request the business rules reject"""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CustomBaseError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CustomBaseError):
    """The stored state moved on; retrying the same request will not help"""

    status_code = status.HTTP_409_CONFLICT


class ServiceUnavailableError(CustomBaseError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
