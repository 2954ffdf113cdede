from eventdesk.platform.exception.exceptions import ServiceUnavailableError


class LocationUnavailableError(ServiceUnavailableError):
    def __init__(self, message: str = 'Location is unavailable') -> None:
        super().__init__(message)
