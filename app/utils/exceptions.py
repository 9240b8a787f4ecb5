# app/utils/exceptions.py

from fastapi import HTTPException, status


class ConfigurationError(RuntimeError):
    """
    Raised at class setup time when a sluggable model is declared with an
    invalid or incompatible set of options, e.g. history combined with scoped.
    """


class ConflictError(HTTPException):
    """
    Raised when an action would create a resource conflict, e.g. two writers
    racing to the same slug. Returns HTTP 409.
    """

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class NotFoundError(HTTPException):
    """
    Raised when a requested resource is not found.
    Returns HTTP 404.
    """

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ServiceUnavailableError(HTTPException):
    """
    Raised when the database cannot serve the request.
    Returns HTTP 503.
    """

    def __init__(self, detail: str = "Service temporarily unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
