# fanbase/utils/exceptions.py

from fastapi import HTTPException, status


class BadRequestError(HTTPException):
    """
    Raised when a request is well-formed but cannot be applied.
    Returns HTTP 400.
    """

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    """
    Raised when an action would create a resource conflict, e.g. duplicate email,
    or when a profile was saved concurrently by another request.
    Returns HTTP 409.
    """

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnauthorizedError(HTTPException):
    """
    Raised when credentials are invalid or missing.
    Returns HTTP 401.
    """

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundError(HTTPException):
    """
    Raised when a requested resource is not found.
    Returns HTTP 404.
    """

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ExpiredError(BadRequestError):
    """
    Raised when a profile change is older than the revert window.
    Returns HTTP 400.
    """

    def __init__(
        self, detail: str = "This change cannot be reverted (revert window expired)"
    ):
        super().__init__(detail=detail)


class AlreadyRevertedError(BadRequestError):
    """
    Raised when a profile change has already been reverted once.
    Returns HTTP 400.
    """

    def __init__(self, detail: str = "This change has already been reverted"):
        super().__init__(detail=detail)


class ServiceUnavailableError(HTTPException):
    """
    Raised when a backing service (database, Redis) cannot be reached.
    Returns HTTP 503.
    """

    def __init__(self, detail: str = "Service temporarily unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
