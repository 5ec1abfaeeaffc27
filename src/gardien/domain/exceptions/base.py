"""
Base domain exceptions.
"""


class GardienException(Exception):
    """Base exception for all Gardien domain errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class StorageUnavailableError(GardienException):
    """Raised when the user directory backend cannot be reached."""

    def __init__(self, operation: str, cause: str = ""):
        message = f"Storage unavailable during {operation}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message, code="STORAGE_UNAVAILABLE")


class InvalidSessionStateError(GardienException):
    """Raised when an AuthSession operation is called in the wrong state."""

    def __init__(self, operation: str, state: str):
        message = f"Cannot {operation} while session is {state}"
        super().__init__(message, code="INVALID_SESSION_STATE")
