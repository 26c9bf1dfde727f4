from typing import Optional, Any

class StorefrontError(Exception):
    """
    Base exception for the storefront application.

    `code` is the value placed in the response body; it defaults to the HTTP status.
    """
    def __init__(self, message: str, status_code: int = 500, code: Optional[int] = None, details: Optional[Any] = None):
        self.message = message
        self.status_code = status_code
        self.code = status_code if code is None else code
        self.details = details
        super().__init__(self.message)


class StoreLoadError(StorefrontError):
    """
    Raised when the JSON document cannot be read or parsed.
    """
    def __init__(self, message: str = "Failed to load datastore", details: Optional[Any] = None):
        super().__init__(message, status_code=500, details=details)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationError(StorefrontError):
    """
    Raised when a request conflicts with stored data.
    """
    def __init__(self, message: str = "Validation error", status_code: int = 400, details: Optional[Any] = None):
        super().__init__(message, status_code=status_code, details=details)

class DuplicateEmailError(ValidationError):
    def __init__(self, message: str = "Email is already registered"):
        super().__init__(message, status_code=400)


# ---------------------------------------------------------------------------
# Authentication / authorization
# ---------------------------------------------------------------------------

class AuthError(StorefrontError):
    """
    Raised when credentials or tokens are missing, wrong or not allowed.
    """
    def __init__(self, message: str = "Authentication failed", status_code: int = 401, code: Optional[int] = None):
        super().__init__(message, status_code=status_code, code=code)

class UnauthorizedError(AuthError):
    def __init__(self, message: str = "Unauthorized, missing token"):
        super().__init__(message, status_code=401)

class UnknownEmailError(AuthError):
    def __init__(self, message: str = "Account not found", status_code: int = 401, code: Optional[int] = None):
        super().__init__(message, status_code=status_code, code=code)

class InvalidPasswordError(AuthError):
    def __init__(self, message: str = "Incorrect password"):
        super().__init__(message, status_code=403)

class ForbiddenError(AuthError):
    def __init__(self, message: str = "Not allowed to modify another user"):
        super().__init__(message, status_code=403)

class WrongOldPasswordError(AuthError):
    def __init__(self, message: str = "Old password is incorrect"):
        super().__init__(message, status_code=405)


# ---------------------------------------------------------------------------
# Lookup / state
# ---------------------------------------------------------------------------

class NotFoundError(StorefrontError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, status_code=404, details=details)

class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)

class StateError(StorefrontError):
    """
    Raised when an operation depends on state that no longer holds.
    """
    def __init__(self, message: str = "Invalid state", status_code: int = 400):
        super().__init__(message, status_code=status_code)

class InvalidResetTokenError(StateError):
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, status_code=400)
