from typing import Optional, Any

class HudhudError(Exception):
    """
    Base exception for the Hudhud sender application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(HudhudError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(HudhudError):
    """
    Raised when the caller's account cannot be identified.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ValidationError(HudhudError):
    """
    Raised when input validation fails.

    `code` distinguishes the user-facing cases (missing API key, missing
    message, no contacts, ...).
    """
    def __init__(self, message: str = "Validation error", code: str = "VALIDATION_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=422, details=details)

class ConflictError(HudhudError):
    """
    Raised when an operation collides with one already in flight.
    """
    def __init__(self, message: str = "Operation already in progress", code: str = "CONFLICT", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=409, details=details)

class SpreadsheetError(HudhudError):
    """
    Raised when an uploaded spreadsheet cannot be read.
    """
    def __init__(self, message: str = "Unable to read spreadsheet", details: Optional[Any] = None):
        super().__init__(message, code="SPREADSHEET_ERROR", status_code=400, details=details)

class ExternalServiceError(HudhudError):
    """
    Raised when an external service fails.
    """
    def __init__(self, message: str = "External service error", code: str = "EXTERNAL_SERVICE_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=502, details=details)

class GatewayError(ExternalServiceError):
    """
    Raised when the SMS gateway rejects a batch or cannot be reached.
    """
    def __init__(self, message: str = "Failed to send messages", details: Optional[Any] = None):
        super().__init__(message, code="GATEWAY_ERROR", details=details)
