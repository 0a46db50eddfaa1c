from fastapi import status


class JanmitraError(Exception):
    """
    Base class for every failure the engine reports to callers.

    Each subclass carries a stable `code` and the HTTP status it maps to,
    the message is human readable and safe to show to the client.
    """

    code: str = "error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Unexpected error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class DuplicateIdentity(JanmitraError):
    code = "duplicate_identity"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Username or email already exists"

class InvalidCredentials(JanmitraError):
    code = "invalid_credentials"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"

class NotFound(JanmitraError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"

class MissingToken(JanmitraError):
    code = "missing_token"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Access token required"

class InvalidToken(JanmitraError):
    code = "invalid_token"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid token"

class SessionExpired(JanmitraError):
    code = "session_expired"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Session expired"

class Forbidden(JanmitraError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Admin access required"

class InvalidAction(JanmitraError):
    code = "invalid_action"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid action"

class EmptySelection(JanmitraError):
    code = "empty_selection"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "At least one issue ID is required"

class ValidationFailed(JanmitraError):
    code = "validation_failed"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"

class StoreUnavailable(JanmitraError):
    code = "store_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage is currently unavailable"
