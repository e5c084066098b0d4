"""
Custom exception classes for the application.

Every application exception carries the HTTP status it maps to, so the
HTTP error handler can translate it without knowing each concrete type.
"""


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        http_status: HTTP status code for REST API responses.
    """

    http_status: int = 500

    def __init__(self, message: str):
        """
        Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class BadRequestAlertException(AppException):
    """
    Client sent a request that violates an entity rule.

    The entity name and error key are sent back to the client as alert
    headers so that a UI can show a translated error message.

    HTTP Status: 400 Bad Request

    Example:
        ```python
        raise BadRequestAlertException(
            "A new author cannot already have an ID", "author", "idexists"
        )
        ```
    """

    http_status = 400

    def __init__(self, message: str, entity_name: str, error_key: str):
        super().__init__(message)
        self.entity_name = entity_name
        self.error_key = error_key

