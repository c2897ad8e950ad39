class UsersApiException(Exception):
    """Base exception for the users service."""

    pass


class ConfigurationException(UsersApiException):
    """Raised when required configuration is missing or invalid."""

    pass


class DatabaseConnectionException(UsersApiException):
    """Raised when the database cannot be reached after every attempt."""

    def __init__(self, attempts: int, last_error: Exception = None):
        self.attempts = attempts
        self.last_error = last_error
        message = f"Could not connect to the database after {attempts} attempts"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)


class SchemaInitializationException(UsersApiException):
    """Raised when the users table cannot be created."""

    pass


class RequestValidationException(UsersApiException):
    """Raised when a request body or path parameter is invalid."""

    pass
