# errors.py
"""Exception types shared by controllers, auth and the functions client."""


class AppError(Exception):
    """Base for failures shown to the user as a notification."""


class FormValidationError(AppError, ValueError):
    """Missing or malformed form input; raised before any database call."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class PolicyViolation(AppError):
    """A row-level policy rejected the operation."""

    def __init__(self, table: str, action: str):
        super().__init__(f"Not allowed to {action} {table}")
        self.table = table
        self.action = action


class RecordNotFound(AppError):
    def __init__(self, table: str, row_id: str):
        super().__init__(f"{table} row {row_id} not found")
        self.table = table
        self.row_id = row_id


class AuthError(AppError):
    """Sign-in, token or password reset failure."""


class FunctionCallError(AppError):
    """A server function answered with an error or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FunctionAuthorizationError(FunctionCallError):
    """The server function refused the caller (401/403)."""
