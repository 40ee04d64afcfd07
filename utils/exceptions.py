"""
Application errors and the HTTP status each one maps to.

Handlers registered in main.py render every FacultyAppError as
{"success": false, "message": ...} with the class status code.
"""


class FacultyAppError(Exception):
    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


class ConflictError(FacultyAppError):
    """The username is already registered."""

    status_code = 400


class UnauthorizedError(FacultyAppError):
    """Unknown username or wrong password.

    Answers 400 rather than 401, as existing clients expect.
    """

    status_code = 400

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class NotFoundError(FacultyAppError):
    status_code = 404

    def __init__(self, message: str = "Faculty not found"):
        super().__init__(message)


class InternalError(FacultyAppError):
    """Database, disk or any other unexpected failure."""

    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
