"""
Error taxonomy.

Services raise these; the handlers registered in main.py turn each one
into a JSON body ``{"message": ...}`` with the class's status code.
"""


class PlacementError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PlacementError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateError(PlacementError):
    status_code = 400
    default_message = "Resource already exists"


class AlreadyAppliedError(DuplicateError):
    default_message = "You have already applied to this company."


class AuthError(PlacementError):
    status_code = 401
    default_message = "Not authorized"


class InvalidCredentialsError(AuthError):
    default_message = "Invalid email or password"


class MissingTokenError(AuthError):
    default_message = "Not authorized, no token"


class InvalidTokenError(AuthError):
    default_message = "Not authorized, token failed"


class PrincipalNotFoundError(AuthError):
    default_message = "Not authorized, user not found"


class ForbiddenError(PlacementError):
    status_code = 403
    default_message = "Not authorized, insufficient role"


class NotFoundError(PlacementError):
    status_code = 404
    default_message = "Resource not found"


class ProfileIncompleteError(NotFoundError):
    default_message = "Student profile incomplete. Please complete registration."


class ServerError(PlacementError):
    pass
