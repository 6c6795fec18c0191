class AccountError(Exception):
    """Base class for all domain-level errors.

    Every error carries the message and HTTP status it is surfaced with, so the
    presentation layer can render it without knowing the concrete type.
    """

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(AccountError):
    """A user with the given email already exists."""

    status_code = 400
    default_message = "Email already exists."


class TokenInvalid(AccountError):
    """Bad signature, wrong secret or malformed claims."""

    status_code = 400
    default_message = "JSON Web Token is invalid. Try again."


class TokenExpired(AccountError):
    status_code = 400
    default_message = "JSON Web Token is expired. Try again."


class CodeMismatch(AccountError):
    """Submitted activation code differs from the one bound to the token."""

    status_code = 400
    default_message = "Invalid activation code."


class InvalidCredentials(AccountError):
    """Unknown email or wrong password. The two cases are indistinguishable."""

    status_code = 401
    default_message = "Invalid email or password."


class DeliveryError(AccountError):
    status_code = 500
    default_message = "Activation email could not be delivered."


class StoreUnavailable(AccountError):
    status_code = 500
    default_message = "Store is unavailable."


class LoginRequired(AccountError):
    """No access/refresh token was presented."""

    status_code = 401
    default_message = "Please login to access this resource."
