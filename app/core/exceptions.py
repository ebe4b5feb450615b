class BackpackError(Exception):
    """Base class for domain errors raised by the service layer."""


class StoreError(BackpackError):
    """The database rejected or failed an operation."""


class UserAlreadyExistsError(BackpackError):
    def __init__(self, email: str):
        super().__init__(f"User with email {email} already exists")
        self.email = email


class InvalidCredentialsError(BackpackError):
    """
    Raised for an unknown email and for a wrong password alike.

    The message is fixed so callers cannot tell which part failed.
    """

    def __init__(self):
        super().__init__("Invalid credentials")


class UserNotFoundError(BackpackError):
    def __init__(self, email: str):
        super().__init__("User not found")
        self.email = email


class TokenSigningError(BackpackError):
    pass


class InvalidTokenError(BackpackError):
    pass


class ResetTokenNotFoundError(BackpackError):
    pass


class ResetTokenExpiredError(BackpackError):
    pass


class ItemNotFoundError(BackpackError):
    pass


class TagNotFoundError(BackpackError):
    pass


class OrganizationNotFoundError(BackpackError):
    pass
