"""Shared exceptions for service layer operations."""


class StoreError(Exception):
    """
    Raised when the user store fails (connectivity, constraint violations, etc.).

    The original database exception is chained as `__cause__`. Layers above the
    store pass this through untouched; only the API layer turns it into a response.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class RegistrationError(Exception):
    """Base exception for registration rule violations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UnderageUserError(RegistrationError):
    """Raised when a user is younger than the minimum registration age."""

    def __init__(self, age: int, min_age: int) -> None:
        self.age = age
        self.min_age = min_age
        super().__init__(f"User must be at least {min_age} years old")


class DuplicateEmailError(RegistrationError):
    """Raised when a user with the same email is already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("A user with this email is already registered")
