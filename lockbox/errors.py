class LockboxError(Exception):
    """Base class for every error rendered to the user as ``Error: ...``."""


class AuthenticationError(LockboxError):
    def __init__(self, message: str = "Incorrect master password."):
        super().__init__(message)


class ValidationError(LockboxError):
    pass


class GenerationError(ValidationError):
    pass


class NotFoundError(LockboxError):
    def __init__(self, service: str, username: str | None = None):
        self.service = service
        self.username = username or ""
        super().__init__(
            f"No matching entry found for service='{service}', username='{self.username}'."
        )


class VaultIOError(LockboxError):
    pass


class EndOfInput(LockboxError):
    def __init__(self, message: str = "Input ended before a value was entered."):
        super().__init__(message)
