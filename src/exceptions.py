class QurandleError(Exception):
    """Base error carrying the HTTP status and the message shown to the client."""

    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QurandleError):
    status_code = 400


class InvalidCredentialsError(ValidationError):
    pass


class AuthError(QurandleError):
    status_code = 403


class MissingTokenError(AuthError):
    status_code = 401


class InvalidTokenError(AuthError):
    status_code = 403


class ConflictError(QurandleError):
    status_code = 400


class LeaderboardContentionError(ConflictError):
    """Concurrent writers kept winning the compare-and-swap on a level."""

    status_code = 409
    retryable = True


class UpstreamDependencyError(QurandleError):
    """The corpus API or the storage backend failed or timed out."""

    status_code = 500
    retryable = True
    public_message = "Failed to fetch Quran data"


class InternalError(QurandleError):
    status_code = 500
    public_message = "Internal server error."


class EmptyCorpusError(InternalError):
    pass


class StorageUnavailableError(UpstreamDependencyError):
    public_message = "Storage unavailable"
