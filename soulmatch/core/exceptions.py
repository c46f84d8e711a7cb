"""Error taxonomy shared by the services and the HTTP layer."""


class SoulmatchError(Exception):
    """Base exception for rejected operations. ``message`` is user facing."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(SoulmatchError):
    """Raised when input is malformed or a required field is missing."""

    status_code = 422


class UniquenessViolation(SoulmatchError):
    """Raised when a record already exists for a key that must be unique."""

    status_code = 409


class RateLimited(SoulmatchError):
    """Raised when the daily post allowance has been used up."""

    status_code = 429


class NotFound(SoulmatchError):
    """Raised when an addressed profile, post or request does not exist."""

    status_code = 404


class PermissionDenied(SoulmatchError):
    """Raised when the actor is not allowed to perform the action."""

    status_code = 403


class TargetOffline(SoulmatchError):
    """Raised when an instant chat targets a profile that is not online."""

    status_code = 409


class RequestAlreadyDecided(SoulmatchError):
    """Raised when a chat request that was already approved or rejected is answered again."""

    status_code = 409


__all__ = [
    "NotFound",
    "PermissionDenied",
    "RateLimited",
    "RequestAlreadyDecided",
    "SoulmatchError",
    "TargetOffline",
    "UniquenessViolation",
    "ValidationFailure",
]
