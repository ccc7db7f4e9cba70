"""
Error kinds raised by the session and review services.

Each class carries the HTTP status the request layer maps it to, so
callers can translate errors without a lookup table.
"""


class SkillSwapError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFound(SkillSwapError):
    status_code = 404


class PermissionDenied(SkillSwapError):
    status_code = 403


class InvalidState(SkillSwapError):
    status_code = 409


class InvalidTransition(InvalidState):
    status_code = 409


class Conflict(SkillSwapError):
    status_code = 409


class Unavailable(SkillSwapError):
    status_code = 503


class ValidationFailed(SkillSwapError):
    status_code = 422
