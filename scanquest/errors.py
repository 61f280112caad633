"""
Error taxonomy shared by core modules and API routers

Core code raises these; main.py maps them to {"error": message} responses.
"""


class ScanQuestError(Exception):
    """Base class for expected, request-terminal failures"""
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInputError(ScanQuestError):
    status_code = 400
    message = "Invalid input"


class MissingTenantError(InvalidInputError):
    message = "Missing tenant"


class InvalidTeamError(InvalidInputError):
    message = "Invalid teamId"


class InvalidTaskError(InvalidInputError):
    message = "Invalid task"


class InvalidEventError(InvalidInputError):
    message = "Invalid eventId"


class InvalidAnswerError(InvalidInputError):
    message = "Invalid answer"


class NotFoundError(ScanQuestError):
    status_code = 404
    message = "Not found"


class ConflictError(ScanQuestError):
    status_code = 409
    message = "Conflict"


class AlreadyConfiguredError(ConflictError):
    # first-run setup reports this as a plain bad request
    status_code = 400
    message = "Already configured"


class UnauthorizedError(ScanQuestError):
    status_code = 401
    message = "Not logged in"


class ForbiddenError(ScanQuestError):
    status_code = 403
    message = "Not authorized"


class JoinRequiredError(ScanQuestError):
    """No team session: the browser is sent to the join page"""
    status_code = 302
    message = "Join required"
    location = "/join.html"
