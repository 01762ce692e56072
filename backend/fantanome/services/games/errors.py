class GameError(Exception):
    """Base error surfaced to HTTP callers as ``{"error": message}``."""

    status_code = 400
    default_message = 'Invalid request.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GameError):
    status_code = 400
    default_message = 'Invalid request.'


class Unauthenticated(GameError):
    status_code = 401
    default_message = 'Authentication required.'


class Unauthorized(GameError):
    status_code = 403
    default_message = 'You do not have access to this game.'


class NotFound(GameError):
    status_code = 404
    default_message = 'Game not found.'


class Conflict(GameError):
    status_code = 409
    default_message = 'Conflicting resource.'


class TransientGenerationFailure(GameError):
    """Invite code generation ran out of attempts; safe to retry the request."""

    status_code = 503
    default_message = 'Could not generate an invite code. Please try again.'
