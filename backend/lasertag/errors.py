"""Error types raised by the match store and the status controller.

Each error carries the HTTP status it maps to; the application factory
registers a single handler that renders them as ``{"error": message}``.
"""


class LaserTagError(Exception):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class ValidationError(LaserTagError):
    """A required field is missing or malformed."""
    status_code = 400
    default_message = 'Invalid request'


class NotFoundError(LaserTagError):
    """No match exists for the given game id."""
    status_code = 404
    default_message = 'Match not found'


class ConflictError(LaserTagError):
    """Only raised in strict mode: the match or status may not change."""
    status_code = 409
    default_message = 'Conflict'


class StoreError(LaserTagError):
    """The database rejected or failed an operation."""
    status_code = 500
