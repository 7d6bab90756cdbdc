"""Domain errors raised by the service layer.

Routes translate these into ``HTTPException`` using ``status_code``.
"""


class TicketingError(Exception):
    """Base error with a user-safe message and an HTTP status."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TicketingError):
    """A registration, attendee or event does not exist."""

    status_code = 404


class AccessDeniedError(TicketingError):
    """The current user may not act on the requested resource."""

    status_code = 401


class SlugConflictError(TicketingError):
    """A custom event slug is already taken."""

    status_code = 400


class DeliveryFailure(TicketingError):
    """The mail transport rejected a message."""

    status_code = 502
