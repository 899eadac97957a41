"""
Domain exceptions raised by the service layer.

Routers do not catch these; the handlers registered in ``fintrack.main``
translate them into HTTP responses.
"""


class FinTrackError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinTrackError):
    """Bad input detected before any write was issued."""

    status_code = 400


class NotFoundError(FinTrackError):
    """A referenced series, template, plan or transaction does not exist."""

    status_code = 404


class PersistenceError(FinTrackError):
    """Storage failure; the surrounding unit of work has been rolled back."""

    status_code = 500


class UnknownRecurrenceType(ValueError):
    """Recurrence unit outside daily/weekly/monthly/yearly.

    Validated input never reaches this, so it is not a FinTrackError and
    surfaces as an unhandled server error.
    """

    def __init__(self, recurrence_type):
        super().__init__(f"Unknown recurrence type: {recurrence_type}")
        self.recurrence_type = recurrence_type
