from typing import Optional


class ValidationError(Exception):
    """Raised when the payload lacks a latitude or longitude."""

    status_code = 400
    message = "Latitude and longitude are required."

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class DeliveryError(Exception):
    """Raised when the mail transport fails to deliver an envelope."""

    status_code = 500
    message = "Failed to send email."

    def __init__(self, cause: BaseException):
        self.cause = cause
        self.error = str(cause) or type(cause).__name__
        super().__init__(self.error)
