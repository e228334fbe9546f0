class DeliveryError(Exception):
    """Base class for errors raised by the delivery services."""


class DeliveryNotFound(DeliveryError):
    """No active pending delivery for a token.

    ``reason`` is one of ``missing``, ``confirmed`` or ``expired``. Callers
    collapse all three into one 404; the reason is for the logs only.
    """

    def __init__(self, token: str, reason: str):
        super().__init__(f'no active delivery ({reason})')
        self.token = token
        self.reason = reason


class TokenCollision(DeliveryError):
    """A freshly generated token matched an active one."""


class EmptyReport(DeliveryError):
    """The confirmed log has nothing to render."""


class ReportRenderError(DeliveryError):
    """The HTML-to-PDF backend failed."""
