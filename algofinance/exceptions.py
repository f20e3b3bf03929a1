"""Error taxonomy for the webhook trader.

Each error keeps the collaborator's message verbatim (``str(exc)``) so it can be
forwarded to the caller, and carries a stable ``code`` for JSON error bodies.
"""


class TradingSystemError(Exception):
    """Base class for errors raised by the webhook trader."""

    code = "internal_error"

    def __init__(self, message: str, source: str = "System"):
        super().__init__(message)
        self.message = message
        self.source = source


class ValidationError(TradingSystemError):
    """Inbound signal is missing ``ticker`` or ``action``."""

    code = "invalid_payload"


class BrokerageError(TradingSystemError):
    """Any failure talking to the brokerage (network, auth, rejected order...)."""

    code = "brokerage_error"


class AdvisoryError(TradingSystemError):
    """Any failure talking to the advisory (text generation) service."""

    code = "advisory_error"
