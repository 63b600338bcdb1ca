"""Error types raised by the Kasa cloud client and credential vault.

Every failure in the core is one of these, so callers can catch
``KasaError`` once and render the message, or match on the subclass.
"""


class KasaError(Exception):
    """Base exception for Kasa client errors."""


class TransportError(KasaError):
    """Network or HTTP failure talking to the cloud gateway."""


class ProtocolError(KasaError):
    """The gateway (or the device behind it) reported a nonzero error code."""

    def __init__(self, error_code: int, message: str | None = None):
        self.error_code = error_code
        self.message = message or f"Request failed with error code {error_code}"
        super().__init__(self.message)


class DecodeError(KasaError):
    """A response could not be decoded into the expected shape."""


class AuthFailure(KasaError):
    """The credential vault could not be opened."""


class ValidationError(KasaError):
    """Caller supplied an invalid argument."""
