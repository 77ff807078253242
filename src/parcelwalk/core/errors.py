"""
errors.py
- Error taxonomy for the invoice loader and the server client.
- The label and closure queries never raise; only parsing and transport do.
"""


class ParcelwalkError(Exception):
    """Base class for every error raised by this package."""


class InvalidInvoiceError(ParcelwalkError):
    """An invoice or parcel record is missing a required field."""


class InvoiceClientError(ParcelwalkError):
    """
    A request to the invoice server failed.

    Attributes:
        url (str): The URL that was requested.
        status_code (int or None): HTTP status, when the server answered.
    """

    def __init__(self, message, url=None, status_code=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ConnectionFailedError(InvoiceClientError):
    """The server could not be reached (retried before surfacing)."""


class TlsVerificationError(InvoiceClientError):
    """The server certificate was rejected."""


class AuthenticationError(InvoiceClientError):
    """The server rejected the supplied credentials (401/403)."""


class NotFoundError(InvoiceClientError):
    """The requested invoice or parcel does not exist (404)."""


class ServerError(InvoiceClientError):
    """Any other non-success response."""
