"""
Error types raised by the storefront services.

Each error carries the HTTP status it maps to and a message that is safe to
return to clients. Internal details stay in the server log.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str = "An error occurred"):
        super().__init__(message)
        self.message = message


class InvalidRequest(ApiError):
    """Missing or malformed fields in a request"""
    status_code = 400


class StoreError(ApiError):
    """A read or write against the document store failed"""
    status_code = 500


class StoreUnavailable(StoreError):
    """The document store could not be reached"""
