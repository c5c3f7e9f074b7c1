"""Error types raised by the api clients and the stores built on them."""


class ApiRequestError(Exception):
    """The backend answered a request with a non-2xx status."""

    def __init__(self, status_code: int, url: str, message: str | None = None):
        self.status_code = status_code
        self.url = url
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"Request to {url} failed with status {status_code}{detail}")


class ContractViolationError(Exception):
    """A request succeeded but the response lacks the payload the caller relies on."""
