from __future__ import annotations


class FetchError(Exception):
    def __init__(self, message: str, url: str, status_code: int | None = None):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class SheetsApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthRequiredError(SheetsApiError):
    """The Google token is missing, expired or lacks permission."""

    def __init__(self, message: str = "Authentication required", status_code: int | None = None):
        super().__init__(message, status_code)
