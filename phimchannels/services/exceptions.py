"""
Errors raised while talking to PhimAPI or validating requests.
Each carries the HTTP status the adapter answers with.
"""
from typing import Optional


class PhimAdapterError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class UpstreamUnavailable(PhimAdapterError):
    """The listing call failed or returned a non-success status."""


class UpstreamDetailError(PhimAdapterError):
    """The detail lookup returned a non-success status; status is passed through."""


class MalformedUpstreamBody(PhimAdapterError):
    """A PhimAPI body lacks the fields the mappers need."""


class MissingRequiredInput(PhimAdapterError):
    status_code = 400
