"""
ClientQuery Protocol Errors

Exception hierarchy for building, serializing and correlating ProcessQuery
request graphs.
"""

from typing import Any, Optional


class ClientQueryError(Exception):
    """Base exception for ProcessQuery protocol errors."""
    pass


class BusinessError(ClientQueryError):
    """
    The remote object model rejected the batch.

    Raised from the ErrorInfo record of the batch metadata. These are semantic
    rejections (duplicate name, invalid argument, concurrency conflict) and are
    never retried.
    """

    def __init__(self, message: str, code: Optional[int] = None,
                 type_name: Optional[str] = None,
                 trace_correlation_id: Optional[str] = None,
                 value: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.type_name = type_name
        self.trace_correlation_id = trace_correlation_id
        self.value = value

    def __repr__(self) -> str:
        return (f"BusinessError(message={self.message!r}, code={self.code}, "
                f"type_name={self.type_name!r})")


class ProtocolViolationError(ClientQueryError):
    """A well-formed response is missing an expected correlation."""

    def __init__(self, message: str, missing_ids: Optional[list] = None):
        super().__init__(message)
        self.missing_ids = list(missing_ids or [])


class MalformedResponseError(ClientQueryError):
    """The response could not be parsed as a ProcessQuery response array."""
    pass


class DanglingReferenceError(ClientQueryError):
    """A node referenced an id that is not an object path of the same builder."""

    def __init__(self, message: str, reference_id: Optional[int] = None):
        super().__init__(message)
        self.reference_id = reference_id


class UnknownIdentityError(ClientQueryError):
    """An identity was recalled under a name that was never remembered."""

    def __init__(self, name: str):
        super().__init__(f"No identity remembered under '{name}'")
        self.name = name


class GraphSealedError(ClientQueryError):
    """A builder was modified after its graph was built."""
    pass


class RefinementError(ClientQueryError):
    """
    The follow-up request of a two-phase operation failed.

    The object created by the first request still exists on the server.
    ``created`` holds the object as reported by the first request and
    ``cause`` the error raised by the second one.
    """

    def __init__(self, message: str, created: Any = None,
                 cause: Optional[Exception] = None):
        super().__init__(message)
        self.created = created
        self.cause = cause
