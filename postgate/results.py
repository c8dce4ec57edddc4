"""Explicit success/failure values passed between gate stages.

Every stage (auth, ownership, sanitize + persist, relink) returns either
``Ok(value)`` or ``Err(kind, message)``. Routers are the only place an
``Err`` turns into an HTTP response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure taxonomy of the gate."""

    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UPSTREAM_FAILURE = "upstream_failure"
    UNEXPECTED_FAILURE = "unexpected_failure"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


# Store errors surface as 400 with the store's own message.
_STATUS_CODES = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM_FAILURE: 400,
    ErrorKind.UNEXPECTED_FAILURE: 500,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    # Shorthand constructors used across services.
    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> Err:
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def bad_request(cls, message: str) -> Err:
        return cls(ErrorKind.BAD_REQUEST, message)

    @classmethod
    def forbidden(cls, message: str) -> Err:
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def not_found(cls, message: str) -> Err:
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def upstream(cls, message: str) -> Err:
        return cls(ErrorKind.UPSTREAM_FAILURE, message)

    @classmethod
    def unexpected(cls, message: str) -> Err:
        return cls(ErrorKind.UNEXPECTED_FAILURE, message)


Result = Union[Ok[T], Err]
