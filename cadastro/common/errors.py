"""Error taxonomy shared by validators, lookups and the backend."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_FORMAT = "InvalidFormat"
    CHECKSUM_FAILURE = "ChecksumFailure"
    NOT_FOUND = "NotFound"
    SERVICE_ERROR = "ServiceError"
    NETWORK_ERROR = "NetworkError"


class AddressLookupError(Exception):
    """Base class for failures raised by remote lookups (CEP, IBGE)."""

    kind: ErrorKind = ErrorKind.SERVICE_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidFormatError(AddressLookupError):
    kind = ErrorKind.INVALID_FORMAT


class NotFoundError(AddressLookupError):
    kind = ErrorKind.NOT_FOUND


class ServiceError(AddressLookupError):
    kind = ErrorKind.SERVICE_ERROR


class NetworkError(AddressLookupError):
    kind = ErrorKind.NETWORK_ERROR
