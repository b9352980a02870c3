"""Contract error taxonomy.

Every failure aborts the current call. Codes are stable and travel over the
wire, so clients can tell a fake or spent ticket apart from a transient
infrastructure problem.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    Unauthorized = 1
    CapacityInvalid = 2
    BatchNotFound = 3
    BatchExhausted = 4
    TicketNotFound = 5
    InvalidProof = 6
    AlreadyRedeemed = 7
    KeyGenerationFailure = 8
    SigningFailure = 9
    EntropyUnavailable = 10
    StorageReadError = 11
    StorageWriteError = 12
    InvalidMessage = 13


# Failures where resubmitting the same call may succeed.
RETRYABLE_CODES = frozenset({
    ErrorCode.EntropyUnavailable,
    ErrorCode.StorageReadError,
    ErrorCode.StorageWriteError,
})


class ContractError(Exception):
    """Base class for every caller-visible contract failure."""

    code: ErrorCode = ErrorCode.InvalidMessage

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code.name)
        self.message = message or self.code.name

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={int(self.code)}, message={self.message!r})"


class Unauthorized(ContractError):
    code = ErrorCode.Unauthorized


class CapacityInvalid(ContractError):
    code = ErrorCode.CapacityInvalid


class BatchNotFound(ContractError):
    code = ErrorCode.BatchNotFound


class BatchExhausted(ContractError):
    code = ErrorCode.BatchExhausted


class TicketNotFound(ContractError):
    code = ErrorCode.TicketNotFound


class InvalidProof(ContractError):
    code = ErrorCode.InvalidProof


class AlreadyRedeemed(ContractError):
    code = ErrorCode.AlreadyRedeemed


class KeyGenerationFailure(ContractError):
    code = ErrorCode.KeyGenerationFailure


class SigningFailure(ContractError):
    code = ErrorCode.SigningFailure


class EntropyUnavailable(ContractError):
    code = ErrorCode.EntropyUnavailable


class StorageReadError(ContractError):
    code = ErrorCode.StorageReadError


class StorageWriteError(ContractError):
    code = ErrorCode.StorageWriteError


class InvalidMessage(ContractError):
    code = ErrorCode.InvalidMessage


_BY_CODE: dict[ErrorCode, type[ContractError]] = {
    cls.code: cls
    for cls in (
        Unauthorized, CapacityInvalid, BatchNotFound, BatchExhausted,
        TicketNotFound, InvalidProof, AlreadyRedeemed, KeyGenerationFailure,
        SigningFailure, EntropyUnavailable, StorageReadError,
        StorageWriteError, InvalidMessage,
    )
}


def error_from_code(code: int, message: str = "") -> ContractError:
    """Rebuild a typed error from its wire code."""
    try:
        cls = _BY_CODE[ErrorCode(code)]
    except ValueError:
        return InvalidMessage(f"unknown error code {code}: {message}")
    return cls(message)
