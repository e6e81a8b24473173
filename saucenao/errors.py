"""Errors raised by the SauceNAO client."""

from enum import Enum
from typing import Optional


class ErrType(str, Enum):
    """What went wrong during a search"""
    INVALID_PARAMETER = "invalid_parameter"
    INVALID_CODE = "invalid_code"
    URL = "url"
    IO = "io"
    REQUEST = "request"
    JSON = "json"


class SauceError(Exception):
    """
    Error raised by Handler operations.

    `kind` tells callers which stage failed. For INVALID_CODE the
    negative status returned by SauceNAO is kept in `code`.
    """

    def __init__(self, kind: ErrType, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code

    @classmethod
    def invalid_parameter(cls, message: str) -> "SauceError":
        return cls(ErrType.INVALID_PARAMETER, message)

    @classmethod
    def invalid_code(cls, code: int, message: Optional[str]) -> "SauceError":
        return cls(ErrType.INVALID_CODE, message or "", code=code)

    def __str__(self) -> str:
        if self.kind is ErrType.INVALID_CODE:
            return f"Server returned status code {self.code}: {self.message}"
        return f"{self.kind.value}: {self.message}"

    def __repr__(self) -> str:
        return f"SauceError(kind={self.kind.value!r}, message={self.message!r}, code={self.code!r})"
