from dataclasses import dataclass
from enum import Enum


class HashExceptionCode(Enum):
    InvalidFields = -32602
    GasValueOverflow = -32603
    UnsupportedVersion = -32604


@dataclass
class ParseError(Exception):
    exception_code: HashExceptionCode
    message: str

    def __str__(self) -> str:
        return self.message


class GasValueOverflowError(ParseError):
    pass


@dataclass
class UnsupportedVersionError(Exception):
    exception_code: HashExceptionCode
    message: str

    def __str__(self) -> str:
        return self.message
