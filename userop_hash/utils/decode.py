import re

from eth_utils import to_checksum_address

from userop_hash.exceptions import HashExceptionCode, ParseError
from userop_hash.typing import Address

ADDRESS_PATTERN = "^0x[0-9a-fA-F]{40}$"
HEX_PATTERN = "^[0-9a-fA-F]*$"
HEX_QUANTITY_PATTERN = "^0x[0-9a-fA-F]+$"
DECIMAL_PATTERN = "^[0-9]+$"
MAX_UINT256 = 2**256 - 1


def decode_hex(value: str) -> bytes:
    """
    Decode a hex literal into bytes, the "0x" prefix is optional.
    Odd length input and non hex digits are rejected.
    """
    if not isinstance(value, str):
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid hex value : {value}",
        )
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if re.fullmatch(HEX_PATTERN, digits) is None:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid hex value : {value}",
        )
    if len(digits) % 2 != 0:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid hex value : {value} has an odd number of digits",
        )
    return bytes.fromhex(digits)


def encode_hex(value: bytes) -> str:
    return "0x" + value.hex()


def decode_uint256(value: str | int) -> int:
    """
    Accepts a decimal literal, a "0x" hex quantity or a python int.
    "0x" alone is zero, as some eth clients return it for empty quantities.
    """
    if isinstance(value, bool):
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid uint value : {value}",
        )

    if isinstance(value, int):
        ivalue = value
    elif value == "0x":
        return 0
    elif isinstance(value, str) and re.fullmatch(HEX_QUANTITY_PATTERN, value):
        ivalue = int(value, 16)
    elif isinstance(value, str) and re.fullmatch(DECIMAL_PATTERN, value):
        ivalue = int(value)
    else:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid uint value : {value}",
        )

    if ivalue < 0 or ivalue > MAX_UINT256:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid uint value : {value} does not fit in uint256",
        )
    return ivalue


def decode_address(value: str) -> Address:
    if not isinstance(value, str) or re.fullmatch(ADDRESS_PATTERN, value) is None:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid address value : {value}",
        )
    return Address(to_checksum_address(value))
