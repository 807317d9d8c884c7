from abc import ABC, abstractmethod
import logging
import re

from eth_utils import keccak

from userop_hash.exceptions import HashExceptionCode, ParseError
from userop_hash.typing import Address, UserOperationHash
from userop_hash.utils.decode import \
    decode_address, decode_hex, decode_uint256
from userop_hash.utils.encode import encode_user_operation_hash_domain


class UserOperation(ABC):
    version: int
    sender_address: Address
    nonce: int
    pre_verification_gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    factory_address_lowercase: Address | None
    paymaster_address_lowercase: Address | None

    @abstractmethod
    def get_user_operation_json(
            self
    ) -> dict[str, Address | str] | dict[str, Address | str | None]:
        pass

    @abstractmethod
    def pack_user_operation(self) -> bytes:
        """canonical abi encoding of the operation reduced to static fields"""

    def get_operation_hash(self) -> bytes:
        return keccak(self.pack_user_operation())

    def get_user_operation_hash(
            self, entrypoint: Address, chain_id: int) -> UserOperationHash:
        user_operation_hash = finalize_user_operation_hash(
            self.get_operation_hash(), entrypoint, chain_id)
        return UserOperationHash("0x" + user_operation_hash.hex())


def finalize_user_operation_hash(
    operation_hash: bytes, entrypoint: Address, chain_id: int
) -> bytes:
    """
    Bind an operation hash to an entrypoint and a chain:
    keccak(operation_hash ++ pad32(entrypoint) ++ uint256(chain_id))
    """
    if len(operation_hash) != 32:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid operation hash length : {len(operation_hash)}",
        )
    entrypoint = verify_and_get_address("entrypoint", entrypoint)
    chain_id = verify_and_get_uint("chainId", chain_id)
    user_operation_hash = keccak(
        encode_user_operation_hash_domain(
            operation_hash, entrypoint, chain_id)
    )
    logging.debug(
        f"userOpHash : 0x{user_operation_hash.hex()} "
        f"entrypoint : {entrypoint} chainId : {chain_id}"
    )
    return user_operation_hash


def verify_and_get_address(field_name: str, value: Address | None) -> Address:
    try:
        return decode_address(value)  # type: ignore
    except ParseError:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid address value : {value} in field {field_name}",
        )


def verify_and_get_uint(field_name: str, value: str | int | None) -> int:
    if value is None:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid uint value in field {field_name}",
        )
    try:
        return decode_uint256(value)
    except ParseError:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid uint value : {value} in field {field_name}",
        )


def verify_and_get_bytes(field_name: str, value: str | None) -> bytes:
    if value is None:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid bytes hex value in field {field_name}",
        )

    if isinstance(value, str) and value[:2] == "0x":
        try:
            return decode_hex(value)
        except ParseError:
            raise ParseError(
                HashExceptionCode.InvalidFields,
                f"Invalid bytes hex value : {value} in field {field_name}",
            )
    else:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid bytes hex value : {value} in field {field_name}",
        )


def verify_and_get_bytes_or_hex(
    field_name: str, value: str | bytes | None
) -> bytes:
    if isinstance(value, bytes):
        return value
    return verify_and_get_bytes(field_name, value)


def verify_and_get_bytes32(field_name: str, value: str | bytes | None) -> bytes:
    result = verify_and_get_bytes_or_hex(field_name, value)
    if len(result) != 32:
        raise ParseError(
            HashExceptionCode.InvalidFields,
            f"Invalid bytes32 value in field {field_name}, "
            f"expected 32 bytes got {len(result)}",
        )
    return result


def verify_no_unknown_fields(
    json_request_dict: dict, known_fields: list[str]
) -> None:
    for field in json_request_dict:
        if field not in known_fields:
            raise ParseError(
                HashExceptionCode.InvalidFields,
                f"UserOperation has unknown field {field}",
            )


def is_user_operation_hash(user_operation_hash: str) -> bool:
    hash_pattern = "^0x[0-9a-fA-F]{64}$"
    return (
        isinstance(user_operation_hash, str)
        and re.fullmatch(hash_pattern, user_operation_hash) is not None
    )
