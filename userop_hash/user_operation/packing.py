import logging

from eth_utils import keccak

from userop_hash.exceptions import GasValueOverflowError, HashExceptionCode
from userop_hash.typing import Address
from userop_hash.utils.decode import decode_hex

MAX_UINT128 = 2**128 - 1


def digest(data: bytes) -> bytes:
    return keccak(data)


def uint128_to_bytes(field_name: str, value: int) -> bytes:
    if value < 0 or value > MAX_UINT128:
        raise GasValueOverflowError(
            HashExceptionCode.GasValueOverflow,
            f"Invalid value : {value} in field {field_name}, "
            "has to fit in uint128",
        )
    return value.to_bytes(16, "big")


def pack_uint128_pair(
    first_field: str, first: int, second_field: str, second: int
) -> bytes:
    """
    Pack two uint128 values in a single bytes32 word, the first value
    takes the first (high order) 16 bytes and the second value the
    last 16 bytes. Values wider than 128 bits are rejected.
    """
    return (
        uint128_to_bytes(first_field, first) +
        uint128_to_bytes(second_field, second)
    )


def pack_account_gas_limits(
        call_gas_limit: int, verification_gas_limit: int) -> bytes:
    account_gas_limits = pack_uint128_pair(
        "callGasLimit", call_gas_limit,
        "verificationGasLimit", verification_gas_limit,
    )
    logging.debug(f"accountGasLimits : 0x{account_gas_limits.hex()}")
    return account_gas_limits


def pack_gas_fees(
        max_priority_fee_per_gas: int, max_fee_per_gas: int) -> bytes:
    gas_fees = pack_uint128_pair(
        "maxPriorityFeePerGas", max_priority_fee_per_gas,
        "maxFeePerGas", max_fee_per_gas,
    )
    logging.debug(f"gasFees : 0x{gas_fees.hex()}")
    return gas_fees


def compose_init_code(
        factory: Address | None, factory_data: bytes | None) -> bytes:
    if factory is None or factory_data is None:
        return bytes(0)
    return decode_hex(factory) + factory_data


def compose_paymaster_and_data(
    paymaster: Address | None,
    paymaster_verification_gas_limit: int | None,
    paymaster_post_op_gas_limit: int | None,
    paymaster_data: bytes | None,
) -> bytes:
    if (
        paymaster is None or
        paymaster_verification_gas_limit is None or
        paymaster_post_op_gas_limit is None or
        paymaster_data is None
    ):
        return bytes(0)
    return (
        decode_hex(paymaster) +
        uint128_to_bytes(
            "paymasterVerificationGasLimit", paymaster_verification_gas_limit) +
        uint128_to_bytes(
            "paymasterPostOpGasLimit", paymaster_post_op_gas_limit) +
        paymaster_data
    )
