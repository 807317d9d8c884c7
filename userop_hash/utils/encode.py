from typing import Any

from eth_abi import encode

from userop_hash.typing import Address

USER_OPERATION_V6_ABI = [
    "address",  # sender
    "uint256",  # nonce
    "bytes32",  # keccak(initCode)
    "bytes32",  # keccak(callData)
    "uint256",  # callGasLimit
    "uint256",  # verificationGasLimit
    "uint256",  # preVerificationGas
    "uint256",  # maxFeePerGas
    "uint256",  # maxPriorityFeePerGas
    "bytes32",  # keccak(paymasterAndData)
]

PACKED_USER_OPERATION_V7_ABI = [
    "address",  # sender
    "uint256",  # nonce
    "bytes32",  # keccak(initCode)
    "bytes32",  # keccak(callData)
    "bytes32",  # accountGasLimits
    "uint256",  # preVerificationGas
    "bytes32",  # gasFees
    "bytes32",  # keccak(paymasterAndData)
]


def encode_static_tuple(abi_types: list[str], values: list[Any]) -> bytes:
    """
    Head only abi encoding, every field already reduced to a static type
    so each one takes exactly one 32 bytes slot.
    """
    if len(abi_types) != len(values):
        raise ValueError(
            f"Expected {len(abi_types)} values, got {len(values)}")
    encoded = encode(abi_types, values)
    if len(encoded) != 32 * len(abi_types):
        raise ValueError(
            f"Expected a static tuple of {len(abi_types)} slots, "
            f"got {len(encoded)} bytes")
    return encoded


def encode_user_operation_v6(values: list[Any]) -> bytes:
    return encode_static_tuple(USER_OPERATION_V6_ABI, values)


def encode_packed_user_operation_v7(values: list[Any]) -> bytes:
    return encode_static_tuple(PACKED_USER_OPERATION_V7_ABI, values)


def encode_user_operation_hash_domain(
    user_operation_hash: bytes, entrypoint: Address, chain_id: int
) -> bytes:
    # the entrypoint address is left padded to a full slot for both versions
    return encode(
        ["(bytes32,address,uint256)"],
        [[user_operation_hash, entrypoint, chain_id]],
    )
