from dataclasses import dataclass, field
import logging

from eth_utils import keccak

from userop_hash.exceptions import HashExceptionCode, ParseError
from userop_hash.typing import Address
from userop_hash.utils.decode import encode_hex
from userop_hash.utils.encode import encode_user_operation_v6
from ..user_operation import \
    verify_and_get_uint, verify_and_get_bytes, verify_and_get_address, \
    verify_and_get_bytes32, verify_and_get_bytes_or_hex, \
    verify_no_unknown_fields
from ..user_operation import UserOperation
from ..packing import digest

REQUIRED_FIELDS = [
    "sender",
    "nonce",
    "initCode",
    "callData",
    "callGasLimit",
    "verificationGasLimit",
    "preVerificationGas",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
    "paymasterAndData",
]
OPTIONAL_FIELDS = ["signature"]

UINT_FIELDS = [
    ("nonce", "nonce"),
    ("call_gas_limit", "callGasLimit"),
    ("verification_gas_limit", "verificationGasLimit"),
    ("pre_verification_gas", "preVerificationGas"),
    ("max_fee_per_gas", "maxFeePerGas"),
    ("max_priority_fee_per_gas", "maxPriorityFeePerGas"),
]
DIGEST_FIELDS = [
    ("init_code_hash", "initCode"),
    ("call_data_hash", "callData"),
    ("paymaster_and_data_hash", "paymasterAndData"),
]
BYTES_FIELDS = [
    ("init_code", "initCode"),
    ("call_data", "callData"),
    ("paymaster_and_data", "paymasterAndData"),
]


@dataclass(frozen=True)
class HashableUserOperationV6:
    """
    The v0.6 UserOperation with initCode, callData and paymasterAndData
    replaced by their keccak digests. Can be built directly by callers
    that only hold the digests.
    """
    sender_address: Address
    nonce: int
    init_code_hash: bytes
    call_data_hash: bytes
    call_gas_limit: int
    verification_gas_limit: int
    pre_verification_gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    paymaster_and_data_hash: bytes

    version = 6

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "sender_address",
            verify_and_get_address("sender", self.sender_address))
        for attribute, field_name in UINT_FIELDS:
            object.__setattr__(
                self, attribute,
                verify_and_get_uint(field_name, getattr(self, attribute)))
        for attribute, field_name in DIGEST_FIELDS:
            object.__setattr__(
                self, attribute,
                verify_and_get_bytes32(field_name, getattr(self, attribute)))

    def to_list(self) -> list[Address | int | bytes]:
        return [
            self.sender_address,
            self.nonce,
            self.init_code_hash,
            self.call_data_hash,
            self.call_gas_limit,
            self.verification_gas_limit,
            self.pre_verification_gas,
            self.max_fee_per_gas,
            self.max_priority_fee_per_gas,
            self.paymaster_and_data_hash,
        ]

    def pack_user_operation(self) -> bytes:
        return encode_user_operation_v6(self.to_list())

    def get_operation_hash(self) -> bytes:
        return keccak(self.pack_user_operation())


@dataclass()
class UserOperationV6(UserOperation):
    sender_address: Address
    nonce: int
    init_code: bytes
    call_data: bytes
    call_gas_limit: int
    verification_gas_limit: int
    pre_verification_gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    paymaster_and_data: bytes
    signature: bytes | None = None
    factory_address_lowercase: Address | None = field(init=False)
    paymaster_address_lowercase: Address | None = field(init=False)

    version = 6

    def __post_init__(self) -> None:
        self.sender_address = verify_and_get_address(
            "sender", self.sender_address)
        for attribute, field_name in UINT_FIELDS:
            setattr(self, attribute, verify_and_get_uint(
                field_name, getattr(self, attribute)))
        for attribute, field_name in BYTES_FIELDS:
            setattr(self, attribute, verify_and_get_bytes_or_hex(
                field_name, getattr(self, attribute)))
        if self.signature is not None:
            self.signature = verify_and_get_bytes_or_hex(
                "signature", self.signature)
        self._set_factory_and_paymaster_address()

    @staticmethod
    def from_json(
            jsonRequestDict: dict[str, str | None]) -> "UserOperationV6":
        UserOperationV6.verify_fields_exist(jsonRequestDict)

        signature = jsonRequestDict.get("signature")
        return UserOperationV6(
            sender_address=verify_and_get_address(
                "sender", jsonRequestDict["sender"]),
            nonce=verify_and_get_uint(
                "nonce", jsonRequestDict["nonce"]),
            init_code=verify_and_get_bytes(
                "initCode", jsonRequestDict["initCode"]),
            call_data=verify_and_get_bytes(
                "callData", jsonRequestDict["callData"]),
            call_gas_limit=verify_and_get_uint(
                "callGasLimit", jsonRequestDict["callGasLimit"]),
            verification_gas_limit=verify_and_get_uint(
                "verificationGasLimit",
                jsonRequestDict["verificationGasLimit"]),
            pre_verification_gas=verify_and_get_uint(
                "preVerificationGas", jsonRequestDict["preVerificationGas"]),
            max_fee_per_gas=verify_and_get_uint(
                "maxFeePerGas", jsonRequestDict["maxFeePerGas"]),
            max_priority_fee_per_gas=verify_and_get_uint(
                "maxPriorityFeePerGas",
                jsonRequestDict["maxPriorityFeePerGas"]),
            paymaster_and_data=verify_and_get_bytes(
                "paymasterAndData", jsonRequestDict["paymasterAndData"]),
            signature=None if signature is None
            else verify_and_get_bytes("signature", signature),
        )

    @staticmethod
    def verify_fields_exist(
            jsonRequestDict: dict[str, str | None]
    ) -> None:
        if not isinstance(jsonRequestDict, dict):
            raise ParseError(
                HashExceptionCode.InvalidFields,
                "Invalid UserOperation",
            )
        for field_name in REQUIRED_FIELDS:
            if field_name not in jsonRequestDict:
                raise ParseError(
                    HashExceptionCode.InvalidFields,
                    f"UserOperation missing {field_name} field",
                )
        verify_no_unknown_fields(
            jsonRequestDict, REQUIRED_FIELDS + OPTIONAL_FIELDS)

    def get_user_operation_json(self) -> dict[str, Address | str]:
        user_operation_json = {
            "sender": self.sender_address,
            "nonce": hex(self.nonce),
            "initCode": encode_hex(self.init_code),
            "callData": encode_hex(self.call_data),
            "callGasLimit": hex(self.call_gas_limit),
            "verificationGasLimit": hex(self.verification_gas_limit),
            "preVerificationGas": hex(self.pre_verification_gas),
            "maxFeePerGas": hex(self.max_fee_per_gas),
            "maxPriorityFeePerGas": hex(self.max_priority_fee_per_gas),
            "paymasterAndData": encode_hex(self.paymaster_and_data),
        }
        if self.signature is not None:
            user_operation_json["signature"] = encode_hex(self.signature)
        return user_operation_json

    def to_hashable(self) -> HashableUserOperationV6:
        hashable_user_operation = HashableUserOperationV6(
            sender_address=self.sender_address,
            nonce=self.nonce,
            init_code_hash=digest(self.init_code),
            call_data_hash=digest(self.call_data),
            call_gas_limit=self.call_gas_limit,
            verification_gas_limit=self.verification_gas_limit,
            pre_verification_gas=self.pre_verification_gas,
            max_fee_per_gas=self.max_fee_per_gas,
            max_priority_fee_per_gas=self.max_priority_fee_per_gas,
            paymaster_and_data_hash=digest(self.paymaster_and_data),
        )
        logging.debug(
            "v6 digests : "
            f"initCode 0x{hashable_user_operation.init_code_hash.hex()} "
            f"callData 0x{hashable_user_operation.call_data_hash.hex()} "
            "paymasterAndData "
            f"0x{hashable_user_operation.paymaster_and_data_hash.hex()}"
        )
        return hashable_user_operation

    def pack_user_operation(self) -> bytes:
        return self.to_hashable().pack_user_operation()

    def _set_factory_and_paymaster_address(self) -> None:
        if len(self.init_code) > 20:
            self.factory_address_lowercase = Address(
                encode_hex(self.init_code[:20]))
        else:
            self.factory_address_lowercase = None

        if len(self.paymaster_and_data) >= 20:
            self.paymaster_address_lowercase = Address(
                encode_hex(self.paymaster_and_data[:20]))
        else:
            self.paymaster_address_lowercase = None
