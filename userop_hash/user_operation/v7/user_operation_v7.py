from dataclasses import dataclass, field
import logging

from eth_utils import keccak

from userop_hash.exceptions import HashExceptionCode, ParseError
from userop_hash.typing import Address
from userop_hash.utils.decode import encode_hex
from userop_hash.utils.encode import encode_packed_user_operation_v7
from ..user_operation import \
    verify_and_get_uint, verify_and_get_bytes, verify_and_get_address, \
    verify_and_get_bytes32, verify_and_get_bytes_or_hex, \
    verify_no_unknown_fields
from ..user_operation import UserOperation
from ..packing import \
    digest, compose_init_code, compose_paymaster_and_data, \
    pack_account_gas_limits, pack_gas_fees, uint128_to_bytes

REQUIRED_FIELDS = [
    "sender",
    "nonce",
    "callData",
    "callGasLimit",
    "verificationGasLimit",
    "preVerificationGas",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
]
OPTIONAL_FIELDS = [
    "factory",
    "factoryData",
    "paymaster",
    "paymasterVerificationGasLimit",
    "paymasterPostOpGasLimit",
    "paymasterData",
    "signature",
]

UINT_FIELDS = [
    ("nonce", "nonce"),
    ("call_gas_limit", "callGasLimit"),
    ("verification_gas_limit", "verificationGasLimit"),
    ("pre_verification_gas", "preVerificationGas"),
    ("max_fee_per_gas", "maxFeePerGas"),
    ("max_priority_fee_per_gas", "maxPriorityFeePerGas"),
]
PACKED_UINT_FIELDS = [
    ("nonce", "nonce"),
    ("pre_verification_gas", "preVerificationGas"),
]
PACKED_BYTES32_FIELDS = [
    ("init_code_hash", "initCode"),
    ("call_data_hash", "callData"),
    ("account_gas_limits", "accountGasLimits"),
    ("gas_fees", "gasFees"),
    ("paymaster_and_data_hash", "paymasterAndData"),
]


@dataclass(frozen=True)
class Factory:
    address: Address
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "address", verify_and_get_address("factory", self.address))
        object.__setattr__(
            self, "data", verify_and_get_bytes_or_hex("factoryData", self.data))

    def get_init_code(self) -> bytes:
        return compose_init_code(self.address, self.data)


@dataclass(frozen=True)
class Paymaster:
    address: Address
    verification_gas_limit: int
    post_op_gas_limit: int
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "address",
            verify_and_get_address("paymaster", self.address))
        for attribute, field_name in [
            ("verification_gas_limit", "paymasterVerificationGasLimit"),
            ("post_op_gas_limit", "paymasterPostOpGasLimit"),
        ]:
            value = verify_and_get_uint(field_name, getattr(self, attribute))
            uint128_to_bytes(field_name, value)
            object.__setattr__(self, attribute, value)
        object.__setattr__(
            self, "data",
            verify_and_get_bytes_or_hex("paymasterData", self.data))

    def get_paymaster_and_data(self) -> bytes:
        return compose_paymaster_and_data(
            self.address,
            self.verification_gas_limit,
            self.post_op_gas_limit,
            self.data,
        )


@dataclass(frozen=True)
class PackedUserOperationV7:
    """
    The v0.7 PackedUserOperation as hashed by the entrypoint: dynamic
    fields replaced by their keccak digests and the gas fields packed
    two by two into bytes32 words.
    """
    sender_address: Address
    nonce: int
    init_code_hash: bytes
    call_data_hash: bytes
    account_gas_limits: bytes
    pre_verification_gas: int
    gas_fees: bytes
    paymaster_and_data_hash: bytes

    version = 7

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "sender_address",
            verify_and_get_address("sender", self.sender_address))
        for attribute, field_name in PACKED_UINT_FIELDS:
            object.__setattr__(
                self, attribute,
                verify_and_get_uint(field_name, getattr(self, attribute)))
        for attribute, field_name in PACKED_BYTES32_FIELDS:
            object.__setattr__(
                self, attribute,
                verify_and_get_bytes32(field_name, getattr(self, attribute)))

    def to_list(self) -> list[Address | int | bytes]:
        return [
            self.sender_address,
            self.nonce,
            self.init_code_hash,
            self.call_data_hash,
            self.account_gas_limits,
            self.pre_verification_gas,
            self.gas_fees,
            self.paymaster_and_data_hash,
        ]

    def pack_user_operation(self) -> bytes:
        return encode_packed_user_operation_v7(self.to_list())

    def get_operation_hash(self) -> bytes:
        return keccak(self.pack_user_operation())


@dataclass()
class UserOperationV7(UserOperation):
    sender_address: Address
    nonce: int
    call_data: bytes
    call_gas_limit: int
    verification_gas_limit: int
    pre_verification_gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    factory: Factory | None = None
    paymaster: Paymaster | None = None
    signature: bytes | None = None
    factory_address_lowercase: Address | None = field(init=False)
    paymaster_address_lowercase: Address | None = field(init=False)

    version = 7

    def __post_init__(self) -> None:
        self.sender_address = verify_and_get_address(
            "sender", self.sender_address)
        # uint128 bounds are checked when the gas words are packed
        for attribute, field_name in UINT_FIELDS:
            setattr(self, attribute, verify_and_get_uint(
                field_name, getattr(self, attribute)))
        self.call_data = verify_and_get_bytes_or_hex(
            "callData", self.call_data)
        if self.signature is not None:
            self.signature = verify_and_get_bytes_or_hex(
                "signature", self.signature)
        self._set_factory_and_paymaster_address()

    @staticmethod
    def from_json(
            jsonRequestDict: dict[str, str | None]) -> "UserOperationV7":
        UserOperationV7.verify_fields_exist(jsonRequestDict)

        factory_address = jsonRequestDict.get("factory")
        factory_data = jsonRequestDict.get("factoryData")
        factory: Factory | None
        if factory_address is not None:
            factory = Factory(
                verify_and_get_address("factory", factory_address),
                verify_and_get_bytes("factoryData", factory_data),
            )
        elif factory_data is None:
            factory = None
        else:
            raise ParseError(
                HashExceptionCode.InvalidFields,
                'Invalid UserOperation, '
                '"factoryData" has to be null if "factory" is null',
            )

        paymaster_address = jsonRequestDict.get("paymaster")
        paymaster_verification_gas_limit = jsonRequestDict.get(
                "paymasterVerificationGasLimit")
        paymaster_post_op_gas_limit = jsonRequestDict.get(
                "paymasterPostOpGasLimit")
        paymaster_data = jsonRequestDict.get("paymasterData")
        paymaster: Paymaster | None
        if paymaster_address is not None:
            paymaster = Paymaster(
                verify_and_get_address("paymaster", paymaster_address),
                verify_and_get_uint(
                    "paymasterVerificationGasLimit",
                    paymaster_verification_gas_limit),
                verify_and_get_uint(
                    "paymasterPostOpGasLimit", paymaster_post_op_gas_limit),
                verify_and_get_bytes("paymasterData", paymaster_data),
            )
        elif (
            paymaster_verification_gas_limit is None and
            paymaster_post_op_gas_limit is None and
            paymaster_data is None
        ):
            paymaster = None
        else:
            raise ParseError(
                HashExceptionCode.InvalidFields,
                "Invalid UserOperation, "
                '"paymasterVerificationGasLimit", "paymasterPostOpGasLimit" '
                'and "paymasterData" have to be null if "paymaster" is null',
            )

        signature = jsonRequestDict.get("signature")
        return UserOperationV7(
            sender_address=verify_and_get_address(
                "sender", jsonRequestDict["sender"]),
            nonce=verify_and_get_uint(
                "nonce", jsonRequestDict["nonce"]),
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
            factory=factory,
            paymaster=paymaster,
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

    def get_user_operation_json(self) -> dict[str, Address | str | None]:
        user_operation_json: dict[str, Address | str | None] = {
            "sender": self.sender_address,
            "nonce": hex(self.nonce),
            "factory": None,
            "factoryData": None,
            "callData": encode_hex(self.call_data),
            "callGasLimit": hex(self.call_gas_limit),
            "verificationGasLimit": hex(self.verification_gas_limit),
            "preVerificationGas": hex(self.pre_verification_gas),
            "maxFeePerGas": hex(self.max_fee_per_gas),
            "maxPriorityFeePerGas": hex(self.max_priority_fee_per_gas),
            "paymaster": None,
            "paymasterVerificationGasLimit": None,
            "paymasterPostOpGasLimit": None,
            "paymasterData": None,
        }
        if self.factory is not None:
            user_operation_json["factory"] = self.factory.address
            user_operation_json["factoryData"] = \
                encode_hex(self.factory.data)
        if self.paymaster is not None:
            user_operation_json["paymaster"] = self.paymaster.address
            user_operation_json["paymasterVerificationGasLimit"] = \
                hex(self.paymaster.verification_gas_limit)
            user_operation_json["paymasterPostOpGasLimit"] = \
                hex(self.paymaster.post_op_gas_limit)
            user_operation_json["paymasterData"] = \
                encode_hex(self.paymaster.data)
        if self.signature is not None:
            user_operation_json["signature"] = encode_hex(self.signature)
        return user_operation_json

    def get_init_code(self) -> bytes:
        if self.factory is None:
            return bytes(0)
        return self.factory.get_init_code()

    def get_paymaster_and_data(self) -> bytes:
        if self.paymaster is None:
            return bytes(0)
        return self.paymaster.get_paymaster_and_data()

    def to_packed(self) -> PackedUserOperationV7:
        packed_user_operation = PackedUserOperationV7(
            sender_address=self.sender_address,
            nonce=self.nonce,
            init_code_hash=digest(self.get_init_code()),
            call_data_hash=digest(self.call_data),
            account_gas_limits=pack_account_gas_limits(
                self.call_gas_limit, self.verification_gas_limit),
            pre_verification_gas=self.pre_verification_gas,
            gas_fees=pack_gas_fees(
                self.max_priority_fee_per_gas, self.max_fee_per_gas),
            paymaster_and_data_hash=digest(self.get_paymaster_and_data()),
        )
        logging.debug(
            "v7 digests : "
            f"initCode 0x{packed_user_operation.init_code_hash.hex()} "
            f"callData 0x{packed_user_operation.call_data_hash.hex()} "
            "paymasterAndData "
            f"0x{packed_user_operation.paymaster_and_data_hash.hex()}"
        )
        return packed_user_operation

    def pack_user_operation(self) -> bytes:
        return self.to_packed().pack_user_operation()

    def _set_factory_and_paymaster_address(self) -> None:
        if self.factory is not None:
            self.factory_address_lowercase = Address(
                self.factory.address.lower())
        else:
            self.factory_address_lowercase = None

        if self.paymaster is not None:
            self.paymaster_address_lowercase = Address(
                self.paymaster.address.lower())
        else:
            self.paymaster_address_lowercase = None
