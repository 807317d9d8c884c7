import logging
from typing import Any

from userop_hash.exceptions import \
    HashExceptionCode, UnsupportedVersionError
from userop_hash.typing import Address, UserOperationHash
from .user_operation import \
    UserOperation, finalize_user_operation_hash, \
    verify_and_get_address, verify_and_get_uint
from .v6.user_operation_v6 import HashableUserOperationV6, UserOperationV6
from .v7.user_operation_v7 import PackedUserOperationV7, UserOperationV7

ENTRYPOINT_V6 = Address("0x5FF137D4b0FDCD49DcA30c7CF57E578a026d2789")
ENTRYPOINT_V7 = Address("0x0000000071727De22E5E9d8BAf0edAc6f37da032")
DEFAULT_ENTRYPOINTS: dict[int, Address] = {
    6: ENTRYPOINT_V6,
    7: ENTRYPOINT_V7,
}
SUPPORTED_VERSIONS = list(DEFAULT_ENTRYPOINTS.keys())

UserOperationType = (
    UserOperationV6 | UserOperationV7 |
    HashableUserOperationV6 | PackedUserOperationV7
)


def verify_and_get_version(version: Any) -> int:
    if isinstance(version, str):
        version = version.removeprefix("v").removeprefix("0.0").removeprefix("0.")
        if version.isdigit():
            version = int(version)
    if isinstance(version, bool) or version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(
            HashExceptionCode.UnsupportedVersion,
            f"Unsupported entrypoint version : {version}, "
            f"supported versions are {SUPPORTED_VERSIONS}",
        )
    return int(version)


def parse_user_operation(
    version: Any, user_operation_json: dict[str, str | None]
) -> UserOperation:
    match verify_and_get_version(version):
        case 6:
            return UserOperationV6.from_json(user_operation_json)
        case _:
            return UserOperationV7.from_json(user_operation_json)


def get_operation_hash(user_operation: UserOperationType) -> bytes:
    match user_operation:
        case (
            UserOperationV6() | HashableUserOperationV6() |
            UserOperationV7() | PackedUserOperationV7()
        ):
            return user_operation.get_operation_hash()
        case _:
            raise UnsupportedVersionError(
                HashExceptionCode.UnsupportedVersion,
                f"Unsupported user operation type : {type(user_operation)}",
            )


def get_user_operation_hash(
    user_operation: UserOperationType, entrypoint: Address, chain_id: int
) -> UserOperationHash:
    user_operation_hash = finalize_user_operation_hash(
        get_operation_hash(user_operation), entrypoint, chain_id)
    return UserOperationHash("0x" + user_operation_hash.hex())


def hash_user_operation_json(
    version: Any,
    user_operation_json: dict[str, str | None],
    entrypoint: Address,
    chain_id: int,
) -> UserOperationHash:
    user_operation = parse_user_operation(version, user_operation_json)
    return get_user_operation_hash(user_operation, entrypoint, chain_id)


class UserOperationHandler:
    """
    Hashes user operations of any supported version for one chain, each
    version bound to its own entrypoint.
    """
    chain_id: int
    entrypoints: dict[int, Address]

    def __init__(
        self,
        chain_id: int,
        entrypoints: dict[int, Address] | None = None,
    ):
        self.chain_id = verify_and_get_uint("chainId", chain_id)
        self.entrypoints = dict(DEFAULT_ENTRYPOINTS)
        if entrypoints is not None:
            for version, entrypoint in entrypoints.items():
                self.entrypoints[verify_and_get_version(version)] = \
                    verify_and_get_address("entrypoint", entrypoint)

    def get_entrypoint(self, version: int) -> Address:
        return self.entrypoints[verify_and_get_version(version)]

    def get_user_operation_hash(
            self, user_operation: UserOperationType) -> UserOperationHash:
        match user_operation:
            case (
                UserOperationV6() | HashableUserOperationV6() |
                UserOperationV7() | PackedUserOperationV7()
            ):
                entrypoint = self.entrypoints[user_operation.version]
            case _:
                raise UnsupportedVersionError(
                    HashExceptionCode.UnsupportedVersion,
                    f"Unsupported user operation type : {type(user_operation)}",
                )
        user_operation_hash = get_user_operation_hash(
            user_operation, entrypoint, self.chain_id)
        logging.info(
            f"UserOperation {user_operation_hash} "
            f"entrypoint {entrypoint} chainId {self.chain_id}"
        )
        return user_operation_hash

    def get_user_operation_hash_json(
        self, version: Any, user_operation_json: dict[str, str | None]
    ) -> UserOperationHash:
        return self.get_user_operation_hash(
            parse_user_operation(version, user_operation_json))
