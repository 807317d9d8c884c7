import json
import logging
import os
import re
import sys
from argparse import ArgumentParser, ArgumentTypeError
from dataclasses import dataclass
from importlib.metadata import version

from userop_hash.exceptions import UnsupportedVersionError
from userop_hash.user_operation.user_operation_handler import \
    DEFAULT_ENTRYPOINTS, verify_and_get_version

from .typing import Address

USEROP_HASH_HEADER = "\n".join(
    (
        r"  _   _               ___          _   _           _     ",
        r" | | | |___ ___ _ _  / _ \ _ __   | | | |__ _ ____| |_   ",
        r" | |_| (_-</ -_) '_|| (_) | '_ \  | |_| / _` (_-<| ' \  ",
        r"  \___//__/\___|_|   \___/| .__/  |_| |_\__,_/__/|_||_| ",
        r"                          |_|                            ",
    )
)
__version__ = version("userop_hash")


@dataclass()
class InitData:
    entrypoint_version: int
    entrypoint: Address
    chain_id: int
    user_operation: dict[str, str | None]
    is_verbose: bool


def address(ep: str):
    address_pattern = "^0x[0-9a-fA-F]{40}$"
    if not isinstance(ep, str) or re.fullmatch(address_pattern, ep) is None:
        raise ArgumentTypeError(f"Wrong address format : {ep}")
    return ep


def unsigned_int(value):
    try:
        ivalue = int(value)
    except ValueError:
        raise ArgumentTypeError(
                "%s is an invalid unsigned int value" % value)
    if ivalue < 0:
        raise ArgumentTypeError(
                "%s is an invalid unsigned int value" % value)
    return ivalue


def entrypoint_version(value):
    try:
        return verify_and_get_version(value)
    except UnsupportedVersionError as excp:
        raise ArgumentTypeError(excp.message)


def user_operation_json(value: str) -> dict[str, str | None]:
    """
    A UserOperation json object in the eth_sendUserOperation format,
    or a path to a file holding one when prefixed with "@".
    """
    if value.startswith("@"):
        try:
            with open(value[1:]) as user_operation_file:
                value = user_operation_file.read()
        except OSError as excp:
            raise ArgumentTypeError(
                f"Can't read UserOperation file : {excp}")
    try:
        user_operation = json.loads(value)
    except json.JSONDecodeError as excp:
        raise ArgumentTypeError(f"Invalid UserOperation json : {excp}")
    if not isinstance(user_operation, dict):
        raise ArgumentTypeError("UserOperation has to be a json object")
    return user_operation


def _get_env_or_default(env_var, default, value_type):
    """
    Helper function to get the value from an environment variable or return the default value.
    """
    value = os.getenv(env_var, None)
    if value is not None:
        return value_type(value)
    return default


def initialize_argument_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="UserOpHash",
        description="ERC-4337 UserOperation hash calculator",
    )

    parser.add_argument(
        "--entrypoint_version",
        type=entrypoint_version,
        help="entrypoint version of the UserOperation, 6 or 7 - defaults to 7",
        nargs="?",
        const=7,
        default=_get_env_or_default(
            "USEROP_HASH_ENTRYPOINT_VERSION", 7, entrypoint_version),
    )

    parser.add_argument(
        "--entrypoint",
        type=address,
        help=(
            "entrypoint address - "
            "defaults to the canonical entrypoint of the selected version"
        ),
        nargs="?",
        default=_get_env_or_default("USEROP_HASH_ENTRYPOINT", None, address),
    )

    parser.add_argument(
        "--chain_id",
        type=unsigned_int,
        help="chain id - defaults to 31337",
        nargs="?",
        default=_get_env_or_default("USEROP_HASH_CHAIN_ID", 31337, unsigned_int),
    )

    parser.add_argument(
        "--user_operation",
        type=user_operation_json,
        help=(
            "UserOperation json object in the eth_sendUserOperation format, "
            "or @path to a json file"
        ),
        required=os.getenv("USEROP_HASH_USER_OPERATION") is None,
        default=_get_env_or_default(
            "USEROP_HASH_USER_OPERATION", None, user_operation_json),
    )

    parser.add_argument(
        "--verbose",
        help="show debug log",
        nargs="?",
        const=True,
        default=_get_env_or_default(
            "USEROP_HASH_VERBOSE", False, lambda v: v.lower() == "true"),
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s " + "version " + __version__,
    )

    return parser


def init_logging(is_verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if is_verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%m-%d %H:%M:%S",
        force=True,
    )


def parse_args(cmd_args: list[str]) -> InitData:
    argument_parser: ArgumentParser = initialize_argument_parser()
    args = argument_parser.parse_args(cmd_args)

    init_logging(bool(args.verbose))
    if args.verbose:
        print(USEROP_HASH_HEADER, file=sys.stderr)
        print("version : " + __version__, file=sys.stderr)

    if args.entrypoint is None:
        entrypoint = DEFAULT_ENTRYPOINTS[args.entrypoint_version]
    else:
        entrypoint = Address(args.entrypoint)

    init_data = InitData(
        entrypoint_version=args.entrypoint_version,
        entrypoint=entrypoint,
        chain_id=args.chain_id,
        user_operation=args.user_operation,
        is_verbose=bool(args.verbose),
    )
    logging.debug(f"Init data : {init_data}")

    return init_data

