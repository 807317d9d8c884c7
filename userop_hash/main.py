import logging
import sys

from userop_hash.exceptions import ParseError, UnsupportedVersionError
from userop_hash.user_operation.user_operation_handler import \
    hash_user_operation_json

from .cli_manager import parse_args


def main(cmd_args=sys.argv[1:]) -> int:
    init_data = parse_args(cmd_args)
    try:
        user_operation_hash = hash_user_operation_json(
            init_data.entrypoint_version,
            init_data.user_operation,
            init_data.entrypoint,
            init_data.chain_id,
        )
    except (ParseError, UnsupportedVersionError) as excp:
        logging.error(excp.message)
        return 1

    print(user_operation_hash)
    return 0


def run() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
