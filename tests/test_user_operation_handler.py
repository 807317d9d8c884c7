import pytest

from userop_hash.exceptions import ParseError, UnsupportedVersionError
from userop_hash.user_operation.user_operation import \
    finalize_user_operation_hash, is_user_operation_hash
from userop_hash.user_operation.user_operation_handler import \
    ENTRYPOINT_V6, ENTRYPOINT_V7, UserOperationHandler, \
    get_operation_hash, hash_user_operation_json, parse_user_operation, \
    verify_and_get_version
from userop_hash.user_operation.v6.user_operation_v6 import UserOperationV6
from userop_hash.user_operation.v7.user_operation_v7 import UserOperationV7
from userop_hash.utils.decode import decode_hex

from conftest import \
    CHAIN_ID, V6_OPERATION_HASH, V6_USER_OPERATION_HASH, \
    V7_USER_OPERATION_HASH


@pytest.mark.parametrize(
    "version, expected",
    [(6, 6), (7, 7), ("6", 6), ("v7", 7), ("0.6", 6), ("v0.07", 7)],
)
def test_verify_and_get_version(version, expected):
    assert verify_and_get_version(version) == expected


@pytest.mark.parametrize("version", [5, 8, "8", "v0.8", None, True, "six"])
def test_unsupported_version(version):
    with pytest.raises(UnsupportedVersionError):
        verify_and_get_version(version)


def test_parse_user_operation_dispatches_on_version(
        user_operation_v6_json, user_operation_v7_json):
    assert isinstance(
        parse_user_operation(6, user_operation_v6_json), UserOperationV6)
    assert isinstance(
        parse_user_operation(7, user_operation_v7_json), UserOperationV7)


def test_v6_json_parsed_as_v7_is_rejected(user_operation_v6_json):
    with pytest.raises(ParseError):
        parse_user_operation(7, user_operation_v6_json)


def test_hash_user_operation_json(
        user_operation_v6_json, user_operation_v7_json):
    assert hash_user_operation_json(
        6, user_operation_v6_json, ENTRYPOINT_V6, CHAIN_ID
    ) == V6_USER_OPERATION_HASH
    assert hash_user_operation_json(
        7, user_operation_v7_json, ENTRYPOINT_V7, CHAIN_ID
    ) == V7_USER_OPERATION_HASH


def test_hash_user_operation_json_unsupported_version(user_operation_v7_json):
    with pytest.raises(UnsupportedVersionError):
        hash_user_operation_json(
            8, user_operation_v7_json, ENTRYPOINT_V7, CHAIN_ID)


def test_get_operation_hash_of_hashable(user_operation_v6_json):
    hashable_user_operation = UserOperationV6.from_json(
        user_operation_v6_json).to_hashable()
    assert "0x" + get_operation_hash(hashable_user_operation).hex() == \
        V6_OPERATION_HASH


def test_get_operation_hash_unknown_type():
    with pytest.raises(UnsupportedVersionError):
        get_operation_hash({"sender": "0x"})


def test_handler_uses_the_entrypoint_of_each_version(
        user_operation_v6_json, user_operation_v7_json):
    handler = UserOperationHandler(CHAIN_ID)
    assert handler.get_entrypoint(6) == ENTRYPOINT_V6
    assert handler.get_entrypoint("v0.7") == ENTRYPOINT_V7
    assert handler.get_user_operation_hash_json(
        6, user_operation_v6_json) == V6_USER_OPERATION_HASH
    assert handler.get_user_operation_hash(
        UserOperationV7.from_json(user_operation_v7_json)
    ) == V7_USER_OPERATION_HASH


def test_handler_hashes_reduced_structs(
        user_operation_v6_json, user_operation_v7_json):
    handler = UserOperationHandler(CHAIN_ID)
    assert handler.get_user_operation_hash(
        UserOperationV6.from_json(user_operation_v6_json).to_hashable()
    ) == V6_USER_OPERATION_HASH
    assert handler.get_user_operation_hash(
        UserOperationV7.from_json(user_operation_v7_json).to_packed()
    ) == V7_USER_OPERATION_HASH


def test_handler_custom_entrypoint(user_operation_v7_json):
    handler = UserOperationHandler(
        CHAIN_ID, {7: "0x0000000000000000000000000000000000000007"})
    assert handler.get_entrypoint(6) == ENTRYPOINT_V6
    assert handler.get_user_operation_hash_json(
        7, user_operation_v7_json) != V7_USER_OPERATION_HASH


def test_handler_rejects_invalid_configuration():
    with pytest.raises(ParseError):
        UserOperationHandler(-1)
    with pytest.raises(ParseError):
        UserOperationHandler(CHAIN_ID, {6: "0x1234"})
    with pytest.raises(UnsupportedVersionError):
        UserOperationHandler(CHAIN_ID, {8: ENTRYPOINT_V7})


def test_finalize_layout(user_operation_v6_json):
    operation_hash = decode_hex(V6_OPERATION_HASH)
    user_operation_hash = finalize_user_operation_hash(
        operation_hash, ENTRYPOINT_V6, CHAIN_ID)
    assert len(user_operation_hash) == 32
    assert "0x" + user_operation_hash.hex() == V6_USER_OPERATION_HASH


def test_finalize_rejects_invalid_input():
    with pytest.raises(ParseError):
        finalize_user_operation_hash(bytes(31), ENTRYPOINT_V7, CHAIN_ID)
    with pytest.raises(ParseError):
        finalize_user_operation_hash(bytes(32), "0x1234", CHAIN_ID)
    with pytest.raises(ParseError):
        finalize_user_operation_hash(bytes(32), ENTRYPOINT_V7, 2**256)


def test_user_operation_hash_round_trip(user_operation_v7_json):
    user_operation_hash = hash_user_operation_json(
        7, user_operation_v7_json, ENTRYPOINT_V7, CHAIN_ID)
    assert is_user_operation_hash(user_operation_hash)
    assert "0x" + decode_hex(user_operation_hash).hex() == user_operation_hash
    assert not is_user_operation_hash(user_operation_hash[:-1])
