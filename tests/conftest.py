import pytest

V6_CALL_DATA = (
    "0x0000189a0000000000000000000000003079b249dfde4692d7844aa261f8cf7d"
    "927a0da500000000000000000000000000000000000000000000000000000000"
    "0000000100000000000000000000000000000000000000000000000000000000"
    "0000006000000000000000000000000000000000000000000000000000000000"
    "00000000"
)

V7_CALL_DATA = (
    "0xe9ae5c5300000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000004000000000000000000000000000000000000000000000000000000000"
    "00000078ba45f9ef3e4fb871113f68217604af3626de8c440000000000000000"
    "000000000000000000000000000000000000000000000000a9059cbb00000000"
    "00000000000000003c44cdddb6a900fa2b585dd299e03d12fa4293bc00000000"
    "00000000000000000000000000000000000000000de0b6b3a764000000000000"
    "00000000"
)

EMPTY_DIGEST = bytes.fromhex(
    "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470")

V6_OPERATION_HASH = (
    "0xb2b5bd9fe36a9a6dbb3e2388a256547f34f6112c514c3cb71953c5353b8b12cf")
V6_USER_OPERATION_HASH = (
    "0x3fce42502162ca5e6d32b0ee3cad70ce90a97762d626ba94e3f158ac6651925e")

V7_OPERATION_HASH = (
    "0x28476f1c7f63b00c5663d2831e4a3745e3a5a31cce1f0576983bd44f83bc8d9a")
V7_USER_OPERATION_HASH = (
    "0xe0393a3bd534989a3f7cc522c6bb3be3875e3cafb56e02f25eba6f25fc658158")

V7_FACTORY_PAYMASTER_INIT_CODE_HASH = (
    "0x9ab7f90bcf54ed53403408fcfad3fcbcbcc13b8eada2ef5e79bd4084816a3f1b")
V7_FACTORY_PAYMASTER_PAYMASTER_AND_DATA_HASH = (
    "0xc172b68afd9a618c0bfb6c1b620dc3ccb7e4ba599b58935b4f791e692f2f9a72")
V7_FACTORY_PAYMASTER_OPERATION_HASH = (
    "0xed40b177e01170730f2291d3db1cfbf0385165878b62e9dd2f410a8758cd4d7d")
V7_FACTORY_PAYMASTER_USER_OPERATION_HASH = (
    "0x201e75da9f3df8af78110c2f0de0316c658970e9f4477ffec27ad8c3527ba0db")

ENTRYPOINT_V6 = "0x5ff137d4b0fdcd49dca30c7cf57e578a026d2789"
ENTRYPOINT_V7 = "0x0000000071727De22E5E9d8BAf0edAc6f37da032"
CHAIN_ID = 31337


@pytest.fixture
def user_operation_v6_json():
    return {
        "sender": "0xe6dBb5C8696d2E0f90B875cbb6ef26E3bBa575AC",
        "nonce": hex(1617),
        "initCode": "0x",
        "callData": V6_CALL_DATA,
        "callGasLimit": hex(14177),
        "verificationGasLimit": hex(54701),
        "preVerificationGas": hex(59393),
        "maxFeePerGas": hex(18000000000),
        "maxPriorityFeePerGas": hex(17999999985),
        "paymasterAndData": "0x",
        "signature": "0x",
    }


@pytest.fixture
def user_operation_v7_json():
    return {
        "sender": "0xc10035C6c74e8Af054897Ff6092Dc3eC49e2eFc6",
        "nonce": (
            "1083597386547022464258429625247069249537518245239347114964906802352750592"
        ),
        "callData": V7_CALL_DATA,
        "callGasLimit": "1500000",
        "verificationGasLimit": "1500000",
        "preVerificationGas": "2000000",
        "maxFeePerGas": "20000000000",
        "maxPriorityFeePerGas": "10000000000",
    }


@pytest.fixture
def user_operation_v7_factory_paymaster_json(user_operation_v7_json):
    return user_operation_v7_json | {
        "factory": "0x9406cc6185a346906296840746125a0e44976454",
        "factoryData": (
            "0x5fbfb9cf000000000000000000000000"
            "c10035c6c74e8af054897ff6092dc3ec49e2efc6"
        ),
        "callGasLimit": hex(100000),
        "verificationGasLimit": hex(200000),
        "paymaster": "0x0000000000325602a77416a16136fdafd04b299f",
        "paymasterVerificationGasLimit": hex(50000),
        "paymasterPostOpGasLimit": hex(30000),
        "paymasterData": "0xdeadbeef",
    }
