import pytest

from nethermind.multicall.decoding.resolver import CallResolver
from nethermind.multicall.exceptions import MalformedCallData
from nethermind.multicall.types.decoding import DecodedCall, ResolutionConfidence
from tests.utils import encode_call

VAULT = "0x5f4eC3Df9cbd43714FE2740f5E3616155c5b8419"
RECEIVER = "0xbEbc44782C7dB0a1A60Cb6fe97d0b483032FF1C7"


def _transfer_call_data() -> bytes:
    return encode_call("transfer(address,uint256)", ["address", "uint256"], [RECEIVER, 5 * 10**18])


def test_resolve_from_registry(static_registry, static_directory, vault_interface):
    registry = static_registry({VAULT: vault_interface})
    directory = static_directory()
    call_data = encode_call("f(uint256,address)", ["uint256", "address"], [42, RECEIVER])

    decoded = CallResolver(registry, directory).resolve(VAULT, call_data)

    assert decoded.function_name == "f"
    assert decoded.function_signature == "f(uint256,address)"
    assert decoded.args == [42, RECEIVER]
    assert decoded.raw_call_data == call_data
    assert decoded.confidence == ResolutionConfidence.verified

    # Registry results are authoritative, and the directory is never queried
    assert directory.requests == []


def test_registry_signature_uses_declared_types(static_registry, static_directory, vault_interface):
    call_data = encode_call(
        "depositMany((address,uint256)[],bytes)", ["(address,uint256)[]", "bytes"], [[(RECEIVER, 1)], b""]
    )

    decoded = CallResolver(static_registry({VAULT: vault_interface}), static_directory()).resolve(VAULT, call_data)

    assert decoded.function_signature == "depositMany((address,uint256)[],bytes)"
    assert decoded.args == [[{"token": RECEIVER, "amount": 1}], b""]


def test_registry_miss_falls_back_to_directory(static_registry, static_directory, vault_interface):
    # Vault ABI is known, but it does not define transfer()
    registry = static_registry({VAULT: vault_interface})
    directory = static_directory({"0xa9059cbb": ["transfer(address,uint256)"]})

    decoded = CallResolver(registry, directory).resolve(VAULT, _transfer_call_data())

    assert decoded.function_name == "transfer"
    assert decoded.function_signature == "transfer(address,uint256)"
    assert decoded.args == [RECEIVER, 5 * 10**18]
    assert directory.requests == ["0xa9059cbb"]


def test_resolve_from_directory_when_registry_unknown(static_registry, static_directory):
    directory = static_directory({"0xa9059cbb": ["transfer(address,uint256)"]})

    decoded = CallResolver(static_registry(), directory).resolve(VAULT, _transfer_call_data())

    assert decoded.function_signature == "transfer(address,uint256)"
    assert len(decoded.args) == 2
    assert decoded.confidence == ResolutionConfidence.verified


def test_directory_candidates_are_validated_in_order(static_registry, static_directory):
    directory = static_directory(
        {
            "0xa9059cbb": [
                "transfer(bytes32,bytes32,bytes32)",  # Does not hash to the selector
                "unparseable(uint7)",
                "transfer(address,uint256)",
                "transfer(address,uint256,bool)",
            ]
        }
    )

    decoded = CallResolver(static_registry(), directory).resolve(VAULT, _transfer_call_data())

    assert decoded.function_signature == "transfer(address,uint256)"
    assert decoded.args == [RECEIVER, 5 * 10**18]


def test_unknown_selector(static_registry, static_directory):
    call_data = bytes.fromhex("deadbeef") + b"\x00" * 31 + b"\x01"

    decoded = CallResolver(static_registry(), static_directory()).resolve(VAULT, call_data)

    assert decoded.function_name == "unknown"
    assert decoded.function_signature == "0xdeadbeef"
    assert decoded.args == [call_data[4:]]
    assert decoded.confidence == ResolutionConfidence.unknown


def test_first_candidate_used_when_no_candidates_decode(static_registry, static_directory):
    directory = static_directory({"0xa9059cbb": ["transfer(address,uint256)", "transfer(bytes32,bytes32,bytes32)"]})
    call_data = _transfer_call_data()[:20]

    decoded = CallResolver(static_registry(), directory).resolve(VAULT, call_data)

    assert decoded.function_name == "transfer"
    assert decoded.function_signature == "transfer(address,uint256)"
    assert decoded.args == [call_data[4:]]
    assert decoded.confidence == ResolutionConfidence.guessed


def test_selector_only_call_data(static_registry, static_directory):
    decoded = CallResolver(static_registry(), static_directory({"0x313ce567": ["decimals()"]})).resolve(
        VAULT, bytes.fromhex("313ce567")
    )

    assert decoded.function_signature == "decimals()"
    assert decoded.args == []


@pytest.mark.parametrize("call_data", [b"", b"\xa9", b"\xa9\x05\x9c"])
def test_short_call_data_is_malformed(static_registry, static_directory, call_data):
    registry, directory = static_registry(), static_directory()

    with pytest.raises(MalformedCallData):
        CallResolver(registry, directory).resolve(VAULT, call_data)

    assert registry.requests == []
    assert directory.requests == []


def test_target_is_checksummed(static_registry, static_directory):
    decoded = CallResolver(static_registry(), static_directory()).resolve(VAULT.lower(), bytes.fromhex("deadbeef"))

    assert decoded.target == VAULT


def test_decoded_call_requires_confidence():
    with pytest.raises(TypeError):
        DecodedCall(  # pylint: disable=no-value-for-parameter
            target=VAULT,
            function_name="transfer",
            function_signature="transfer(address,uint256)",
            args=[],
            raw_call_data=_transfer_call_data(),
        )
