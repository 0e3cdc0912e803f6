import json

import pytest

from nethermind.multicall.decoding.contract_interface import ContractInterface
from nethermind.multicall.types.decoding import SignatureCandidate
from tests.resources.ABI import ERC20_ABI_JSON, TEST_VAULT_ABI_JSON


class StaticRegistry:
    """In-memory InterfaceRegistry that records every lookup"""

    def __init__(self, interfaces: dict[str, ContractInterface] | None = None):
        self.interfaces = {address.lower(): abi for address, abi in (interfaces or {}).items()}
        self.requests: list[str] = []

    def get_interface(self, address: str) -> ContractInterface | None:
        self.requests.append(address)
        return self.interfaces.get(address.lower())

    def clear_cache(self):
        self.requests.clear()


class StaticDirectory:
    """In-memory SignatureLookup that records every lookup"""

    def __init__(self, signatures: dict[str, list[str]] | None = None):
        self.signatures = signatures or {}
        self.requests: list[str] = []

    def lookup(self, selector: str) -> list[SignatureCandidate]:
        self.requests.append(selector)
        return [
            SignatureCandidate(name=signature.split("(")[0], signature=signature)
            for signature in self.signatures.get(selector, [])
        ]

    def clear_cache(self):
        self.requests.clear()


@pytest.fixture(name="erc20_interface")
def fixture_erc20_interface() -> ContractInterface:
    return ContractInterface("ERC20", json.loads(ERC20_ABI_JSON))


@pytest.fixture(name="vault_interface")
def fixture_vault_interface() -> ContractInterface:
    return ContractInterface("TestVault", json.loads(TEST_VAULT_ABI_JSON))


@pytest.fixture(name="static_registry")
def fixture_static_registry():
    return StaticRegistry


@pytest.fixture(name="static_directory")
def fixture_static_directory():
    return StaticDirectory
