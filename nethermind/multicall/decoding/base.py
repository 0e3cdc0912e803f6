from typing import Protocol

from nethermind.multicall.types.decoding import SignatureCandidate

from .contract_interface import ContractInterface


class InterfaceRegistry(Protocol):
    """Lookup service mapping a deployed contract address to its verified interface"""

    def get_interface(self, address: str) -> ContractInterface | None:
        """Return the interface for address, or None if it is unknown.  Must never raise"""
        raise NotImplementedError()

    def clear_cache(self) -> None:
        """Drop all cached lookups"""
        raise NotImplementedError()


class SignatureLookup(Protocol):
    """Lookup service mapping a 4 byte selector to candidate text signatures"""

    def lookup(self, selector: str) -> list[SignatureCandidate]:
        """Return candidate signatures in the order received.  Returns an empty list on failure"""
        raise NotImplementedError()

    def clear_cache(self) -> None:
        """Drop all cached lookups"""
        raise NotImplementedError()
