from dataclasses import dataclass
from enum import Enum
from typing import Any

from eth_typing import ChecksumAddress

# pylint: disable=invalid-name


class ResolutionConfidence(Enum):
    """
    How a DecodedCall was resolved.  ``verified`` results were confirmed by decoding the call data against the
    returned signature.  ``guessed`` results use the first signature returned by the signature directory even though
    none of the candidates could decode the call data.  ``unknown`` results have no known signature.
    """

    verified = "verified"
    guessed = "guessed"
    unknown = "unknown"


@dataclass(frozen=True, slots=True)
class RawCall:
    """Single call extracted from a multicall envelope"""

    target: ChecksumAddress
    call_data: bytes


@dataclass(frozen=True, slots=True)
class SignatureCandidate:
    """Text signature returned by the signature directory for a 4 byte selector"""

    name: str
    signature: str


@dataclass
class DecodedCall:
    """Call Decoding Result"""

    target: ChecksumAddress
    function_name: str

    function_signature: str
    """ Canonical signature if resolved, otherwise the 0x-prefixed selector """

    args: list[Any]
    raw_call_data: bytes

    confidence: ResolutionConfidence

    @property
    def selector(self) -> str:
        """Returns the 0x-prefixed lowercase 4 byte selector"""
        return "0x" + self.raw_call_data[:4].hex()


@dataclass
class ContractMetadata:
    """Presentation data for a contract, sourced from Etherscan"""

    address: str
    display_name: str
    verified: bool
    is_proxy: bool = False
    implementation_address: str | None = None
    implementation_display_name: str | None = None
