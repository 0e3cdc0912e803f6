import logging
from typing import Sequence

from eth_utils import is_address

from nethermind.multicall.exceptions import DecodingError
from nethermind.multicall.gateways.etherscan import EtherscanClient
from nethermind.multicall.gateways.four_byte import SignatureDirectory
from nethermind.multicall.types.decoding import ContractMetadata, DecodedCall, RawCall
from nethermind.multicall.types.networks import SupportedNetwork
from nethermind.multicall.utils import to_bytes

from .base import InterfaceRegistry, SignatureLookup
from .envelope import EnvelopeDetector
from .resolver import CallResolver

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("decoding")


class MulticallDecoder:
    """

    Decoding session for multicall payloads.  Extracts the calls batched inside a multicall envelope, then resolves
    each call against the Etherscan contract registry, falling back to the 4byte signature directory.

    Lookups are cached by the gateways for the lifetime of the decoder.  Calls are resolved sequentially so that
    requests respect the Etherscan rate limit.

    """

    registry: InterfaceRegistry
    """ Contract interface registry.  Defaults to an EtherscanClient """

    directory: SignatureLookup
    """ Selector to signature directory.  Defaults to the 4byte directory """

    envelope_detector: EnvelopeDetector
    resolver: CallResolver

    def __init__(
        self,
        etherscan_api_key: str | None = None,
        network: SupportedNetwork = SupportedNetwork.mainnet,
        registry: InterfaceRegistry | None = None,
        directory: SignatureLookup | None = None,
    ):
        self.registry = registry or EtherscanClient(api_key=etherscan_api_key, network=network)
        self.directory = directory or SignatureDirectory()
        self.envelope_detector = EnvelopeDetector()
        self.resolver = CallResolver(self.registry, self.directory)

    def parse_multicall_data(self, payload: str | bytes) -> list[RawCall]:
        """
        Parse multicall data into individual calls

        :param payload: multicall call data as bytes or hex string
        :raises UnrecognizedEnvelope: if the payload is not a supported multicall envelope
        """
        return self.envelope_detector.detect(to_bytes(payload))

    def decode_envelope(self, payload: str | bytes) -> list[DecodedCall]:
        """
        Decode all calls in multicall data.  Calls are resolved in the order they are encoded in the envelope

        :param payload: multicall call data as bytes or hex string
        :return: list of DecodedCall, one for each call in the envelope
        """
        raw_calls = self.parse_multicall_data(payload)

        decoded_calls = []
        for index, raw_call in enumerate(raw_calls):
            logger.debug(f"Resolving call {index + 1}/{len(raw_calls)} to {raw_call.target}")
            decoded_calls.append(self.resolver.resolve(raw_call.target, raw_call.call_data))

        return decoded_calls

    def decode_one(self, target: str, call_data: str | bytes) -> DecodedCall:
        """
        Decode a single call, without parsing a multicall envelope

        :param target: Target contract address
        :param call_data: call data as bytes or hex string
        """
        if not is_address(target):
            raise DecodingError(f"Invalid target address: {target}")

        return self.resolver.resolve(target, to_bytes(call_data))

    def contract_metadata(self, targets: Sequence[str]) -> dict[str, ContractMetadata]:
        """
        Fetches contract metadata for each unique target.  Only available when the registry is an EtherscanClient.

        :param targets: list of contract addresses
        :return: mapping from lowercase address to ContractMetadata
        """
        if not isinstance(self.registry, EtherscanClient):
            return {}

        metadata = {}
        for target in dict.fromkeys(target.lower() for target in targets):
            metadata[target] = self.registry.get_contract_metadata(target)
        return metadata

    def clear_cache(self):
        """Clears the registry and directory caches"""
        self.registry.clear_cache()
        self.directory.clear_cache()
