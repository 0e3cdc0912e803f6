import logging
from typing import Callable

from eth_utils import to_checksum_address

from nethermind.multicall.exceptions import DecodingError, MalformedCallData
from nethermind.multicall.types.decoding import DecodedCall, ResolutionConfidence

from .base import InterfaceRegistry, SignatureLookup
from .function_decoders import EVMFunctionDecoder

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("resolver")

UNKNOWN_FUNCTION = "unknown"

ResolutionStrategy = Callable[[str, bytes], DecodedCall | None]


class CallResolver:
    """
    Resolves the function and arguments of a single call.  Resolution strategies are tried in order, and the
    first strategy that returns a result wins:

        1. Verified ABI from the interface registry
        2. Candidate signatures from the signature directory, validated by decoding the call data

    If neither strategy resolves the call, the selector is returned with the undecoded call data as the only
    argument.
    """

    registry: InterfaceRegistry
    directory: SignatureLookup
    strategies: list[ResolutionStrategy]

    def __init__(self, registry: InterfaceRegistry, directory: SignatureLookup):
        self.registry = registry
        self.directory = directory
        self.strategies = [self._resolve_from_registry, self._resolve_from_directory]

    def resolve(self, target: str, call_data: bytes) -> DecodedCall:
        """
        Decodes a single call.  Degrades to the raw selector instead of failing when the function cannot be resolved.

        :param target: Address the call is sent to
        :param call_data: Call data, including the 4 byte selector
        :raises MalformedCallData: if the call data is shorter than a selector
        """
        if len(call_data) < 4:
            raise MalformedCallData(
                f"Call data 0x{call_data.hex()} to {target} is shorter than a 4 byte function selector"
            )

        checksum_target = to_checksum_address(target)
        for strategy in self.strategies:
            decoded_call = strategy(checksum_target, call_data)
            if decoded_call is not None:
                return decoded_call

        logger.info(f"No signatures found for selector 0x{call_data[:4].hex()}")
        return DecodedCall(
            target=checksum_target,
            function_name=UNKNOWN_FUNCTION,
            function_signature="0x" + call_data[:4].hex(),
            args=[call_data[4:]],
            raw_call_data=call_data,
            confidence=ResolutionConfidence.unknown,
        )

    def _resolve_from_registry(self, target: str, call_data: bytes) -> DecodedCall | None:
        contract_interface = self.registry.get_interface(target)
        if contract_interface is None:
            return None

        decoded = contract_interface.decode_function(call_data)
        if decoded is None:
            logger.debug(f"ABI for {target} could not decode selector 0x{call_data[:4].hex()}")
            return None

        function_decoder, args = decoded
        return DecodedCall(
            target=target,
            function_name=function_decoder.name,
            function_signature=function_decoder.function_signature,
            args=args,
            raw_call_data=call_data,
            confidence=ResolutionConfidence.verified,
        )

    def _resolve_from_directory(self, target: str, call_data: bytes) -> DecodedCall | None:
        selector = "0x" + call_data[:4].hex()
        candidates = self.directory.lookup(selector)
        if not candidates:
            return None

        for candidate in candidates:
            try:
                function_decoder = EVMFunctionDecoder.from_signature(candidate.signature)
            except DecodingError:
                logger.debug(f"Skipping unparseable signature {candidate.signature} for selector {selector}")
                continue

            args = function_decoder.decode(call_data)
            if args is None:
                continue

            return DecodedCall(
                target=target,
                function_name=candidate.name,
                function_signature=candidate.signature,
                args=args,
                raw_call_data=call_data,
                confidence=ResolutionConfidence.verified,
            )

        logger.warning(
            f"None of the {len(candidates)} signatures for selector {selector} decode the call data.  "
            f"Falling back to {candidates[0].signature}"
        )
        return DecodedCall(
            target=target,
            function_name=candidates[0].name,
            function_signature=candidates[0].signature,
            args=[call_data[4:]],
            raw_call_data=call_data,
            confidence=ResolutionConfidence.guessed,
        )
