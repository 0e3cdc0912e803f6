import json
import logging
from typing import Any

from eth_typing import ABI, ABIFunction

from nethermind.multicall.exceptions import DecodingError

from .function_decoders import EVMFunctionDecoder
from .utils import filter_functions

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("decoding")


class ContractInterface:
    """
    Function interface of a deployed contract, built from its verified ABI.  Maps 4 byte selectors to
    function decoders.
    """

    abi_name: str
    """ Name of the ABI, typically the contract address it was fetched for """

    function_decoders: dict[bytes, EVMFunctionDecoder]
    """ Mapping from 4byte selectors to decoders """

    def __init__(self, abi_name: str, abi_data: ABI):
        self.abi_name = abi_name

        abi_functions: list[ABIFunction] = filter_functions(abi_data)
        self.function_decoders = {}
        for abi_function in abi_functions:
            decoder = EVMFunctionDecoder(abi_function)
            self.function_decoders[decoder.signature] = decoder

        logger.debug(f"Loaded {len(self.function_decoders)} functions for ABI {abi_name}")

    @classmethod
    def from_json(cls, abi_name: str, abi_json: str | list[dict[str, Any]]) -> "ContractInterface":
        """
        Parses an ABI from a JSON string or a list of ABI entries

        :raises DecodingError: if the ABI is not valid JSON, or is not a list of ABI entries
        """
        if isinstance(abi_json, str):
            try:
                abi_json = json.loads(abi_json)
            except json.JSONDecodeError as e:
                raise DecodingError(f"Invalid ABI JSON for {abi_name}") from e

        if not isinstance(abi_json, list):
            raise DecodingError(f"ABI for {abi_name} must be a list of ABI entries")

        if not all(isinstance(entry, dict) for entry in abi_json):
            raise DecodingError(f"ABI for {abi_name} contains entries that are not JSON objects")

        try:
            return cls(abi_name, abi_json)  # type: ignore[arg-type]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DecodingError(f"Malformed ABI entry for {abi_name}: {e}") from e

    @property
    def functions(self) -> dict[str, list[str]]:
        """Mapping from function names to ordered parameter types.  Overloaded names keep the last definition"""
        return {decoder.name: decoder.input_types for decoder in self.function_decoders.values()}

    def get_function(self, selector: bytes) -> EVMFunctionDecoder | None:
        """Returns the decoder for a 4 byte selector.  If the function does not exist, returns None"""
        return self.function_decoders.get(selector)

    def get_all_decoded_functions(self, full_signature: bool = True) -> list[str]:
        """Returns a list of all function signatures"""
        return [decoder.id_str(full_signature) for decoder in self.function_decoders.values()]

    def decode_function(self, call_data: bytes) -> tuple[EVMFunctionDecoder, list[Any]] | None:
        """
        Decodes function from input calldata bytes

        :param call_data: Full call data, including the selector
        :return: (function_decoder, decoded_args), or None if the function is missing or fails to decode
        """
        function_decoder = self.function_decoders.get(call_data[:4])
        if function_decoder is None:
            logger.debug(f"Function with selector 0x{call_data[:4].hex()} not found in ABI {self.abi_name}")
            return None

        decoded_args = function_decoder.decode(call_data)
        if decoded_args is None:
            return None

        return function_decoder, decoded_args
