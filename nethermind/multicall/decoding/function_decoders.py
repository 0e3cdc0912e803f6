import logging
from typing import Any

from eth_typing import ABIComponent, ABIFunction
from eth_utils import function_signature_to_4byte_selector
from eth_utils.abi import get_abi_input_types

from nethermind.multicall.exceptions import DecodingError

from .utils import (
    abi_to_signature,
    decode_evm_abi_from_types,
    format_abi_value,
    signature_to_name,
    split_signature_types,
    type_str_to_abi_param,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("decoding")


class EVMFunctionDecoder:
    """
    Represents a single EVM function selector.  Parses input types to efficiently decode
    call data with its selector.  Can be built from an ABI entry, or from a text signature returned
    by a signature directory.
    """

    name: str
    function_signature: str
    signature: bytes

    _input_types: list[str]
    _input_params: list[ABIComponent]

    def __init__(self, abi_function: ABIFunction):
        self.name = abi_function["name"]

        self._input_types = list(get_abi_input_types(abi_function))
        self._input_params = list(abi_function.get("inputs", []))

        self.function_signature = abi_to_signature(abi_function)
        self.signature = function_signature_to_4byte_selector(self.function_signature)

    @classmethod
    def from_signature(cls, function_signature: str) -> "EVMFunctionDecoder":
        """
        Builds a decoder from a text signature such as ``transfer(address,uint256)``.  Parameters are unnamed, so
        tuples are decoded as lists.

        :raises DecodingError: if the signature does not contain valid ABI types
        """
        input_types = split_signature_types(function_signature.replace(" ", ""))
        if input_types is None:
            raise DecodingError(f"Cannot parse function signature {function_signature}")

        return cls(
            {
                "type": "function",
                "name": signature_to_name(function_signature).strip(),
                "inputs": [type_str_to_abi_param(typ) for typ in input_types],
                "outputs": [],
            }
        )

    @property
    def selector(self) -> str:
        """0x-prefixed hex selector"""
        return "0x" + self.signature.hex()

    @property
    def input_types(self) -> list[str]:
        """Declared input types, with tuples collapsed into parenthesized lists"""
        return list(self._input_types)

    def decode(self, call_data: bytes) -> list[Any] | None:
        """
        Decodes call data against the input types of this function.  Returns None if the selector does not match,
        or if the data is not structurally consistent with the input types.

        :param call_data: Full call data, including the 4 byte selector
        :return: list of formatted argument values
        """
        if call_data[:4] != self.signature:
            logger.debug(f"Selector 0x{call_data[:4].hex()} does not match {self.function_signature}")
            return None

        decoded_input = decode_evm_abi_from_types(self._input_types, call_data[4:])
        if decoded_input is None:
            logger.debug(f"Error Decoding {self.function_signature} For Input 0x{call_data.hex()}")
            return None

        return [format_abi_value(value, param) for value, param in zip(decoded_input, self._input_params, strict=True)]

    def id_str(self, full_signature: bool = True) -> str:
        """
        Returns ID string for function.  If full_signature is True, returns the function name & parameter types.
        If full_signature is false, returns function name
        """
        if full_signature:
            return self.function_signature
        return self.name
