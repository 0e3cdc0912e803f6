import logging
import traceback
from typing import Any

from eth_abi import decode as eth_abi_decode
from eth_abi.exceptions import (
    ABITypeError,
    InsufficientDataBytes,
    NonEmptyPaddingBytes,
    ParseError,
)
from eth_abi.exceptions import DecodingError as EthAbiDecodingError
from eth_abi.grammar import ABIType, TupleType, parse
from eth_typing import ABI, ABIComponent, ABIFunction
from eth_utils import to_checksum_address

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("decoding")


def abi_to_signature(abi: ABIFunction) -> str:
    """
    Converts ABI to signature.

    >>> from nethermind.multicall.decoding.utils import abi_to_signature
    >>> abi_to_signature(
    ...     {
    ...         "name": "transferFrom",
    ...         "type": "function",
    ...         "inputs": [{"name": "from", "type": "address"}, {"name": "amount", "type": "uint256"}],
    ...     }
    ... )
    'transferFrom(address,uint256)'

    """
    collapsed = [collapse_if_tuple(abi_input) for abi_input in abi.get("inputs", [])]
    return f"{abi['name']}({','.join(collapsed)})"


def collapse_if_tuple(abi_params: ABIComponent) -> str:
    """
    Converts a tuple from a dict to a parenthesized list of its types.

    >>> from nethermind.multicall.decoding.utils import collapse_if_tuple
    >>> collapse_if_tuple(
    ...     {
    ...         'components': [
    ...             {'name': 'anAddress', 'type': 'address'},
    ...             {'name': 'anInt', 'type': 'uint256'},
    ...             {'name': 'someBytes', 'type': 'bytes'},
    ...         ],
    ...         'type': 'tuple',
    ...     }
    ... )
    '(address,uint256,bytes)'
    """

    typ = abi_params["type"]
    if not isinstance(typ, str):
        raise TypeError(f"The 'type' must be a string, but got {typ} of type {type(typ)}")

    if not typ.startswith("tuple"):
        return typ

    delimited = ",".join(collapse_if_tuple(c) for c in abi_params["components"])  # type: ignore
    # Whatever comes after "tuple" is the array dims.  The ABI spec states that
    # this will have the form "", "[]", or "[k]".
    array_dim = typ[5:]
    collapsed = f"({delimited}){array_dim}"

    return collapsed


def filter_functions(contract_abi: ABI) -> list[ABIFunction]:
    """Filters out all non-function ABIs"""
    return [abi for abi in contract_abi if abi.get("type") == "function"]  # type: ignore


def signature_to_name(function_sig: str) -> str:
    """
    Removes types from function signature

    >>> from nethermind.multicall.decoding.utils import signature_to_name
    >>> signature_to_name("transferFrom(address,uint256)")
    'transferFrom'
    >>> signature_to_name("0xa9059cbb")
    '0xa9059cbb'
    """
    index = function_sig.find("(")
    if index != -1:
        return function_sig[:index]
    return function_sig


def split_signature_types(function_sig: str) -> list[str] | None:
    """
    Splits a text signature into its top level parameter types.  Nested tuples are kept intact.  Returns None
    if the signature cannot be parsed into valid ABI types.

    >>> from nethermind.multicall.decoding.utils import split_signature_types
    >>> split_signature_types("swap((address,uint256)[],bytes)")
    ['(address,uint256)[]', 'bytes']
    >>> split_signature_types("claim()")
    []
    >>> split_signature_types("broken(uint7)") is None
    True
    """
    open_index, close_index = function_sig.find("("), function_sig.rfind(")")
    if open_index < 1 or close_index != len(function_sig) - 1:
        return None

    params = function_sig[open_index + 1 : close_index].replace(" ", "")
    if params == "":
        return []

    try:
        parsed = parse(f"({params})")
        parsed.validate()
    except (ParseError, ABITypeError):
        logger.debug(f"Could not parse ABI types from signature {function_sig}")
        return None

    if not isinstance(parsed, TupleType):
        return None

    return [component.to_type_str() for component in parsed.components]


def type_str_to_abi_param(type_str: str, name: str = "") -> ABIComponent:
    """
    Converts an ABI type string into an unnamed ABI parameter dict, expanding tuples into components

    >>> from nethermind.multicall.decoding.utils import type_str_to_abi_param
    >>> type_str_to_abi_param("(address,bool)[]")
    {'name': '', 'type': 'tuple[]', 'components': [{'name': '', 'type': 'address'}, {'name': '', 'type': 'bool'}]}
    """
    return _abi_type_to_param(parse(type_str), name)


def _abi_type_to_param(abi_type: ABIType, name: str = "") -> ABIComponent:
    if isinstance(abi_type, TupleType):
        array_dims = "".join(f"[{dims[0] if dims else ''}]" for dims in abi_type.arrlist or [])
        return {
            "name": name,
            "type": f"tuple{array_dims}",
            "components": [_abi_type_to_param(component) for component in abi_type.components],
        }
    return {"name": name, "type": abi_type.to_type_str()}


def format_abi_value(value: Any, abi_param: ABIComponent) -> Any:
    """
    Converts a raw value returned by eth_abi into its presentation form.  Addresses are checksummed, arrays become
    lists, and tuples become dicts when every component is named, otherwise lists.

    :param value: decoded value
    :param abi_param: ABI parameter dict describing the value
    """
    typ = abi_param["type"]

    if typ.endswith("]"):
        item_param = {**abi_param, "type": typ[: typ.rindex("[")]}
        return [format_abi_value(item, item_param) for item in value]  # type: ignore[arg-type]

    if typ == "tuple":
        components = abi_param.get("components", [])
        formatted = [format_abi_value(v, c) for v, c in zip(value, components, strict=True)]
        names = [c.get("name") for c in components]
        if names and all(names):
            return dict(zip(names, formatted, strict=True))
        return formatted

    if typ == "address":
        return to_checksum_address(value)

    return value


def decode_evm_abi_from_types(types: list[str], data: bytes | bytearray) -> tuple[Any, ...] | None:
    """
    Decodes ABI data from types and data bytes.  Properly Handles various decoding errors by logging and
    returning none.  Has no side effects, and is used to probe whether a set of types explains a byte string.

    :param types:
    :param data:
    :return:
    """
    try:
        return eth_abi_decode(types, data)
    except InsufficientDataBytes:
        logger.debug(f"Insufficient data bytes while decoding {data.hex()} for types {types}")
        return None
    except NonEmptyPaddingBytes:
        logger.debug(f"Non-empty padding bytes while decoding {data.hex()} for types {types}")
        return None
    except EthAbiDecodingError as e:
        logger.debug(f"Decoding error while decoding {data.hex()} for types {types}: {e}")
        return None
    except OverflowError:
        logger.debug(f"Overflow error while decoding {data.hex()} for types {types}")
        return None
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error(
            f"Unknown error while decoding {data.hex()} for types {types}: "
            f"{traceback.format_exception(type(e), e, e.__traceback__)}"
        )
        return None
