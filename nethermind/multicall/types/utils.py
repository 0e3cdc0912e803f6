import json
from dataclasses import asdict
from enum import Enum

from nethermind.multicall.types.decoding import DecodedCall


class HexEnabledJsonEncoder(json.JSONEncoder):
    """JSON Encoder that converts bytes to 0x-prefixed hex and enums to their values"""

    def default(self, o):
        if isinstance(o, (bytes, bytearray)):
            return "0x" + o.hex()
        if isinstance(o, Enum):
            return o.value
        return json.JSONEncoder.default(self, o)


def decoded_call_to_dict(decoded_call: DecodedCall) -> dict:
    """Converts a DecodedCall into a dict, including the selector"""
    call_dict = asdict(decoded_call)
    call_dict["selector"] = decoded_call.selector
    return call_dict


def decoded_calls_to_json(decoded_calls: DecodedCall | list[DecodedCall], indent: int | None = 2) -> str:
    """Serializes a decoded call, or a list of decoded calls to JSON"""
    if isinstance(decoded_calls, DecodedCall):
        return json.dumps(decoded_call_to_dict(decoded_calls), cls=HexEnabledJsonEncoder, indent=indent)

    return json.dumps(
        [decoded_call_to_dict(call) for call in decoded_calls],
        cls=HexEnabledJsonEncoder,
        indent=indent,
    )
