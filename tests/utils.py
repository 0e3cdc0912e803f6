import json
from typing import Any
from unittest.mock import MagicMock

import requests
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector

MULTICALL_ENVELOPES = {
    "aggregate3": "aggregate3((address,bool,bytes)[])",
    "aggregate": "aggregate((address,bytes)[])",
    "tryAggregate": "tryAggregate(bool,(address,bytes)[])",
    "tryBlockAndAggregate": "tryBlockAndAggregate(bool,(address,bytes)[])",
}


def encode_call(function_signature: str, types: list[str], args: list[Any]) -> bytes:
    """Encodes call data with the selector for function_signature"""
    return function_signature_to_4byte_selector(function_signature) + encode(types, args)


def encode_multicall(envelope: str, calls: list[tuple[str, bytes]]) -> bytes:
    """Encodes (target, call_data) pairs inside one of the supported multicall envelopes"""
    signature = MULTICALL_ENVELOPES[envelope]

    match envelope:
        case "aggregate3":
            return encode_call(
                signature, ["(address,bool,bytes)[]"], [[(target, True, data) for target, data in calls]]
            )
        case "aggregate":
            return encode_call(signature, ["(address,bytes)[]"], [list(calls)])
        case _:
            return encode_call(signature, ["bool", "(address,bytes)[]"], [True, list(calls)])


def mock_response(json_data: Any, status_code: int = 200) -> MagicMock:
    """Builds a mock requests.Response"""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = json.dumps(json_data)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


def etherscan_abi_response(abi_json: str) -> dict[str, Any]:
    return {"status": "1", "message": "OK", "result": abi_json}


def etherscan_unverified_response() -> dict[str, Any]:
    return {"status": "0", "message": "NOTOK", "result": "Contract source code not verified"}


def four_byte_response(*text_signatures: str) -> dict[str, Any]:
    return {
        "count": len(text_signatures),
        "next": None,
        "previous": None,
        "results": [
            {"id": index, "text_signature": text_signature, "hex_signature": "", "bytes_signature": ""}
            for index, text_signature in enumerate(text_signatures)
        ],
    }
