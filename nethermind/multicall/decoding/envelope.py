import logging

from eth_typing import ABIFunction

from nethermind.multicall.exceptions import UnrecognizedEnvelope
from nethermind.multicall.types.decoding import RawCall

from .function_decoders import EVMFunctionDecoder

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("envelope")

_CALL_COMPONENTS = [
    {"internalType": "address", "name": "target", "type": "address"},
    {"internalType": "bytes", "name": "callData", "type": "bytes"},
]

MULTICALL_ENVELOPE_ABI: list[ABIFunction] = [
    {  # Multicall3
        "type": "function",
        "name": "aggregate3",
        "stateMutability": "payable",
        "inputs": [
            {
                "internalType": "struct Multicall3.Call3[]",
                "name": "calls",
                "type": "tuple[]",
                "components": [
                    {"internalType": "address", "name": "target", "type": "address"},
                    {"internalType": "bool", "name": "allowFailure", "type": "bool"},
                    {"internalType": "bytes", "name": "callData", "type": "bytes"},
                ],
            }
        ],
        "outputs": [],
    },
    {  # Multicall & Multicall2
        "type": "function",
        "name": "aggregate",
        "stateMutability": "nonpayable",
        "inputs": [
            {
                "internalType": "struct Multicall2.Call[]",
                "name": "calls",
                "type": "tuple[]",
                "components": _CALL_COMPONENTS,
            }
        ],
        "outputs": [],
    },
    {  # Multicall2
        "type": "function",
        "name": "tryAggregate",
        "stateMutability": "nonpayable",
        "inputs": [
            {"internalType": "bool", "name": "requireSuccess", "type": "bool"},
            {
                "internalType": "struct Multicall2.Call[]",
                "name": "calls",
                "type": "tuple[]",
                "components": _CALL_COMPONENTS,
            },
        ],
        "outputs": [],
    },
    {  # Multicall2
        "type": "function",
        "name": "tryBlockAndAggregate",
        "stateMutability": "nonpayable",
        "inputs": [
            {"internalType": "bool", "name": "requireSuccess", "type": "bool"},
            {
                "internalType": "struct Multicall2.Call[]",
                "name": "calls",
                "type": "tuple[]",
                "components": _CALL_COMPONENTS,
            },
        ],
        "outputs": [],
    },
]
""" Supported multicall envelopes, in probe order """


class EnvelopeDetector:
    """
    Detects which multicall envelope encodes a payload, and extracts the batched calls.  Envelopes are probed
    in the order of ``MULTICALL_ENVELOPE_ABI``, and the first envelope that decodes the payload wins.
    """

    envelope_decoders: list[tuple[EVMFunctionDecoder, int]]
    """ Envelope function decoders, paired with the index of the calls parameter """

    def __init__(self, envelope_abi: list[ABIFunction] | None = None):
        self.envelope_decoders = []
        for abi_function in envelope_abi or MULTICALL_ENVELOPE_ABI:
            calls_index = [param["name"] for param in abi_function["inputs"]].index("calls")
            self.envelope_decoders.append((EVMFunctionDecoder(abi_function), calls_index))

    @property
    def supported_envelopes(self) -> list[str]:
        """Returns the signatures of the supported envelopes, in probe order"""
        return [decoder.function_signature for decoder, _ in self.envelope_decoders]

    def detect(self, payload: bytes) -> list[RawCall]:
        """
        Extracts the ordered list of calls from a multicall payload

        :param payload: Full multicall call data, including the envelope selector
        :return: list of RawCall in encoding order
        :raises UnrecognizedEnvelope: if no supported envelope decodes the payload
        """
        for decoder, calls_index in self.envelope_decoders:
            decoded = decoder.decode(payload)
            if decoded is None:
                logger.debug(f"Payload is not a {decoder.function_signature} envelope")
                continue

            calls = [RawCall(target=call["target"], call_data=call["callData"]) for call in decoded[calls_index]]
            logger.info(f"Decoded {decoder.name} envelope containing {len(calls)} calls")
            return calls

        raise UnrecognizedEnvelope(
            f"Unable to parse multicall data with selector 0x{payload[:4].hex()}.  Supported envelopes: "
            f"{', '.join(self.supported_envelopes)}"
        )
