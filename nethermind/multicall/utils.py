import re

from nethermind.multicall.exceptions import DecodingError

_SELECTOR_REGEX = re.compile(r"^0x[0-9a-f]{8}$")


def to_bytes(data: str | bytes | bytearray) -> bytes:
    """
    Converts hex strings to bytes.  Accepts strings with or without a 0x prefix, and passes bytes through unchanged

    >>> from nethermind.multicall.utils import to_bytes
    >>> to_bytes("0xa9059cbb")
    b'\\xa9\\x05\\x9c\\xbb'
    >>> to_bytes("A9059CBB")
    b'\\xa9\\x05\\x9c\\xbb'

    :param data: hex string or bytes
    :return: bytes
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)

    hex_str = data.strip()
    if hex_str[:2].lower() == "0x":
        hex_str = hex_str[2:]

    if len(hex_str) % 2 == 1:
        raise DecodingError(f"Hex string {data} has an odd number of characters")

    try:
        return bytes.fromhex(hex_str)
    except ValueError as e:
        raise DecodingError(f"Invalid hex string: {data}") from e


def to_hex(data: bytes) -> str:
    """Returns lowercase 0x-prefixed hex string"""
    return "0x" + data.hex()


def normalize_selector(selector: str | bytes) -> str | None:
    """
    Normalizes a function selector to the lowercase, 0x-prefixed 8 hex digit form.  Returns None if the
    selector is not 4 bytes of valid hex

    >>> from nethermind.multicall.utils import normalize_selector
    >>> normalize_selector("ABCD1234")
    '0xabcd1234'
    >>> normalize_selector(b"\\xab\\xcd\\x12\\x34")
    '0xabcd1234'
    >>> normalize_selector("0x1234") is None
    True
    """
    if isinstance(selector, (bytes, bytearray)):
        selector = selector.hex()

    normalized = selector.strip().lower()
    if not normalized.startswith("0x"):
        normalized = "0x" + normalized

    if _SELECTOR_REGEX.match(normalized) is None:
        return None
    return normalized
