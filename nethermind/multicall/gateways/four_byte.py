import logging

import requests

from nethermind.multicall.decoding.utils import signature_to_name
from nethermind.multicall.types.decoding import SignatureCandidate
from nethermind.multicall.utils import normalize_selector

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("gateways").getChild("four_byte")

FOUR_BYTE_API = "https://www.4byte.directory/api/v1/signatures/"

REQUEST_TIMEOUT = 10


class SignatureDirectory:
    """
    Looks up candidate text signatures for 4 byte selectors from the 4byte directory.  Results are cached
    by normalized selector for the lifetime of the instance.  Selector collisions are common, so callers should
    validate candidates by decoding the call data.
    """

    api_url: str

    _cache: dict[str, list[SignatureCandidate]]

    def __init__(self, api_url: str = FOUR_BYTE_API):
        self.api_url = api_url
        self._cache = {}

    def lookup(self, selector: str) -> list[SignatureCandidate]:
        """
        Lookup function signatures for a selector.  Returns an empty list if the selector is invalid, unknown, or if
        the request fails.

        :param selector: The 4-byte function selector (e.g., "0x12345678").  Prefix and case are normalized
        """
        normalized_selector = normalize_selector(selector)
        if normalized_selector is None:
            logger.warning(f"Invalid function selector {selector}.  Selectors must be 4 bytes of hex")
            return []

        if normalized_selector in self._cache:
            return self._cache[normalized_selector]

        try:
            response = requests.get(
                self.api_url,
                params={"hex_signature": normalized_selector},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            response_data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to lookup selector {normalized_selector}: {e}")
            return []

        results = response_data.get("results") if isinstance(response_data, dict) else None
        if not isinstance(results, list):
            logger.warning(f"Unexpected 4byte response for selector {normalized_selector}")
            return []

        candidates = [
            SignatureCandidate(name=signature_to_name(result["text_signature"]), signature=result["text_signature"])
            for result in results
            if isinstance(result, dict) and result.get("text_signature")
        ]
        logger.debug(f"Found {len(candidates)} signatures for selector {normalized_selector}")

        self._cache[normalized_selector] = candidates
        return candidates

    def clear_cache(self):
        """Clears cached selector lookups"""
        self._cache.clear()
