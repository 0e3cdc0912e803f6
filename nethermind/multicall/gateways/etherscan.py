import logging
import os
import threading
import time
from typing import Any

import requests

from nethermind.multicall.decoding.contract_interface import ContractInterface
from nethermind.multicall.exceptions import (
    DecodingError,
    GatewayAuthError,
    GatewayError,
    GatewayHostError,
    GatewayRateLimitError,
)
from nethermind.multicall.types.decoding import ContractMetadata
from nethermind.multicall.types.networks import ETHERSCAN_V2_URL, SupportedNetwork

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("multicall").getChild("gateways").getChild("etherscan")

UNKNOWN_CONTRACT = "Unknown Contract"

REQUEST_TIMEOUT = 10

# Etherscan allows 5 req/sec with an API key, and 1 req/5sec without
API_KEY_REQUEST_INTERVAL = 0.25
NO_API_KEY_REQUEST_INTERVAL = 1.0


def handle_etherscan_error(response: requests.Response) -> Any:
    """
    Check status codes and Response parameters before returning the json result from API.  Responses that
    are valid, but have no result (unverified contracts, missing addresses) return None.

    :param response: requests.Response object
    :return: response.json()['result']
    """
    match response.status_code:
        case 200:
            try:
                response_data = response.json()
            except ValueError as e:
                raise GatewayHostError(f"Etherscan returned invalid JSON: {response.text[:200]}") from e

            if not isinstance(response_data, dict):
                raise GatewayHostError(f"Unexpected Etherscan response: {response.text[:200]}")

            if response_data.get("status") == "1":
                return response_data["result"]

            # Error Handling Section
            error_detail = f"{response_data.get('message', '')} {response_data.get('result', '')}"
            if "rate limit" in error_detail.lower():
                raise GatewayRateLimitError(f"Etherscan rate limit reached: {error_detail.strip()}")
            if "invalid api key" in error_detail.lower():
                raise GatewayAuthError("Invalid Etherscan API Key")

            logger.debug(f"Etherscan returned no result: {error_detail.strip()}")
            return None

        case 429:
            raise GatewayRateLimitError("Etherscan rate limit reached (HTTP 429)")
        case _:
            raise GatewayHostError(
                f"Unexpected Response Status Code ({response.status_code}) for Etherscan API. "
                f"Response Data: {response.text[:200]}"
            )


class EtherscanClient:
    """
    Fetches verified contract ABIs and contract metadata from the Etherscan V2 API.  Requests made through a client
    are throttled to a minimum interval, and all lookups are cached per address for the lifetime of the client.
    Transport and API errors never propagate, and are logged and downgraded to an empty result.
    """

    network: SupportedNetwork
    api_key: str | None
    min_request_interval: float

    _abi_cache: dict[str, ContractInterface | None]
    _metadata_cache: dict[str, ContractMetadata]
    _name_cache: dict[str, str]

    def __init__(
        self,
        api_key: str | None = None,
        network: SupportedNetwork = SupportedNetwork.mainnet,
        min_request_interval: float | None = None,
    ):
        self.api_key = api_key or os.environ.get("ETHERSCAN_API_KEY")
        self.network = network

        if min_request_interval is None:
            min_request_interval = API_KEY_REQUEST_INTERVAL if self.api_key else NO_API_KEY_REQUEST_INTERVAL
        self.min_request_interval = min_request_interval

        self._last_request_time = float("-inf")
        self._throttle_lock = threading.Lock()

        self._abi_cache = {}
        self._metadata_cache = {}
        self._name_cache = {}

        if self.api_key:
            logger.debug(f"Etherscan API key loaded: {self.api_key[:8]}...")
        else:
            logger.debug("No Etherscan API key found.  Requests will be throttled to 1 per second")

    def _throttle(self):
        with self._throttle_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self.min_request_interval:
                wait_time = self.min_request_interval - elapsed
                logger.debug(f"Throttling: waiting {wait_time:.3f}s before next Etherscan request")
                time.sleep(wait_time)

            self._last_request_time = time.monotonic()

    def _query_contract(self, action: str, address: str) -> Any:
        """
        Executes a throttled request against the Etherscan contract module

        :raises GatewayError: on rate limits, invalid API keys, and host errors
        """
        params: dict[str, Any] = {
            "chainid": self.network.chain_id,
            "module": "contract",
            "action": action,
            "address": address,
        }
        if self.api_key:
            params["apikey"] = self.api_key

        self._throttle()

        try:
            response = requests.get(ETHERSCAN_V2_URL, params=params, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise GatewayHostError(f"Request to Etherscan failed: {e}") from e

        return handle_etherscan_error(response)

    def _log_gateway_error(self, error: GatewayError, address: str):
        match error:
            case GatewayRateLimitError():
                logger.warning(f"Rate limit reached for {address}")
            case GatewayAuthError():
                logger.error("Invalid Etherscan API key")
            case _:
                logger.warning(f"Failed to query Etherscan for {address}: {error}")

    def get_interface(self, address: str) -> ContractInterface | None:
        """
        Fetch the verified contract ABI from Etherscan.  Returns None if the contract is not verified, or if the
        request fails.

        :param address: Contract address
        """
        normalized_address = address.lower()

        if normalized_address in self._abi_cache:
            return self._abi_cache[normalized_address]

        try:
            abi_json = self._query_contract("getabi", normalized_address)
        except GatewayError as e:
            self._log_gateway_error(e, address)
            return None

        if abi_json is None:
            logger.info(f"Contract {address} is not verified on Etherscan")
            self._abi_cache[normalized_address] = None
            return None

        try:
            contract_interface = ContractInterface.from_json(normalized_address, abi_json)
        except DecodingError as e:
            logger.warning(f"Etherscan returned an invalid ABI for {address}: {e}")
            return None

        self._abi_cache[normalized_address] = contract_interface
        return contract_interface

    def is_contract_verified(self, address: str) -> bool:
        """Returns True if Etherscan has a verified ABI for the contract"""
        return self.get_interface(address) is not None

    def _get_source_info(self, address: str) -> dict[str, Any] | None:
        try:
            result = self._query_contract("getsourcecode", address)
        except GatewayError as e:
            self._log_gateway_error(e, address)
            return None

        if isinstance(result, list) and len(result) > 0 and isinstance(result[0], dict):
            return result[0]
        return None

    def get_contract_name(self, address: str) -> str:
        """
        Get contract name from Etherscan.  Returns ``Unknown Contract`` if the contract is not verified

        :param address: Contract address
        """
        normalized_address = address.lower()

        if normalized_address in self._name_cache:
            return self._name_cache[normalized_address]

        source_info = self._get_source_info(normalized_address)
        contract_name = source_info.get("ContractName") if source_info else None
        if not contract_name:
            return UNKNOWN_CONTRACT

        self._name_cache[normalized_address] = contract_name
        return contract_name

    def get_contract_metadata(self, address: str) -> ContractMetadata:
        """
        Get contract name, verification status, and proxy implementation from Etherscan.  Used for presentation only.
        If the contract is a proxy, the implementation name is fetched with an additional throttled request.

        :param address: Contract address
        """
        normalized_address = address.lower()

        if normalized_address in self._metadata_cache:
            return self._metadata_cache[normalized_address]

        source_info = self._get_source_info(normalized_address)
        if source_info is None:
            return ContractMetadata(address=normalized_address, display_name=UNKNOWN_CONTRACT, verified=False)

        display_name = source_info.get("ContractName") or UNKNOWN_CONTRACT
        if display_name != UNKNOWN_CONTRACT:
            self._name_cache[normalized_address] = display_name

        implementation = source_info.get("Implementation") or None
        implementation_address = implementation.lower() if implementation else None

        implementation_name = None
        if implementation_address:
            implementation_name = self.get_contract_name(implementation_address)
            if implementation_name == UNKNOWN_CONTRACT:
                implementation_name = None

        metadata = ContractMetadata(
            address=normalized_address,
            display_name=display_name,
            verified=display_name != UNKNOWN_CONTRACT,
            is_proxy=implementation_address is not None,
            implementation_address=implementation_address,
            implementation_display_name=implementation_name,
        )
        self._metadata_cache[normalized_address] = metadata
        return metadata

    def clear_cache(self):
        """Clears cached ABIs, contract names, and metadata"""
        self._abi_cache.clear()
        self._metadata_cache.clear()
        self._name_cache.clear()
