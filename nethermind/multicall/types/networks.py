from enum import Enum

# Disabling naming check that wants enums to use UPPER_CASE
# pylint: disable=invalid-name

ETHERSCAN_V2_URL = "https://api.etherscan.io/v2/api"


class SupportedNetwork(Enum):
    """Networks that can be queried through the Etherscan V2 API"""

    mainnet = "mainnet"
    goerli = "goerli"
    sepolia = "sepolia"
    polygon = "polygon"
    arbitrum = "arbitrum"
    optimism = "optimism"
    base = "base"

    @property
    def chain_id(self) -> int:
        """Returns the EIP-155 chain id for the network"""
        match self:
            case SupportedNetwork.mainnet:
                return 1
            case SupportedNetwork.goerli:
                return 5
            case SupportedNetwork.sepolia:
                return 11155111
            case SupportedNetwork.polygon:
                return 137
            case SupportedNetwork.arbitrum:
                return 42161
            case SupportedNetwork.optimism:
                return 10
            case SupportedNetwork.base:
                return 8453

    def pretty(self):
        """Returns a pretty version of the network name"""
        match self:
            case SupportedNetwork.mainnet:
                return "Ethereum Mainnet"
            case _:
                return self.value.capitalize()

