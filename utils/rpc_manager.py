"""
RPC Manager
Connects to the RPC endpoint of the selected network
"""

from typing import Mapping, Optional
from web3 import Web3
from loguru import logger

from blockchain.errors import ConfigurationError, NetworkConnectionError
from blockchain.network_config import NetworkSettings


class RPCManager:
    """
    Single-endpoint connection for one deployment run
    """

    def __init__(self, network: NetworkSettings, env: Optional[Mapping[str, str]] = None):
        """
        Initialize RPC Manager

        Args:
            network: Selected network settings
            env: Environment used to fill URL placeholders (None = os.environ)
        """
        self.network = network
        self.http_url = network.resolve_url(env)
        self.w3: Optional[Web3] = None
        self.chain_id: Optional[int] = None

    def connect(self) -> Web3:
        """
        Open the HTTP provider and verify the node answers

        Returns:
            Connected Web3 instance

        Raises:
            NetworkConnectionError: node unreachable
            ConfigurationError: chain id differs from the configured one
        """
        w3 = Web3(Web3.HTTPProvider(self.http_url))

        if not w3.is_connected():
            raise NetworkConnectionError(f"Failed to connect to {self.network.name}")

        chain_id = w3.eth.chain_id

        if self.network.chain_id is not None and chain_id != self.network.chain_id:
            raise ConfigurationError(
                f"{self.network.name} reports chain id {chain_id}, "
                f"expected {self.network.chain_id}"
            )

        self.w3 = w3
        self.chain_id = chain_id

        logger.success(f"Connected to {self.network.name} (chain id {chain_id})")
        return w3

    def get_web3(self) -> Web3:
        """Get the connected Web3 instance, connecting on first use"""
        if self.w3 is None:
            return self.connect()
        return self.w3
