"""
Network Configuration
Named RPC endpoints, account sources and the pinned compiler version
"""

import os
import re
import json
from typing import Dict, List, Mapping, Optional
from loguru import logger
from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

_TEMPLATE_VAR = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def parse_private_keys(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated key list into an ordered sequence

    Args:
        raw: Value of the key list variable (may be None or empty)

    Returns:
        Keys in their original order, whitespace stripped, empties dropped
    """
    if not raw:
        return []

    return [key.strip() for key in raw.split(',') if key.strip()]


class NetworkSettings:
    """
    One named deployment target
    """

    def __init__(
        self,
        key: str,
        url: str,
        name: Optional[str] = None,
        accounts_env: Optional[str] = None,
        chain_id: Optional[int] = None
    ):
        self.key = key
        self.url = url
        self.name = name or key
        self.accounts_env = accounts_env
        self.chain_id = chain_id

    @property
    def uses_node_accounts(self) -> bool:
        """True when the node's own unlocked accounts sign (no keys configured)"""
        return self.accounts_env is None

    def resolve_url(self, env: Optional[Mapping[str, str]] = None) -> str:
        """
        Substitute ${VAR} placeholders in the RPC URL

        Raises:
            ConfigurationError: a referenced variable is unset or empty
        """
        env = os.environ if env is None else env

        def _substitute(match):
            name = match.group(1)
            value = env.get(name)
            if not value:
                raise ConfigurationError(
                    f"{name} must be set to reach network '{self.key}'"
                )
            return value

        return _TEMPLATE_VAR.sub(_substitute, self.url)

    def resolve_accounts(self, env: Optional[Mapping[str, str]] = None) -> List[str]:
        """
        Resolve the private keys for this network

        Returns:
            Ordered key list; empty for networks that sign with node accounts

        Raises:
            ConfigurationError: the network expects keys but none are set
        """
        if self.uses_node_accounts:
            return []

        env = os.environ if env is None else env
        keys = parse_private_keys(env.get(self.accounts_env))

        if not keys:
            raise ConfigurationError(
                f"{self.accounts_env} is empty - no deployer account for network '{self.key}'"
            )

        logger.debug(f"Resolved {len(keys)} account(s) for {self.key}")
        return keys

    def __repr__(self):
        return f"NetworkSettings(key={self.key!r}, url={self.url!r})"


class NetworkConfig:
    """
    Compiler version plus the set of known networks
    """

    def __init__(
        self,
        solidity: str,
        networks: Dict[str, NetworkSettings],
        default_network: str = 'localhost'
    ):
        self.solidity = solidity
        self.networks = networks
        self.default_network = default_network

    @classmethod
    def from_dict(cls, data: Dict) -> 'NetworkConfig':
        if 'solidity' not in data:
            raise ConfigurationError("Network config is missing the 'solidity' version")

        networks = {}
        for key, entry in data.get('networks', {}).items():
            if 'url' not in entry:
                raise ConfigurationError(f"Network '{key}' has no RPC url")

            networks[key] = NetworkSettings(
                key=key,
                url=entry['url'],
                name=entry.get('name'),
                accounts_env=entry.get('accounts_env'),
                chain_id=entry.get('chain_id')
            )

        return cls(
            solidity=data['solidity'],
            networks=networks,
            default_network=data.get('default_network', 'localhost')
        )

    def get_network(self, name: Optional[str] = None) -> NetworkSettings:
        """
        Look up a network by name

        Args:
            name: Network key (None = default network)

        Raises:
            ConfigurationError: unknown network
        """
        name = name or self.default_network

        if name not in self.networks:
            known = ', '.join(sorted(self.networks))
            raise ConfigurationError(f"Unknown network '{name}' (known: {known})")

        return self.networks[name]


def load_network_config(path: str = "config/network_config.json") -> NetworkConfig:
    """Load network configuration from JSON"""
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Network config not found: {path}")

    config = NetworkConfig.from_dict(data)
    logger.debug(f"Loaded {len(config.networks)} network(s), solc {config.solidity}")
    return config
