"""
Blockchain Interaction Package
Handles network configuration, contract deployment, transaction building and nonce management
"""

from .errors import (
    ConfigurationError,
    DeploymentError,
    InsufficientBalanceError,
    NetworkConnectionError,
    TransactionFailedError,
)
from .network_config import NetworkConfig, NetworkSettings, load_network_config, parse_private_keys
from .nonce_manager import NonceManager
from .transaction_builder import TransactionBuilder
from .contract_manager import ContractManager

__all__ = [
    'ConfigurationError',
    'DeploymentError',
    'InsufficientBalanceError',
    'NetworkConnectionError',
    'TransactionFailedError',
    'NetworkConfig',
    'NetworkSettings',
    'load_network_config',
    'parse_private_keys',
    'NonceManager',
    'TransactionBuilder',
    'ContractManager',
]
